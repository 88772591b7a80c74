"""Host environment state captured before a benchmark mutates it."""

from __future__ import annotations

from fsbench.models.base import FrozenSchema

__all__ = ["GOVERNOR_UNCHANGED", "EnvironmentSnapshot"]

GOVERNOR_UNCHANGED = "none"


class EnvironmentSnapshot(FrozenSchema):
    """Prior CPU power-management state, used to undo a benchmark's changes.

    Attributes:
        governor: Frequency governor active before the benchmark, or
            ``"none"`` when it was unsupported or already in performance mode.
        boost_control: Control file of the boost knob that was changed,
            relative to the CPU sysfs root. None when nothing was changed.
        boost_state: Value of that control file before the change.

    """

    governor: str = GOVERNOR_UNCHANGED
    boost_control: str | None = None
    boost_state: str | None = None

    @property
    def governor_changed(self) -> bool:
        """Whether the governor must be put back."""
        return self.governor != GOVERNOR_UNCHANGED

    @property
    def boost_changed(self) -> bool:
        """Whether the boost knob must be put back."""
        return self.boost_control is not None and self.boost_state is not None
