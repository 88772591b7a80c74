"""State machine abstractions for fsbench.

This module provides a generic mixin for entities whose lifecycle is a
set of states with explicit allowed transitions.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Generic, TypeVar

from fsbench.benchmark.exceptions import BenchmarkError

__all__ = ["InvalidTransitionError", "StateMachineMixin"]

StateT = TypeVar("StateT")


class InvalidTransitionError(BenchmarkError):
    """Exception for a transition the state machine does not allow."""

    pass


class StateMachineMixin(Generic[StateT]):
    """Mixin providing common state machine operations.

    Type Parameters:
        StateT: The enum type representing possible states.

    Usage:
        Define class attributes:
        - _VALID_TRANSITIONS: dict[StateT, set[StateT]] - transition rules
        - _TERMINAL_STATES: set[StateT] - states with no outgoing transitions

        Implement _get_current_state() and _set_current_state().

    Example:
        class Job(StateMachineMixin[JobState]):
            _VALID_TRANSITIONS = {
                JobState.pending: {JobState.running, JobState.failed},
                JobState.running: {JobState.done, JobState.failed},
            }
            _TERMINAL_STATES = {JobState.done, JobState.failed}

    """

    _VALID_TRANSITIONS: dict[StateT, set[StateT]]
    _TERMINAL_STATES: set[StateT]

    @abstractmethod
    def _get_current_state(self) -> StateT:
        """Get the current state of the entity."""
        ...

    @abstractmethod
    def _set_current_state(self, state: StateT) -> None:
        """Store a new current state."""
        ...

    def can_transition_to(self, new_state: StateT) -> bool:
        """Check if a transition to the given state is valid.

        Args:
            new_state: The target state to check.

        Returns:
            True if the transition is allowed, False otherwise.

        """
        current = self._get_current_state()
        return new_state in self._VALID_TRANSITIONS.get(current, set())

    def transition_to(self, new_state: StateT) -> None:
        """Move to ``new_state``.

        Args:
            new_state: The target state.

        Raises:
            InvalidTransitionError: If the transition is not allowed.

        """
        if not self.can_transition_to(new_state):
            raise InvalidTransitionError(
                f"Invalid transition from {self._get_current_state()} to {new_state}"
            )
        self._set_current_state(new_state)

    def is_terminal(self) -> bool:
        """Check if the entity is in a terminal state.

        Returns:
            True if the current state has no valid outgoing transitions.

        """
        return self._get_current_state() in self._TERMINAL_STATES

    def get_valid_transitions(self) -> list[StateT]:
        """Get the list of valid states the entity can transition to.

        Returns:
            List of valid target states from the current state.

        """
        current = self._get_current_state()
        return list(self._VALID_TRANSITIONS.get(current, set()))
