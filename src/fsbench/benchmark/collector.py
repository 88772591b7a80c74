"""Sample extraction from workload trial output.

Each metric is extracted with one of three strategies:

* throughput text: the last ``<number>[ ]<unit>B/s`` token in the
  generator's free-text output, where ``<unit>`` is ``k``/``K``, ``M`` or
  ``G``. Values are normalized to MB/s (KB/s divided by 1024, GB/s
  multiplied by 1024). Earlier tokens are progress lines and are ignored.
* IOPS field: ``jobs[0].<read|write>.iops`` of the random I/O generator's
  JSON report. A missing or null field counts as 0.
* elapsed: the wall-clock duration measured around the operation.
"""

from __future__ import annotations

import json
import math
import re
from typing import TYPE_CHECKING, Any

from fsbench.benchmark.exceptions import ToolOutputError
from fsbench.logging_config import get_logger
from fsbench.models.enums import Metric, SampleSource

if TYPE_CHECKING:
    from fsbench.benchmark.workloads import TrialOutput

__all__ = ["THROUGHPUT_PATTERN", "SampleCollector"]

logger = get_logger(__name__)

THROUGHPUT_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*([kKMG])B/s")

_UNIT_SCALE = {"k": 1 / 1024, "K": 1 / 1024, "M": 1.0, "G": 1024.0}


class SampleCollector:
    """Extracts one numeric sample per metric from a trial's output."""

    def collect(self, metric: Metric, output: TrialOutput) -> float:
        """Extract the sample for ``metric`` from a trial's output.

        Args:
            metric: The metric to extract.
            output: Raw output of the trial that produced the metric.

        Returns:
            The sample, in the metric's unit.

        Raises:
            ToolOutputError: If the output holds no usable value.

        """
        source = metric.source
        if source is SampleSource.throughput_text:
            value = self.parse_throughput(output.text)
        elif source is SampleSource.iops_field:
            value = self.read_iops(output.text, metric.io_direction or "read")
        else:
            value = output.elapsed_seconds

        if not math.isfinite(value) or value < 0:
            raise ToolOutputError(f"Unusable {metric.value} sample: {value!r}")

        logger.debug("sample_collected", metric=metric.value, value=value)
        return value

    @staticmethod
    def parse_throughput(text: str) -> float:
        """Return the last throughput token in ``text``, in MB/s.

        Args:
            text: Free-text generator output.

        Returns:
            Throughput in MB/s.

        Raises:
            ToolOutputError: If no throughput token is present.

        """
        matches = THROUGHPUT_PATTERN.findall(text)
        if not matches:
            raise ToolOutputError("No throughput figure found in tool output")

        number, unit = matches[-1]
        return float(number) * _UNIT_SCALE[unit]

    @staticmethod
    def read_iops(report: str | dict[str, Any], direction: str) -> float:
        """Read the IOPS figure of one direction from a generator report.

        Args:
            report: JSON report text, or the already-parsed mapping.
            direction: ``read`` or ``write``.

        Returns:
            IOPS, or 0.0 when the field is absent or null.

        Raises:
            ToolOutputError: If the report is not valid JSON.

        """
        if isinstance(report, str):
            try:
                data = json.loads(report)
            except json.JSONDecodeError as e:
                raise ToolOutputError(f"Malformed I/O generator report: {e}") from e
        else:
            data = report

        try:
            value = data["jobs"][0][direction]["iops"]
        except (KeyError, IndexError, TypeError):
            return 0.0

        if value is None:
            return 0.0
        try:
            return float(value)
        except (TypeError, ValueError):
            return 0.0
