"""Models module for fsbench.

This module contains data models organized by domain:
- base: BaseSchema and FrozenSchema for Pydantic models
- enums: WorkloadKind, Metric, BetterDirection, RunState, PriorityMode
- config: RunConfig
- environment: EnvironmentSnapshot
- results: SampleSet, Statistics, BenchmarkRecord, RecordSummary
"""

from fsbench.models.base import BaseSchema, FrozenSchema
from fsbench.models.config import RunConfig
from fsbench.models.enums import (
    BetterDirection,
    Metric,
    MetricUnit,
    PriorityMode,
    RunState,
    SampleSource,
    WorkloadKind,
)
from fsbench.models.environment import GOVERNOR_UNCHANGED, EnvironmentSnapshot
from fsbench.models.results import (
    BenchmarkRecord,
    RecordSummary,
    SampleSet,
    Statistics,
)

__all__ = [
    "BaseSchema",
    "BenchmarkRecord",
    "BetterDirection",
    "EnvironmentSnapshot",
    "FrozenSchema",
    "GOVERNOR_UNCHANGED",
    "Metric",
    "MetricUnit",
    "PriorityMode",
    "RecordSummary",
    "RunConfig",
    "RunState",
    "SampleSet",
    "SampleSource",
    "Statistics",
    "WorkloadKind",
]
