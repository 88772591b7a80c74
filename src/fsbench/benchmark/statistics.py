"""Summary statistics for benchmark samples.

Computes best/worst/median/mean, population standard deviation and the
variance ratio for one metric's samples. Uses only stdlib modules.
"""

from __future__ import annotations

import statistics as stats
from collections.abc import Sequence

from fsbench.config.defaults import HIGH_VARIANCE_PERCENT
from fsbench.models.enums import BetterDirection
from fsbench.models.results import SampleSet, Statistics

__all__ = ["summarize", "summarize_sample_set", "variance_ratio"]


def variance_ratio(stddev: float, median: float) -> float:
    """Return ``stddev / median`` as a percentage, or 0 when median is 0.

    Args:
        stddev: Standard deviation of the samples.
        median: Median of the samples.

    Returns:
        The ratio in percent.

    """
    if median == 0:
        return 0.0
    return stddev / median * 100


def summarize(
    samples: Sequence[float],
    better_direction: BetterDirection,
    high_variance_percent: float = HIGH_VARIANCE_PERCENT,
) -> Statistics:
    """Summarize one metric's samples.

    The standard deviation is the population form (divided by N). An
    empty sequence produces a "no data" result instead of raising.

    Args:
        samples: Samples in run order.
        better_direction: Which extreme counts as best.
        high_variance_percent: Variance ratio above which results are
            flagged as unreliable.

    Returns:
        Statistics for the samples.

    """
    values = tuple(float(v) for v in samples)
    if not values:
        return Statistics()

    median = stats.median(values)
    stddev = stats.pstdev(values)
    ratio = variance_ratio(stddev, median)

    if better_direction is BetterDirection.lower:
        best, worst = min(values), max(values)
    else:
        best, worst = max(values), min(values)

    return Statistics(
        count=len(values),
        samples=values,
        best=best,
        worst=worst,
        median=median,
        mean=stats.fmean(values),
        stddev=stddev,
        variance_ratio=ratio,
        high_variance=ratio > high_variance_percent,
    )


def summarize_sample_set(
    sample_set: SampleSet,
    high_variance_percent: float = HIGH_VARIANCE_PERCENT,
) -> Statistics:
    """Summarize a sample set using its metric's better direction.

    Args:
        sample_set: Samples of one metric.
        high_variance_percent: Variance warning threshold in percent.

    Returns:
        Statistics for the sample set.

    """
    return summarize(
        sample_set.values,
        sample_set.metric.better_direction,
        high_variance_percent=high_variance_percent,
    )
