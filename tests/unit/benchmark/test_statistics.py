"""Unit tests for benchmark summary statistics."""

import math

import pytest

from fsbench.benchmark.statistics import summarize, summarize_sample_set, variance_ratio
from fsbench.models.enums import BetterDirection, Metric
from fsbench.models.results import SampleSet


class TestVarianceRatio:
    """Tests for variance_ratio."""

    def test_ratio_is_percentage_of_median(self) -> None:
        """Test that the ratio is stddev / median * 100."""
        assert variance_ratio(5.0, 100.0) == pytest.approx(5.0)

    def test_zero_median_yields_zero(self) -> None:
        """Test that a zero median does not divide by zero."""
        assert variance_ratio(3.0, 0.0) == 0.0


class TestSummarize:
    """Tests for summarize."""

    def test_sequential_write_samples(self) -> None:
        """Test summary of three throughput samples."""
        samples = [120.5, 118.0, 121.0]

        result = summarize(samples, BetterDirection.higher)

        assert result.count == 3
        assert result.best == 121.0
        assert result.worst == 118.0
        assert result.median == 120.5
        assert result.mean == pytest.approx(119.833333, abs=1e-5)
        assert result.stddev == pytest.approx(1.312335, abs=1e-5)
        assert result.variance_ratio == pytest.approx(1.089074, abs=1e-5)
        assert result.high_variance is False

    def test_outlier_triggers_high_variance(self) -> None:
        """Test that one failing trial among good ones is flagged."""
        result = summarize([5000.0, 5200.0, 100.0], BetterDirection.higher)

        assert result.best == 5200.0
        assert result.worst == 100.0
        assert result.median == 5000.0
        assert result.variance_ratio is not None
        assert result.variance_ratio > 10.0
        assert result.high_variance is True

    def test_lower_is_better_for_elapsed_time(self) -> None:
        """Test that best is the minimum for lower-is-better metrics."""
        result = summarize([2.5, 1.9, 2.1], BetterDirection.lower)

        assert result.best == 1.9
        assert result.worst == 2.5

    def test_single_sample(self) -> None:
        """Test that one sample has zero spread."""
        result = summarize([42.0], BetterDirection.higher)

        assert result.count == 1
        assert result.best == result.worst == result.median == 42.0
        assert result.stddev == 0.0
        assert result.variance_ratio == 0.0

    def test_empty_samples_produce_no_data(self) -> None:
        """Test that no samples produce an empty result instead of raising."""
        result = summarize([], BetterDirection.higher)

        assert result.count == 0
        assert result.has_data is False
        assert result.best is None
        assert result.median is None
        assert result.stddev is None

    def test_all_zero_samples(self) -> None:
        """Test that all-zero samples report a zero variance ratio."""
        result = summarize([0.0, 0.0, 0.0], BetterDirection.higher)

        assert result.median == 0.0
        assert result.variance_ratio == 0.0
        assert result.high_variance is False

    def test_custom_threshold(self) -> None:
        """Test that the warning threshold is configurable."""
        samples = [100.0, 104.0, 96.0]

        assert summarize(samples, BetterDirection.higher).high_variance is False
        assert summarize(samples, BetterDirection.higher, high_variance_percent=1.0).high_variance

    def test_population_stddev_of_five_values(self) -> None:
        """Test the population stddev of 1..5, sqrt(10 / 5)."""
        result = summarize([1.0, 2.0, 3.0, 4.0, 5.0], BetterDirection.higher)

        assert result.median == 3.0
        assert result.mean == 3.0
        assert result.stddev == pytest.approx(math.sqrt(2), abs=1e-6)
        assert result.stddev == pytest.approx(1.414214, abs=1e-6)

    def test_equal_nonzero_samples_have_zero_stddev(self) -> None:
        """Test that identical samples have no spread."""
        result = summarize([250.0, 250.0, 250.0, 250.0], BetterDirection.higher)

        assert result.stddev == 0.0
        assert result.variance_ratio == 0.0
        assert result.median == 250.0

    def test_two_sample_median(self) -> None:
        """Test that the median of two samples is their average."""
        result = summarize([3.0, 5.0], BetterDirection.higher)

        assert result.median == 4.0
        assert result.stddev == 1.0

    def test_even_count_median(self) -> None:
        """Test that the median of an even count averages the middle pair."""
        result = summarize([1.0, 2.0, 3.0, 4.0], BetterDirection.higher)

        assert result.median == 2.5

    def test_samples_kept_in_run_order(self) -> None:
        """Test that the summarized samples keep run order."""
        result = summarize([3.0, 1.0, 2.0], BetterDirection.higher)

        assert result.samples == (3.0, 1.0, 2.0)


class TestSummarizeSampleSet:
    """Tests for summarize_sample_set."""

    def test_uses_metric_direction(self) -> None:
        """Test that elapsed-time metrics pick the lowest sample as best."""
        sample_set = SampleSet(Metric.file_create_time, values=[0.8, 0.6, 0.7])

        result = summarize_sample_set(sample_set)

        assert result.best == 0.6

    def test_missing_trials_are_not_samples(self) -> None:
        """Test that missing trials do not count as samples."""
        sample_set = SampleSet(Metric.rand_read_iops)
        sample_set.append(1000.0)
        sample_set.mark_missing()

        result = summarize_sample_set(sample_set)

        assert result.count == 1
        assert sample_set.missing == 1
