"""Weekly and hourly bucket distributions with frequency shading."""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from pathlib import Path
from typing import List

import pytest

from healthcharts.config import DistributionConfig, Settings, load_settings
from healthcharts.data import MetricData, TickInterval
from healthcharts.strategies import (
    BucketDistributionStrategy,
    DistributionMode,
    HourlyDistributionStrategy,
    StrategyType,
    WeeklyDistributionStrategy,
    apply_settings,
)
from tests.conftest import get_test_logger
from tests.helpers import build_canonical_series, build_metric_series, weekday_samples

logger = get_test_logger(__name__)
logger.info("Starting tests for distribution strategies")

WEEK_START = datetime(2024, 1, 1)
WEEK_END = datetime(2024, 1, 7, 23, 59)


def test_weekly_distribution_two_days(week_of_samples: List[MetricData]) -> None:
    """Monday and Tuesday samples fill two buckets; the rest report NaN."""
    logger.info("Running weekly distribution test")
    strategy = WeeklyDistributionStrategy(week_of_samples, "Heart rate", WEEK_START, WEEK_END)

    result = strategy.compute()
    extended = strategy.extended_result

    assert extended is not None
    assert extended.counts == [1, 1, 0, 0, 0, 0, 0]
    assert extended.mins[0] == extended.maxs[0] == 100.0
    assert extended.ranges[0] == 0.0
    for bucket in range(2, 7):
        assert math.isnan(extended.mins[bucket])
        assert math.isnan(extended.maxs[bucket])
        assert math.isnan(extended.ranges[bucket])
    assert extended.global_min == 100.0
    assert extended.global_max == 100.0
    assert extended.bins == []
    assert extended.unit == "bpm"

    assert result.primary_raw[:2] == [100.0, 100.0]
    assert result.primary_smoothed[:2] == [0.0, 0.0]
    assert math.isnan(result.primary_raw[6])
    assert result.timestamps == []
    assert result.tick_interval is TickInterval.DAY
    assert result.date_range == WEEK_END - WEEK_START
    assert strategy.strategy_type is StrategyType.WEEKLY_DISTRIBUTION


def test_weekly_distribution_bins_every_value() -> None:
    """Frequencies per bucket sum to the bucket counts and normalize to a maximum of one."""
    samples = weekday_samples({0: [60.0, 80.0], 1: [100.0], 4: [70.0, 72.0, 74.0]})
    strategy = WeeklyDistributionStrategy(samples, "HR", WEEK_START, WEEK_END)

    strategy.compute()
    extended = strategy.extended_result

    assert extended.global_min == 60.0
    assert extended.global_max == 100.0
    assert extended.bin_size == pytest.approx(5.0)
    for bucket in range(7):
        assert sum(extended.frequencies_per_bucket[bucket].values()) == extended.counts[bucket]
    peak = max(value for bucket in extended.normalized_frequencies_per_bucket.values() for value in bucket.values())
    assert peak == 1.0
    assert extended.bucket_values[4] == [70.0, 72.0, 74.0]


def test_distribution_range_summary() -> None:
    """The range summary reports per-bucket averages next to min and max."""
    samples = weekday_samples({2: [10.0, 20.0, 30.0]})
    strategy = WeeklyDistributionStrategy(samples, None, WEEK_START, WEEK_END)
    strategy.compute()

    summary = strategy.extended_result.to_range_result()

    assert summary.averages[2] == pytest.approx(20.0)
    assert math.isnan(summary.averages[0])
    assert summary.mins[2] == 10.0
    assert summary.maxs[2] == 30.0


def test_hourly_distribution_uses_hour_of_day() -> None:
    """Two days of hourly readings give two samples in each of 24 buckets."""
    data = build_metric_series([float(idx % 24) for idx in range(48)], unit="bpm")
    strategy = HourlyDistributionStrategy(data, "HR", WEEK_START, WEEK_END)

    result = strategy.compute()
    extended = strategy.extended_result

    assert extended.bucket_count == 24
    assert extended.counts == [2] * 24
    assert extended.mins[5] == 5.0
    assert extended.ranges[5] == 0.0
    assert extended.global_min == 0.0
    assert extended.global_max == 23.0
    assert len(result.primary_raw) == 24
    assert strategy.strategy_type is StrategyType.HOURLY_DISTRIBUTION


def test_distribution_accepts_canonical_series() -> None:
    """Canonical samples are bucketed by their local time in the requested zone."""
    series = build_canonical_series([1.0, 2.0, 3.0], step=timedelta(days=1), unit="h")
    strategy = BucketDistributionStrategy(
        series, "Sleep", WEEK_START, WEEK_END, DistributionMode.WEEKLY, timezone="UTC"
    )

    strategy.compute()

    assert strategy.extended_result.counts[:3] == [1, 1, 1]
    assert strategy.unit == "h"


def test_distribution_without_data_is_none() -> None:
    """Empty input, out-of-range input and inverted ranges give no result."""
    assert WeeklyDistributionStrategy([], "HR", WEEK_START, WEEK_END).compute() is None
    assert WeeklyDistributionStrategy(None, "HR", WEEK_START, WEEK_END).compute() is None

    late = weekday_samples({0: [1.0]})
    strategy = WeeklyDistributionStrategy(late, "HR", WEEK_END, WEEK_START)
    assert strategy.compute() is None
    assert strategy.extended_result is None


def test_shading_intervals_cover_all_values(tmp_path: Path) -> None:
    """Uniform shading intervals count every bucket value once."""
    from tests.helpers import write_settings

    settings = load_settings(write_settings({"distribution": {"interval_count": 8}}, tmp_path / "settings.yaml"))
    samples = weekday_samples({0: [60.0, 80.0], 3: [100.0, 90.0]})
    strategy = WeeklyDistributionStrategy(samples, "HR", WEEK_START, WEEK_END)
    assert strategy.shading() is None

    strategy.compute()
    shading = strategy.shading(settings.distribution.interval_count)

    assert len(shading.intervals) == 8
    assert shading.intervals[-1][1] == 100.0
    assert sum(shading.frequencies[0].values()) == 2
    assert sum(shading.frequencies[3].values()) == 2
    assert shading.count_range == (1, 1)
    assert max(shading.normalized[3].values()) == 1.0


def test_weekly_distribution_with_large_magnitude_values() -> None:
    """Values far beyond the float spacing of the bin width are still binned."""
    samples = weekday_samples({0: [1e16], 1: [1e16 + 4]})
    strategy = WeeklyDistributionStrategy(samples, "Steps", WEEK_START, WEEK_END)

    assert strategy.compute() is not None
    extended = strategy.extended_result
    assert extended.global_max == 1e16 + 4
    assert sum(sum(counts.values()) for counts in extended.frequencies_per_bucket.values()) == 2


def test_distribution_settings_drive_bins_and_shading() -> None:
    """Bin limits and the shading interval count come from the distribution settings."""
    samples = weekday_samples({0: [60.0, 80.0], 1: [100.0]})
    strategy = WeeklyDistributionStrategy(samples, "HR", WEEK_START, WEEK_END)
    apply_settings(strategy, Settings(distribution=DistributionConfig(interval_count=6, max_bins=4)))

    strategy.compute()

    assert strategy.extended_result.bin_size == pytest.approx(10.0)
    assert len(strategy.extended_result.bins) == 4
    assert len(strategy.shading().intervals) == 6
    assert len(strategy.shading(3).intervals) == 3
