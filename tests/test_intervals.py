"""Tick interval classification, calendar intervals and timeline helpers."""

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from healthcharts.data import RecordToDayRatio, TickInterval
from healthcharts.numeric.intervals import (
    calculate_optimal_max_records,
    calculate_separator_step,
    determine_record_to_day_ratio,
    determine_tick_interval,
    generate_normalized_intervals,
    generate_timeline,
    increment_interval,
    map_timestamp_to_interval_index,
    map_to_intervals,
    normalize_to_interval_start,
)
from tests.conftest import get_test_logger

logger = get_test_logger(__name__)
logger.info("Starting tests for interval helpers")


@pytest.mark.parametrize(
    ("days", "expected"),
    [
        (800, TickInterval.MONTH),
        (730, TickInterval.MONTH),
        (150, TickInterval.WEEK),
        (40, TickInterval.DAY),
        (30, TickInterval.DAY),
        (10, TickInterval.HOUR),
        (0, TickInterval.HOUR),
    ],
)
def test_determine_tick_interval_thresholds(days: int, expected: TickInterval) -> None:
    """Durations map to the coarsest interval whose threshold they reach."""
    assert determine_tick_interval(timedelta(days=days)) is expected


def test_week_start_is_sunday() -> None:
    """Weekly boundaries are aligned on the preceding Sunday at midnight."""
    wednesday = datetime(2024, 1, 3, 15, 30)
    assert normalize_to_interval_start(wednesday, TickInterval.WEEK) == datetime(2023, 12, 31)
    sunday = datetime(2023, 12, 31, 9, 0)
    assert normalize_to_interval_start(sunday, TickInterval.WEEK) == datetime(2023, 12, 31)


def test_month_increment_rolls_over_year() -> None:
    """December steps into January of the next year."""
    assert increment_interval(datetime(2023, 12, 1), TickInterval.MONTH) == datetime(2024, 1, 1)
    assert increment_interval(datetime(2024, 1, 1, 5), TickInterval.HOUR) == datetime(2024, 1, 1, 6)


def test_generate_normalized_intervals_includes_final_boundary() -> None:
    """Daily boundaries cover the range and always end on the normalized end day."""
    logger.info("Running daily interval generation test")
    start = datetime(2024, 1, 1, 10, 0)
    end = datetime(2024, 1, 3, 5, 0)

    intervals = generate_normalized_intervals(start, end, TickInterval.DAY)

    assert intervals[:3] == [datetime(2024, 1, 1), datetime(2024, 1, 2), datetime(2024, 1, 3)]
    assert intervals[-1] == datetime(2024, 1, 3)


def test_generate_normalized_intervals_empty_for_inverted_range() -> None:
    """An inverted range produces no boundaries."""
    assert generate_normalized_intervals(datetime(2024, 2, 1), datetime(2024, 1, 1), TickInterval.DAY) == []


def test_map_timestamp_to_interval_index_clamps() -> None:
    """Indices resolve to the latest boundary not after the timestamp, clamped to range."""
    intervals = [datetime(2024, 1, 1), datetime(2024, 1, 2), datetime(2024, 1, 3)]

    assert map_timestamp_to_interval_index(datetime(2024, 1, 2, 13), intervals, TickInterval.DAY) == 1
    assert map_timestamp_to_interval_index(datetime(2023, 12, 30), intervals, TickInterval.DAY) == 0
    assert map_timestamp_to_interval_index(datetime(2024, 3, 1), intervals, TickInterval.DAY) == 2
    assert map_timestamp_to_interval_index(datetime(2024, 1, 2), [], TickInterval.DAY) == 0


def test_generate_timeline_and_mapping() -> None:
    """The timeline carries range, interval and boundaries usable for index mapping."""
    start = datetime(2024, 1, 1)
    end = datetime(2024, 2, 15)

    timeline = generate_timeline(start, end)

    assert timeline.date_range == end - start
    assert timeline.tick_interval is TickInterval.DAY
    assert timeline.normalized_intervals[0] == start
    indices = map_to_intervals([datetime(2024, 1, 1, 12), datetime(2024, 1, 10, 8)], timeline)
    assert indices == [0, 9]
    assert map_to_intervals([], timeline) == []


def test_calculate_separator_step() -> None:
    """Label steps keep the number of separators inside the per-interval target."""
    assert calculate_separator_step(TickInterval.DAY, 100, timedelta(days=30)) == 8.0
    assert calculate_separator_step(TickInterval.HOUR, 10, timedelta(hours=5)) == 1.0
    assert calculate_separator_step(TickInterval.MONTH, 120, timedelta(days=3650)) == 10.0


@pytest.mark.parametrize(
    ("ratio", "expected"),
    [
        (Decimal("0.000005"), RecordToDayRatio.SECOND),
        (0.0004, RecordToDayRatio.MINUTE),
        (0.01, RecordToDayRatio.HOUR),
        (0.3, RecordToDayRatio.DAY),
        (2, RecordToDayRatio.WEEK),
        (5, RecordToDayRatio.MONTH),
        (20, RecordToDayRatio.YEAR),
    ],
)
def test_determine_record_to_day_ratio(ratio: Decimal | float, expected: RecordToDayRatio) -> None:
    """Records-per-day ratios classify into a sampling resolution."""
    assert determine_record_to_day_ratio(ratio) is expected


def test_calculate_optimal_max_records() -> None:
    """Only windows longer than two years receive a record cap."""
    start = datetime(2020, 1, 1)
    assert calculate_optimal_max_records(start, start + timedelta(days=365)) is None
    assert calculate_optimal_max_records(start, start + timedelta(days=1000)) == 10_000
