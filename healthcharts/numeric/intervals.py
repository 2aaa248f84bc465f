"""Tick interval classification and calendar-aligned interval generation."""
from __future__ import annotations

import math
from bisect import bisect_right
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional, Sequence

from healthcharts.data.models import RecordToDayRatio, TickInterval

_MAX_RECORDS = 10_000


@dataclass(frozen=True, slots=True)
class Timeline:
    date_range: timedelta
    tick_interval: TickInterval
    normalized_intervals: List[datetime] = field(default_factory=list)
    start: Optional[datetime] = None
    end: Optional[datetime] = None


def determine_tick_interval(date_range: timedelta) -> TickInterval:
    """Classify a duration; anything shorter than a month maps to ``HOUR``."""
    total_days = date_range.total_seconds() / 86400.0
    if total_days / 365.0 >= 2:
        return TickInterval.MONTH
    if total_days / 30.0 >= 4:
        return TickInterval.WEEK
    if total_days / 30.0 >= 1:
        return TickInterval.DAY
    return TickInterval.HOUR


def normalize_to_interval_start(timestamp: datetime, interval: TickInterval) -> datetime:
    if interval is TickInterval.MONTH:
        return datetime(timestamp.year, timestamp.month, 1)
    if interval is TickInterval.WEEK:
        midnight = datetime(timestamp.year, timestamp.month, timestamp.day)
        # weeks start on Sunday
        return midnight - timedelta(days=(timestamp.weekday() + 1) % 7)
    if interval is TickInterval.DAY:
        return datetime(timestamp.year, timestamp.month, timestamp.day)
    return timestamp.replace(minute=0, second=0, microsecond=0, tzinfo=None)


def increment_interval(timestamp: datetime, interval: TickInterval) -> datetime:
    if interval is TickInterval.MONTH:
        if timestamp.month == 12:
            return timestamp.replace(year=timestamp.year + 1, month=1)
        return timestamp.replace(month=timestamp.month + 1)
    if interval is TickInterval.WEEK:
        return timestamp + timedelta(days=7)
    if interval is TickInterval.DAY:
        return timestamp + timedelta(days=1)
    return timestamp + timedelta(hours=1)


def generate_normalized_intervals(start: datetime, end: datetime, interval: TickInterval) -> List[datetime]:
    """Calendar-aligned boundaries covering ``[start, end]``.

    The normalized end boundary is appended whenever the last generated
    boundary falls before ``end``, even if that repeats it.
    """
    intervals: List[datetime] = []
    if start > end:
        return intervals

    current = normalize_to_interval_start(start, interval)
    last = normalize_to_interval_start(end, interval)
    while current <= last:
        intervals.append(current)
        try:
            current = increment_interval(current, interval)
        except (OverflowError, ValueError):
            break

    if not intervals or intervals[-1] < end:
        intervals.append(last)
    return intervals


def map_timestamp_to_interval_index(
    timestamp: datetime,
    intervals: Sequence[datetime],
    interval: TickInterval,
) -> int:
    """Index of the latest boundary not after the normalized timestamp."""
    if not intervals:
        return 0
    normalized = normalize_to_interval_start(timestamp, interval)
    index = bisect_right(intervals, normalized) - 1
    return min(max(index, 0), len(intervals) - 1)


def generate_timeline(start: datetime, end: datetime) -> Timeline:
    date_range = end - start
    tick_interval = determine_tick_interval(date_range)
    return Timeline(
        date_range=date_range,
        tick_interval=tick_interval,
        normalized_intervals=generate_normalized_intervals(start, end, tick_interval),
        start=start,
        end=end,
    )


def map_to_intervals(timestamps: Sequence[datetime], timeline: Timeline) -> List[int]:
    if not timestamps:
        return []
    return [
        map_timestamp_to_interval_index(ts, timeline.normalized_intervals, timeline.tick_interval)
        for ts in timestamps
    ]


def calculate_separator_step(interval: TickInterval, point_count: int, date_range: timedelta) -> float:
    """Label step so that roughly a readable number of separators is shown."""
    days = date_range.total_seconds() / 86400.0
    if interval is TickInterval.MONTH:
        target = max(6.0, min(12.0, days / 30.0))
    elif interval is TickInterval.WEEK:
        target = max(4.0, min(8.0, days / 7.0))
    elif interval is TickInterval.DAY:
        target = max(7.0, min(14.0, days))
    else:
        target = max(12.0, min(24.0, days * 24.0))
    return max(1.0, float(math.ceil(point_count / target)))


def determine_record_to_day_ratio(ratio: Decimal | float) -> RecordToDayRatio:
    value = Decimal(str(ratio))
    if value <= Decimal(1) / Decimal(100000):
        return RecordToDayRatio.SECOND
    if value <= Decimal(1) / Decimal(2000):
        return RecordToDayRatio.MINUTE
    if value <= Decimal(1) / Decimal(50):
        return RecordToDayRatio.HOUR
    if value <= Decimal(1) / Decimal(2):
        return RecordToDayRatio.DAY
    if value <= 3:
        return RecordToDayRatio.WEEK
    if value <= 8:
        return RecordToDayRatio.MONTH
    return RecordToDayRatio.YEAR


def calculate_optimal_max_records(start: datetime, end: datetime) -> Optional[int]:
    """Row cap for a query window, ``None`` when no cap is needed."""
    total_days = (end - start).total_seconds() / 86400.0
    if total_days <= 730:
        return None
    if total_days * 24.0 > _MAX_RECORDS:
        return _MAX_RECORDS
    return None


__all__ = [
    "Timeline",
    "determine_tick_interval",
    "normalize_to_interval_start",
    "increment_interval",
    "generate_normalized_intervals",
    "map_timestamp_to_interval_index",
    "generate_timeline",
    "map_to_intervals",
    "calculate_separator_step",
    "determine_record_to_day_ratio",
    "calculate_optimal_max_records",
]
