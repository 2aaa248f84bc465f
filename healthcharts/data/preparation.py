"""Ordering, range filtering and alignment of metric point collections."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .models import MetricData, TickInterval

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PreparedPair:
    left: List[MetricData]
    right: List[MetricData]
    date_range: timedelta
    tick_interval: TickInterval


def prepare_ordered_data(source: Optional[Iterable[MetricData]]) -> List[MetricData]:
    """Drop points without a value and order the rest by timestamp."""
    if source is None:
        return []
    valued = [point for point in source if point is not None and point.value is not None]
    return sorted(valued, key=lambda point: point.normalized_timestamp)


def filter_and_order_by_range(
    source: Optional[Iterable[MetricData]],
    start: datetime,
    end: datetime,
) -> List[MetricData]:
    """Like :func:`prepare_ordered_data` but keeps only ``start <= ts <= end``."""
    if source is None:
        return []
    kept = [
        point
        for point in source
        if point is not None and point.value is not None and start <= point.normalized_timestamp <= end
    ]
    return sorted(kept, key=lambda point: point.normalized_timestamp)


def prepare_data_for_computation(
    left: Optional[Iterable[MetricData]],
    right: Optional[Iterable[MetricData]],
    start: datetime,
    end: datetime,
) -> Optional[PreparedPair]:
    """Order both inputs and validate the requested window.

    Returns ``None`` when both inputs are missing or empty, or when the window
    is inverted or has no duration. Points are not range filtered here.
    """
    from healthcharts.numeric.intervals import determine_tick_interval

    if left is None and right is None:
        return None
    ordered_left = prepare_ordered_data(left)
    ordered_right = prepare_ordered_data(right)
    if not ordered_left and not ordered_right:
        logger.debug("Both series are empty; nothing to prepare")
        return None
    if start > end:
        logger.debug("Inverted range %s > %s", start, end)
        return None
    date_range = end - start
    if date_range <= timedelta(0):
        return None
    return PreparedPair(ordered_left, ordered_right, date_range, determine_tick_interval(date_range))


def combine_timestamps(left: Iterable[MetricData], right: Iterable[MetricData]) -> List[datetime]:
    stamps = {point.normalized_timestamp for point in left}
    stamps.update(point.normalized_timestamp for point in right)
    return sorted(stamps)


def timestamp_value_map(points: Iterable[MetricData]) -> Dict[datetime, float]:
    """Map each timestamp to the first value recorded for it."""
    mapping: Dict[datetime, float] = {}
    for point in points:
        if point.value is None or point.normalized_timestamp in mapping:
            continue
        mapping[point.normalized_timestamp] = float(point.value)
    return mapping


def create_timestamp_value_dictionaries(
    left: Iterable[MetricData],
    right: Iterable[MetricData],
) -> Tuple[Dict[datetime, float], Dict[datetime, float]]:
    return timestamp_value_map(left), timestamp_value_map(right)


def extract_aligned_raw_values(
    timestamps: Sequence[datetime],
    left: Dict[datetime, float],
    right: Dict[datetime, float],
) -> Tuple[List[float], List[float]]:
    nan = float("nan")
    return [left.get(ts, nan) for ts in timestamps], [right.get(ts, nan) for ts in timestamps]


def align_by_index(
    left: Sequence[MetricData],
    right: Sequence[MetricData],
    count: int,
) -> Tuple[List[datetime], List[float], List[float]]:
    """Pair the first ``count`` points positionally; timestamps come from ``left``."""
    timestamps: List[datetime] = []
    primary: List[float] = []
    secondary: List[float] = []
    for index in range(count):
        timestamps.append(left[index].normalized_timestamp)
        primary.append(left[index].as_float())
        secondary.append(right[index].as_float())
    return timestamps, primary, secondary


__all__ = [
    "PreparedPair",
    "prepare_ordered_data",
    "filter_and_order_by_range",
    "prepare_data_for_computation",
    "combine_timestamps",
    "timestamp_value_map",
    "create_timestamp_value_dictionaries",
    "extract_aligned_raw_values",
    "align_by_index",
]
