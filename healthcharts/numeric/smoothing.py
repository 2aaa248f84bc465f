"""Time-windowed averaging and re-interpolation onto a timestamp grid."""
from __future__ import annotations

import logging
import math
from bisect import bisect_right
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from healthcharts.data.models import MetricData, SmoothedDataPoint

logger = logging.getLogger(__name__)

MAX_POINTS_PER_BIN = 10
_MICROSECOND = timedelta(microseconds=1)


def number_of_bins(point_count: int, max_points_per_bin: int = MAX_POINTS_PER_BIN) -> int:
    return max(1, math.ceil(point_count / max_points_per_bin))


def _bin_width(start: datetime, end: datetime, bins: int) -> Optional[float]:
    """Bin width in microseconds, ``None`` when it cannot be computed."""
    try:
        span = (end - start) / _MICROSECOND
    except OverflowError:
        return None
    if span <= 0:
        return None
    width = span / bins
    if width <= 0 or not math.isfinite(width):
        return None
    return width


def create_smoothed_data(
    data: Sequence[MetricData],
    start: datetime,
    end: datetime,
    *,
    max_points_per_bin: int = MAX_POINTS_PER_BIN,
) -> List[SmoothedDataPoint]:
    """Average ``data`` into time bins of at most ``max_points_per_bin`` points on average.

    Each bin yields the mean value at the mean member timestamp. When the
    ``[start, end]`` span gives no usable bin width the points are binned by
    position instead (see :func:`smooth_by_point_count`).
    """
    if not data:
        return []
    bins = number_of_bins(len(data), max_points_per_bin)
    width = _bin_width(start, end, bins)
    if width is None:
        logger.debug("Falling back to point-count smoothing for %s points", len(data))
        return smooth_by_point_count(data, bins)

    valued = [point for point in data if point.value is not None]
    if not valued:
        return []
    try:
        offsets = np.array([(point.normalized_timestamp - start) / _MICROSECOND for point in valued], dtype=float)
    except OverflowError:
        return smooth_by_point_count(data, bins)
    indices = np.clip(np.trunc(offsets / width), 0, bins - 1).astype(int)

    frame = pd.DataFrame(
        {
            "bin": indices,
            "value": [point.as_float() for point in valued],
            "offset": offsets,
        }
    )
    grouped = frame.groupby("bin", sort=True)[["value", "offset"]].mean()

    smoothed: List[SmoothedDataPoint] = []
    for value, offset in zip(grouped["value"], grouped["offset"]):
        if not math.isfinite(offset):
            continue
        try:
            stamp = start + timedelta(microseconds=round(offset))
        except OverflowError:
            continue
        smoothed.append(SmoothedDataPoint(stamp, float(value)))
    smoothed.sort(key=lambda point: point.timestamp)
    return smoothed


def smooth_by_point_count(data: Sequence[MetricData], bins: int) -> List[SmoothedDataPoint]:
    """Fixed-size sequential chunks; each chunk is stamped with its middle point."""
    per_bin = max(1, len(data) // bins)
    smoothed: List[SmoothedDataPoint] = []
    for offset in range(0, len(data), per_bin):
        chunk = [point for point in data[offset : offset + per_bin] if point.value is not None]
        if not chunk:
            continue
        average = float(np.mean([point.as_float() for point in chunk]))
        ordered = sorted(chunk, key=lambda point: point.normalized_timestamp)
        smoothed.append(SmoothedDataPoint(ordered[len(ordered) // 2].normalized_timestamp, average))
    smoothed.sort(key=lambda point: point.timestamp)
    return smoothed


def _interpolate_at(points: Sequence[SmoothedDataPoint], stamps: Sequence[datetime], target: datetime) -> float:
    position = bisect_right(stamps, target)
    lower = points[position - 1] if position > 0 else None
    upper = points[position] if position < len(points) else None

    if lower is None and upper is None:
        return float("nan")
    if lower is None:
        return upper.value
    if upper is None:
        return lower.value
    if lower.timestamp == upper.timestamp or lower.timestamp == target:
        return lower.value

    total_ms = (upper.timestamp - lower.timestamp).total_seconds() * 1000.0
    if total_ms <= 0:
        return lower.value
    elapsed_ms = (target - lower.timestamp).total_seconds() * 1000.0
    ratio = elapsed_ms / total_ms
    return lower.value + (upper.value - lower.value) * ratio


def interpolate_smoothed_data(
    smoothed: Optional[Sequence[SmoothedDataPoint]],
    targets: Optional[Sequence[datetime]],
) -> List[float]:
    """Evaluate the smoothed curve at every target timestamp.

    Targets before the first point take its value, targets after the last take
    the last value. Without smoothed points every target is NaN.
    """
    if not smoothed:
        return [float("nan")] * len(targets or [])
    if not targets:
        return []
    ordered = sorted(smoothed, key=lambda point: point.timestamp)
    stamps = [point.timestamp for point in ordered]
    return [_interpolate_at(ordered, stamps, target) for target in targets]


def smooth_series(
    ordered: Sequence[MetricData],
    targets: Sequence[datetime],
    start: datetime,
    end: datetime,
    *,
    max_points_per_bin: int = MAX_POINTS_PER_BIN,
) -> List[float]:
    """Smooth ``ordered`` and sample the result on ``targets``."""
    if not ordered:
        return [float("nan")] * len(targets)
    smoothed = create_smoothed_data(ordered, start, end, max_points_per_bin=max_points_per_bin)
    return interpolate_smoothed_data(smoothed, targets)


__all__ = [
    "MAX_POINTS_PER_BIN",
    "number_of_bins",
    "create_smoothed_data",
    "smooth_by_point_count",
    "interpolate_smoothed_data",
    "smooth_series",
]
