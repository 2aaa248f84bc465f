"""Strategy interface and the result assembly shared by time-series strategies."""
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import List, Optional, Sequence

from healthcharts.data.models import MetricData
from healthcharts.numeric.intervals import generate_timeline, map_to_intervals
from healthcharts.numeric.smoothing import MAX_POINTS_PER_BIN, smooth_series

from .results import ChartComputationResult, SeriesResult


class StrategyType(Enum):
    SINGLE_METRIC = "single_metric"
    COMBINED_METRIC = "combined_metric"
    MULTI_METRIC = "multi_metric"
    DIFFERENCE = "difference"
    RATIO = "ratio"
    NORMALIZED = "normalized"
    WEEKLY_DISTRIBUTION = "weekly_distribution"
    HOURLY_DISTRIBUTION = "hourly_distribution"
    WEEKDAY_TREND = "weekday_trend"
    TRANSFORM_RESULT = "transform_result"


class ChartComputationStrategy(ABC):
    """Single-call computation: construct with inputs, call :meth:`compute`.

    ``unit`` is set by :meth:`compute`. A ``None`` result means there is
    nothing to chart.
    """

    strategy_type: StrategyType

    def __init__(self, start: datetime, end: datetime) -> None:
        self.start = start
        self.end = end
        self.unit: Optional[str] = None
        self.max_points_per_bin = MAX_POINTS_PER_BIN

    @property
    @abstractmethod
    def primary_label(self) -> str:
        raise NotImplementedError

    @property
    def secondary_label(self) -> str:
        return ""

    @abstractmethod
    def compute(self) -> Optional[ChartComputationResult]:
        raise NotImplementedError

    def _smooth(self, points: Sequence[MetricData], timestamps: Sequence[datetime]) -> List[float]:
        return smooth_series(points, timestamps, self.start, self.end, max_points_per_bin=self.max_points_per_bin)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(start={self.start!s}, end={self.end!s})"


def build_timeseries_result(
    timestamps: List[datetime],
    primary_raw: List[float],
    primary_smoothed: List[float],
    start: datetime,
    end: datetime,
    *,
    unit: Optional[str] = None,
    secondary_raw: Optional[List[float]] = None,
    secondary_smoothed: Optional[List[float]] = None,
    series: Optional[List[SeriesResult]] = None,
) -> ChartComputationResult:
    """Attach the timeline for ``[start, end]`` and interval indices to the series."""
    timeline = generate_timeline(start, end)
    return ChartComputationResult(
        primary_raw=primary_raw,
        primary_smoothed=primary_smoothed,
        secondary_raw=secondary_raw,
        secondary_smoothed=secondary_smoothed,
        timestamps=timestamps,
        unit=unit,
        series=series,
        interval_indices=map_to_intervals(timestamps, timeline),
        normalized_intervals=list(timeline.normalized_intervals),
        tick_interval=timeline.tick_interval,
        date_range=timeline.date_range,
    )


def synthetic_series(
    timestamps: Sequence[datetime],
    values: Sequence[float],
    unit: Optional[str] = None,
) -> List[MetricData]:
    """Wrap derived values as points; NaN and infinities become absent values."""
    return [
        MetricData(stamp, value if math.isfinite(value) else None, unit)
        for stamp, value in zip(timestamps, values)
    ]


__all__ = [
    "StrategyType",
    "ChartComputationStrategy",
    "build_timeseries_result",
    "synthetic_series",
]
