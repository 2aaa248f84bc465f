"""Result contracts handed to the rendering layer."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional

import pandas as pd

from healthcharts.data.models import TickInterval
from healthcharts.numeric.binning import Bin


@dataclass(slots=True)
class SeriesResult:
    series_id: str
    display_name: str
    timestamps: List[datetime] = field(default_factory=list)
    raw_values: List[float] = field(default_factory=list)
    smoothed: Optional[List[float]] = None


@dataclass(slots=True)
class ChartComputationResult:
    """Uniform output of every strategy.

    Either ``series`` (multi-series mode) or the primary/secondary lists
    (legacy mode) drive rendering, never both.
    """

    primary_raw: List[float] = field(default_factory=list)
    primary_smoothed: List[float] = field(default_factory=list)
    secondary_raw: Optional[List[float]] = None
    secondary_smoothed: Optional[List[float]] = None
    timestamps: List[datetime] = field(default_factory=list)
    unit: Optional[str] = None
    series: Optional[List[SeriesResult]] = None
    interval_indices: List[int] = field(default_factory=list)
    normalized_intervals: List[datetime] = field(default_factory=list)
    tick_interval: TickInterval = TickInterval.DAY
    date_range: timedelta = timedelta(0)

    @property
    def is_multi_series(self) -> bool:
        return self.series is not None

    def to_frame(self) -> pd.DataFrame:
        """Timestamp-indexed frame of the legacy-mode columns."""
        columns: Dict[str, List[float]] = {
            "primary_raw": list(self.primary_raw),
            "primary_smoothed": list(self.primary_smoothed),
        }
        if self.secondary_raw is not None:
            columns["secondary_raw"] = list(self.secondary_raw)
        if self.secondary_smoothed is not None:
            columns["secondary_smoothed"] = list(self.secondary_smoothed)
        if len(self.timestamps) != len(self.primary_raw):
            # bucket results carry no timestamps
            return pd.DataFrame(columns)
        return pd.DataFrame(columns, index=pd.DatetimeIndex(self.timestamps, name="timestamp"))


@dataclass(slots=True)
class BucketDistributionResult:
    """Per-bucket aggregates for weekday (0-6) or hour-of-day (0-23) buckets."""

    bucket_count: int
    mins: List[float] = field(default_factory=list)
    maxs: List[float] = field(default_factory=list)
    ranges: List[float] = field(default_factory=list)
    counts: List[int] = field(default_factory=list)
    bucket_values: Dict[int, List[float]] = field(default_factory=dict)
    global_min: float = 0.0
    global_max: float = 1.0
    bin_size: float = 1.0
    bins: List[Bin] = field(default_factory=list)
    frequencies_per_bucket: Dict[int, Dict[int, int]] = field(default_factory=dict)
    normalized_frequencies_per_bucket: Dict[int, Dict[int, float]] = field(default_factory=dict)
    unit: Optional[str] = None

    def averages(self) -> List[float]:
        result: List[float] = []
        for bucket in range(self.bucket_count):
            values = [value for value in self.bucket_values.get(bucket, []) if math.isfinite(value)]
            result.append(sum(values) / len(values) if values else math.nan)
        return result

    def to_range_result(self) -> "DistributionRangeResult":
        return DistributionRangeResult(
            mins=list(self.mins),
            maxs=list(self.maxs),
            averages=self.averages(),
            global_min=self.global_min,
            global_max=self.global_max,
            unit=self.unit,
        )


@dataclass(slots=True)
class DistributionRangeResult:
    mins: List[float] = field(default_factory=list)
    maxs: List[float] = field(default_factory=list)
    averages: List[float] = field(default_factory=list)
    global_min: float = 0.0
    global_max: float = 1.0
    unit: Optional[str] = None


@dataclass(slots=True)
class WeekdayTrendPoint:
    day: date
    value: float
    sample_count: int


@dataclass(slots=True)
class WeekdayTrendSeries:
    day_index: int
    points: List[WeekdayTrendPoint] = field(default_factory=list)


@dataclass(slots=True)
class WeekdayTrendResult:
    start: datetime
    end: datetime
    unit: Optional[str] = None
    series_by_day: Dict[int, WeekdayTrendSeries] = field(default_factory=dict)
    global_min: float = 0.0
    global_max: float = 0.0


__all__ = [
    "SeriesResult",
    "ChartComputationResult",
    "BucketDistributionResult",
    "DistributionRangeResult",
    "WeekdayTrendPoint",
    "WeekdayTrendSeries",
    "WeekdayTrendResult",
]
