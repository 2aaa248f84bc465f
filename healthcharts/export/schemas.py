"""Pydantic payloads handed to the rendering layer."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Sequence

import pandas as pd
from pydantic import BaseModel, Field

from healthcharts.strategies.results import BucketDistributionResult, ChartComputationResult


class SeriesPoint(BaseModel):
    timestamp: int = Field(..., description="Unix timestamp in milliseconds")
    value: Optional[float] = Field(None, description="Numeric value (NaN represented as null)")


class SeriesPayload(BaseModel):
    name: str
    unit: str = ""
    smoothed: bool = False
    data: List[SeriesPoint] = Field(default_factory=list)


class ChartPayload(BaseModel):
    series: List[SeriesPayload] = Field(default_factory=list)
    tick_interval: str = "day"
    date_range_seconds: float = 0.0
    interval_indices: List[int] = Field(default_factory=list)
    meta: dict = Field(default_factory=dict)


class DistributionPayload(BaseModel):
    name: str
    unit: str = ""
    bucket_count: int
    counts: List[int] = Field(default_factory=list)
    mins: List[Optional[float]] = Field(default_factory=list)
    maxs: List[Optional[float]] = Field(default_factory=list)
    ranges: List[Optional[float]] = Field(default_factory=list)
    global_min: float = 0.0
    global_max: float = 1.0
    bin_size: float = 1.0
    bins: List[List[float]] = Field(default_factory=list)
    normalized_frequencies: Dict[int, Dict[int, float]] = Field(default_factory=dict)


def to_millis(timestamp: datetime) -> int:
    return int(timestamp.timestamp() * 1000)


def _nullable(value: float) -> Optional[float]:
    return None if pd.isna(value) else float(value)


def series_points(timestamps: Sequence[datetime], values: Sequence[float]) -> List[SeriesPoint]:
    return [SeriesPoint(timestamp=to_millis(ts), value=_nullable(val)) for ts, val in zip(timestamps, values)]


def chart_payload(
    result: ChartComputationResult,
    primary_label: str,
    secondary_label: Optional[str] = None,
) -> ChartPayload:
    """Flatten a chart result into named series; multi-series results export their own series."""
    unit = result.unit or ""
    series: List[SeriesPayload] = []
    if result.series is not None:
        for item in result.series:
            series.append(SeriesPayload(name=item.display_name, unit=unit, data=series_points(item.timestamps, item.raw_values)))
            if item.smoothed is not None:
                series.append(
                    SeriesPayload(
                        name=item.display_name,
                        unit=unit,
                        smoothed=True,
                        data=series_points(item.timestamps, item.smoothed),
                    )
                )
    else:
        series.append(SeriesPayload(name=primary_label, unit=unit, data=series_points(result.timestamps, result.primary_raw)))
        series.append(
            SeriesPayload(
                name=primary_label,
                unit=unit,
                smoothed=True,
                data=series_points(result.timestamps, result.primary_smoothed),
            )
        )
        name = secondary_label or "Secondary"
        if result.secondary_raw is not None:
            series.append(SeriesPayload(name=name, unit=unit, data=series_points(result.timestamps, result.secondary_raw)))
        if result.secondary_smoothed is not None:
            series.append(
                SeriesPayload(
                    name=name,
                    unit=unit,
                    smoothed=True,
                    data=series_points(result.timestamps, result.secondary_smoothed),
                )
            )

    return ChartPayload(
        series=series,
        tick_interval=result.tick_interval.value,
        date_range_seconds=result.date_range.total_seconds(),
        interval_indices=list(result.interval_indices),
        meta={"multi_series": result.is_multi_series},
    )


def distribution_payload(result: BucketDistributionResult, name: str) -> DistributionPayload:
    return DistributionPayload(
        name=name,
        unit=result.unit or "",
        bucket_count=result.bucket_count,
        counts=list(result.counts),
        mins=[_nullable(value) for value in result.mins],
        maxs=[_nullable(value) for value in result.maxs],
        ranges=[_nullable(value) for value in result.ranges],
        global_min=result.global_min,
        global_max=result.global_max,
        bin_size=result.bin_size,
        bins=[[low, high] for low, high in result.bins],
        normalized_frequencies=result.normalized_frequencies_per_bucket,
    )


__all__ = [
    "SeriesPoint",
    "SeriesPayload",
    "ChartPayload",
    "DistributionPayload",
    "to_millis",
    "series_points",
    "chart_payload",
    "distribution_payload",
]
