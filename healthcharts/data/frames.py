"""pandas adapters for metric point collections."""
from __future__ import annotations

from typing import Iterable, List, Optional

import pandas as pd

from .models import MetricData


def metric_data_from_frame(
    frame: pd.DataFrame,
    *,
    timestamp_col: str = "timestamp",
    value_col: str = "value",
    unit: Optional[str] = None,
    unit_col: Optional[str] = "unit",
    provider: Optional[str] = None,
    provider_col: Optional[str] = "provider",
) -> List[MetricData]:
    """Build ``MetricData`` rows from a frame; NaN values become absent values."""
    for column in (timestamp_col, value_col):
        if column not in frame.columns:
            raise ValueError(f"Frame missing required '{column}' column")

    stamps = pd.to_datetime(frame[timestamp_col], errors="coerce")
    if getattr(stamps.dt, "tz", None) is not None:
        stamps = stamps.dt.tz_localize(None)

    points: List[MetricData] = []
    for position, (stamp, raw_value) in enumerate(zip(stamps, frame[value_col])):
        if pd.isna(stamp):
            continue
        row_unit = unit
        if row_unit is None and unit_col and unit_col in frame.columns:
            row_unit = _clean(frame[unit_col].iloc[position])
        row_provider = provider
        if row_provider is None and provider_col and provider_col in frame.columns:
            row_provider = _clean(frame[provider_col].iloc[position])
        value = None if pd.isna(raw_value) else raw_value
        points.append(MetricData(stamp.to_pydatetime(), value, row_unit, row_provider))
    return points


def metric_data_to_frame(points: Iterable[MetricData]) -> pd.DataFrame:
    rows = [
        {
            "timestamp": point.normalized_timestamp,
            "value": point.as_float(),
            "unit": point.unit,
            "provider": point.provider,
        }
        for point in points
    ]
    return pd.DataFrame(rows, columns=["timestamp", "value", "unit", "provider"])


def _clean(value: object) -> Optional[str]:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    return str(value)


__all__ = ["metric_data_from_frame", "metric_data_to_frame"]
