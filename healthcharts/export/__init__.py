"""Payload schemas for chart rendering."""
from __future__ import annotations

from .schemas import (
    ChartPayload,
    DistributionPayload,
    SeriesPayload,
    SeriesPoint,
    chart_payload,
    distribution_payload,
    series_points,
    to_millis,
)

__all__ = [
    "ChartPayload",
    "DistributionPayload",
    "SeriesPayload",
    "SeriesPoint",
    "chart_payload",
    "distribution_payload",
    "series_points",
    "to_millis",
]
