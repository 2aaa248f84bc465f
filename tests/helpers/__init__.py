"""Shared helper utilities for the healthcharts test-suite."""

from .data import (
    build_canonical_series,
    build_metric_frame,
    build_metric_series,
    weekday_samples,
    write_settings,
)

__all__ = [
    "build_canonical_series",
    "build_metric_frame",
    "build_metric_series",
    "weekday_samples",
    "write_settings",
]
