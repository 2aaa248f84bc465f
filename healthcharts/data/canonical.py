"""Conversion of canonical metric series into legacy metric points."""
from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional, Union

from zoneinfo import ZoneInfo

from .models import CanonicalSeries, MetricData

SeriesSource = Union[CanonicalSeries, Iterable[MetricData], None]


def to_local_naive(timestamp: datetime, timezone: Optional[str] = None) -> datetime:
    """Return the wall-clock time of ``timestamp`` in ``timezone`` (system zone if ``None``)."""
    if timestamp.tzinfo is None:
        return timestamp
    if timezone:
        return timestamp.astimezone(ZoneInfo(timezone)).replace(tzinfo=None)
    return timestamp.astimezone().replace(tzinfo=None)


def to_metric_data(
    series: CanonicalSeries,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    *,
    timezone: Optional[str] = None,
) -> List[MetricData]:
    """Convert valued samples to ``MetricData`` ordered by local timestamp.

    ``start``/``end`` are inclusive bounds on the local timestamp when given.
    """
    if series is None:
        raise TypeError("series must not be None")
    unit = series.unit
    provider = series.provenance.source_provider if series.provenance else None
    converted: List[MetricData] = []
    for sample in series.samples:
        if sample.value is None:
            continue
        local = to_local_naive(sample.timestamp, timezone)
        if start is not None and local < start:
            continue
        if end is not None and local > end:
            continue
        converted.append(MetricData(local, sample.value, unit, provider))
    converted.sort(key=lambda point: point.normalized_timestamp)
    return converted


def to_metric_data_many(
    series_list: Iterable[Optional[CanonicalSeries]],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    *,
    timezone: Optional[str] = None,
) -> List[MetricData]:
    if series_list is None:
        raise TypeError("series_list must not be None")
    merged: List[MetricData] = []
    for series in series_list:
        if series is None:
            continue
        merged.extend(to_metric_data(series, start, end, timezone=timezone))
    merged.sort(key=lambda point: point.normalized_timestamp)
    return merged


def materialize(source: SeriesSource) -> SeriesSource:
    """Snapshot one-shot iterables so repeated computations see the same input."""
    if source is None or isinstance(source, CanonicalSeries):
        return source
    return list(source)


__all__ = [
    "SeriesSource",
    "to_local_naive",
    "to_metric_data",
    "to_metric_data_many",
    "materialize",
]
