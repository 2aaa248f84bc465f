"""Metric data model and input preparation helpers."""
from __future__ import annotations

from .canonical import materialize, to_local_naive, to_metric_data, to_metric_data_many
from .frames import metric_data_from_frame, metric_data_to_frame
from .models import (
    CanonicalSeries,
    MetricData,
    MetricSample,
    NormalizationMode,
    Provenance,
    RecordToDayRatio,
    SmoothedDataPoint,
    TickInterval,
)
from .preparation import (
    align_by_index,
    combine_timestamps,
    filter_and_order_by_range,
    prepare_data_for_computation,
    prepare_ordered_data,
)

__all__ = [
    "CanonicalSeries",
    "MetricData",
    "MetricSample",
    "NormalizationMode",
    "Provenance",
    "RecordToDayRatio",
    "SmoothedDataPoint",
    "TickInterval",
    "align_by_index",
    "combine_timestamps",
    "filter_and_order_by_range",
    "materialize",
    "metric_data_from_frame",
    "metric_data_to_frame",
    "prepare_data_for_computation",
    "prepare_ordered_data",
    "to_local_naive",
    "to_metric_data",
    "to_metric_data_many",
]
