"""N-series chart rendered through ``ChartComputationResult.series``."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from healthcharts.data.canonical import SeriesSource, materialize, to_metric_data
from healthcharts.data.models import CanonicalSeries, MetricData
from healthcharts.data.preparation import filter_and_order_by_range

from .base import ChartComputationStrategy, StrategyType, build_timeseries_result
from .results import ChartComputationResult, SeriesResult
from .units import resolve_unit

logger = logging.getLogger(__name__)


class MultiMetricStrategy(ChartComputationStrategy):
    strategy_type = StrategyType.MULTI_METRIC

    def __init__(
        self,
        series: Sequence[SeriesSource],
        labels: Sequence[str],
        start: datetime,
        end: datetime,
        unit: Optional[str] = None,
        *,
        timezone: Optional[str] = None,
    ) -> None:
        if not series:
            raise ValueError("At least one metric series is required")
        if labels is None or len(labels) != len(series):
            raise ValueError("Labels count must match series count")
        canonical = [item for item in series if isinstance(item, CanonicalSeries)]
        if canonical and any(not item.metric_id for item in canonical):
            raise ValueError("All canonical series must have a metric id")
        super().__init__(start, end)
        self._series = [materialize(item) for item in series]
        self._labels = list(labels)
        self._timezone = timezone
        if unit is None and isinstance(self._series[0], CanonicalSeries):
            unit = self._series[0].unit
        self._fallback_unit = unit

    @property
    def primary_label(self) -> str:
        return self._labels[0] if self._labels else "Multi-Metric"

    def _points(self, source: SeriesSource) -> List[MetricData]:
        if isinstance(source, CanonicalSeries):
            return to_metric_data(source, self.start, self.end, timezone=self._timezone)
        return filter_and_order_by_range(source, self.start, self.end)

    def compute(self) -> Optional[ChartComputationResult]:
        results: List[SeriesResult] = []
        unit: Optional[str] = None
        for index, (source, label) in enumerate(zip(self._series, self._labels)):
            ordered = self._points(source)
            if not ordered:
                logger.debug("Skipping empty series %s (%s)", index, label)
                continue
            timestamps = [point.normalized_timestamp for point in ordered]
            if unit is None:
                unit = resolve_unit(ordered)
            results.append(
                SeriesResult(
                    series_id=f"series_{index}",
                    display_name=label,
                    timestamps=timestamps,
                    raw_values=[point.as_float() for point in ordered],
                    smoothed=self._smooth(ordered, timestamps),
                )
            )
        if not results:
            return None

        all_timestamps = sorted({stamp for result in results for stamp in result.timestamps})
        self.unit = unit if unit is not None else self._fallback_unit
        return build_timeseries_result(
            all_timestamps, [], [], self.start, self.end, unit=self.unit, series=results
        )


__all__ = ["MultiMetricStrategy"]
