"""Single metric chart."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from healthcharts.data.canonical import SeriesSource, materialize, to_metric_data
from healthcharts.data.models import CanonicalSeries
from healthcharts.data.preparation import prepare_ordered_data

from .base import ChartComputationStrategy, StrategyType, build_timeseries_result
from .results import ChartComputationResult
from .units import resolve_unit

logger = logging.getLogger(__name__)


class SingleMetricStrategy(ChartComputationStrategy):
    """Raw values plus a smoothed companion on the raw timestamps.

    Legacy points are used as given (no range filter); canonical series are
    restricted to ``[start, end]`` and their unit wins over the points' units.
    """

    strategy_type = StrategyType.SINGLE_METRIC

    def __init__(
        self,
        data: SeriesSource,
        label: Optional[str],
        start: datetime,
        end: datetime,
        *,
        timezone: Optional[str] = None,
    ) -> None:
        super().__init__(start, end)
        self._data = materialize(data) if data is not None else []
        self._label = label or "Metric"
        self._timezone = timezone

    @property
    def primary_label(self) -> str:
        return self._label

    def compute(self) -> Optional[ChartComputationResult]:
        if isinstance(self._data, CanonicalSeries):
            if not self._data.samples:
                return None
            ordered = to_metric_data(self._data, self.start, self.end, timezone=self._timezone)
            unit = self._data.unit
        else:
            ordered = prepare_ordered_data(self._data)
            unit = resolve_unit(ordered)
        if not ordered:
            logger.debug("%s: no valued points", self._label)
            return None

        timestamps = [point.normalized_timestamp for point in ordered]
        raw = [point.as_float() for point in ordered]
        smoothed = self._smooth(ordered, timestamps)
        self.unit = unit
        return build_timeseries_result(timestamps, raw, smoothed, self.start, self.end, unit=unit)


__all__ = ["SingleMetricStrategy"]
