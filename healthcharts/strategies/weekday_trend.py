"""Per-weekday trend lines: one daily-average series for each day of the week."""
from __future__ import annotations

import logging
import math
from collections import defaultdict
from datetime import date, datetime
from typing import Dict, List, Optional

import numpy as np

from healthcharts.data.canonical import SeriesSource, materialize, to_metric_data
from healthcharts.data.models import CanonicalSeries, MetricData, TickInterval
from healthcharts.data.preparation import filter_and_order_by_range

from .base import ChartComputationStrategy, StrategyType
from .results import ChartComputationResult, WeekdayTrendPoint, WeekdayTrendResult, WeekdayTrendSeries
from .units import resolve_unit

logger = logging.getLogger(__name__)

WEEKDAY_COUNT = 7


class WeekdayTrendStrategy:
    """Group samples by weekday (Monday = 0), then average them per calendar date."""

    strategy_type = StrategyType.WEEKDAY_TREND

    def __init__(
        self,
        data: SeriesSource,
        start: datetime,
        end: datetime,
        *,
        timezone: Optional[str] = None,
    ) -> None:
        if data is None:
            raise TypeError("data must not be None")
        self._data = materialize(data)
        self.start = start
        self.end = end
        self._timezone = timezone

    def _ordered(self) -> List[MetricData]:
        if isinstance(self._data, CanonicalSeries):
            return to_metric_data(self._data, self.start, self.end, timezone=self._timezone)
        return filter_and_order_by_range(self._data, self.start, self.end)

    def compute(self) -> Optional[WeekdayTrendResult]:
        if self.start > self.end:
            return None
        ordered = self._ordered()
        if isinstance(self._data, CanonicalSeries):
            unit = self._data.unit
        else:
            unit = resolve_unit(ordered)
        result = WeekdayTrendResult(start=self.start, end=self.end, unit=unit)
        if not ordered:
            return result

        by_weekday: Dict[int, Dict[date, List[float]]] = defaultdict(lambda: defaultdict(list))
        for point in ordered:
            stamp = point.normalized_timestamp
            by_weekday[stamp.weekday()][stamp.date()].append(point.as_float())

        global_min = math.inf
        global_max = -math.inf
        for day_index in range(WEEKDAY_COUNT):
            days = by_weekday.get(day_index)
            if not days:
                continue
            points: List[WeekdayTrendPoint] = []
            for day in sorted(days):
                values = days[day]
                average = float(np.mean(values))
                points.append(WeekdayTrendPoint(day=day, value=average, sample_count=len(values)))
                global_min = min(global_min, average)
                global_max = max(global_max, average)
            result.series_by_day[day_index] = WeekdayTrendSeries(day_index=day_index, points=points)

        if not math.isfinite(global_min) or not math.isfinite(global_max):
            global_min, global_max = 0.0, 0.0
        elif global_max == global_min:
            global_max = global_min + 1
        result.global_min = global_min
        result.global_max = global_max
        return result


class WeekdayTrendComputationStrategy(ChartComputationStrategy):
    """Adapter exposing :class:`WeekdayTrendStrategy` through the common strategy interface.

    The trend itself is stored on :attr:`extended_result`; the returned
    :class:`ChartComputationResult` only carries the range and unit.
    """

    strategy_type = StrategyType.WEEKDAY_TREND

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
        self._trend = WeekdayTrendStrategy(data, start, end, timezone=timezone)
        self._label = label or "Weekday Trend"
        self.extended_result: Optional[WeekdayTrendResult] = None

    @property
    def primary_label(self) -> str:
        return self._label

    def compute(self) -> Optional[ChartComputationResult]:
        trend = self._trend.compute()
        self.extended_result = trend
        if trend is None:
            logger.debug("Weekday trend: invalid range %s > %s", self.start, self.end)
            return None
        self.unit = trend.unit
        return ChartComputationResult(
            unit=trend.unit,
            tick_interval=TickInterval.DAY,
            date_range=self.end - self.start,
        )


__all__ = ["WEEKDAY_COUNT", "WeekdayTrendStrategy", "WeekdayTrendComputationStrategy"]
