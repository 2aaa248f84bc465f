"""Passthrough chart for values already computed by a transform."""
from __future__ import annotations

import math
from datetime import datetime
from typing import Optional, Sequence

from healthcharts.data.models import MetricData

from .base import ChartComputationStrategy, StrategyType, build_timeseries_result, synthetic_series
from .results import ChartComputationResult


class TransformResultStrategy(ChartComputationStrategy):
    """Re-wrap ``computed_values`` on the timestamps of ``data``.

    Transform output is dimensionless, so ``unit`` is always ``None``.
    """

    strategy_type = StrategyType.TRANSFORM_RESULT

    def __init__(
        self,
        data: Sequence[MetricData],
        computed_values: Sequence[float],
        label: Optional[str],
        start: datetime,
        end: datetime,
    ) -> None:
        if data is None:
            raise TypeError("data must not be None")
        if computed_values is None:
            raise TypeError("computed_values must not be None")
        super().__init__(start, end)
        self._data = list(data)
        self._values = [float(value) for value in computed_values]
        self._label = label or "Transform Result"

    @property
    def primary_label(self) -> str:
        return self._label

    def compute(self) -> Optional[ChartComputationResult]:
        count = min(len(self._data), len(self._values))
        if count == 0:
            return None

        timestamps = [point.normalized_timestamp for point in self._data[:count]]
        raw = [value if math.isfinite(value) else math.nan for value in self._values[:count]]
        smoothed = self._smooth(synthetic_series(timestamps, raw), timestamps)
        self.unit = None
        return build_timeseries_result(timestamps, raw, smoothed, self.start, self.end, unit=None)


__all__ = ["TransformResultStrategy"]
