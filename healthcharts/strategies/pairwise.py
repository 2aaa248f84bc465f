"""Two-series strategies: combined, difference, ratio and normalized."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from healthcharts.data.canonical import SeriesSource, materialize, to_metric_data
from healthcharts.data.models import CanonicalSeries, MetricData, NormalizationMode
from healthcharts.data.preparation import (
    align_by_index,
    combine_timestamps,
    create_timestamp_value_dictionaries,
    extract_aligned_raw_values,
    filter_and_order_by_range,
    prepare_data_for_computation,
)
from healthcharts.numeric.operations import normalize_pair, normalize_values, value_differences, value_ratios

from .base import ChartComputationStrategy, StrategyType, build_timeseries_result, synthetic_series
from .results import ChartComputationResult
from .units import resolve_canonical_pair_unit, resolve_pair_unit, resolve_ratio_unit

logger = logging.getLogger(__name__)


class PairInputs:
    """Left/right inputs, either legacy points or canonical series."""

    def __init__(
        self,
        left: SeriesSource,
        right: SeriesSource,
        label_left: Optional[str],
        label_right: Optional[str],
        timezone: Optional[str] = None,
    ) -> None:
        self.left = materialize(left) if left is not None else []
        self.right = materialize(right) if right is not None else []
        self.label_left = label_left or "Left"
        self.label_right = label_right or "Right"
        self.timezone = timezone

    @property
    def canonical(self) -> bool:
        return isinstance(self.left, CanonicalSeries) and isinstance(self.right, CanonicalSeries)

    def _points(self, source: SeriesSource) -> List[MetricData]:
        if isinstance(source, CanonicalSeries):
            return to_metric_data(source, timezone=self.timezone)
        return list(source or [])

    def in_range(self, start: datetime, end: datetime) -> Tuple[List[MetricData], List[MetricData]]:
        """Valued points inside ``[start, end]``, ordered by timestamp."""
        return (
            filter_and_order_by_range(self._points(self.left), start, end),
            filter_and_order_by_range(self._points(self.right), start, end),
        )

    def unfiltered(self) -> Tuple[List[MetricData], List[MetricData]]:
        return self._points(self.left), self._points(self.right)

    def unit(self, left: List[MetricData], right: List[MetricData]) -> Optional[str]:
        if self.canonical:
            return resolve_canonical_pair_unit(self.left, self.right)
        return resolve_pair_unit(left, right)


class CombinedMetricStrategy(ChartComputationStrategy):
    """Both series on one chart, paired by position over the shorter series."""

    strategy_type = StrategyType.COMBINED_METRIC

    def __init__(
        self,
        left: SeriesSource,
        right: SeriesSource,
        label_left: Optional[str],
        label_right: Optional[str],
        start: datetime,
        end: datetime,
        *,
        timezone: Optional[str] = None,
    ) -> None:
        super().__init__(start, end)
        self.inputs = PairInputs(left, right, label_left, label_right, timezone)

    @property
    def primary_label(self) -> str:
        return self.inputs.label_left

    @property
    def secondary_label(self) -> str:
        return self.inputs.label_right

    def compute(self) -> Optional[ChartComputationResult]:
        left, right = self.inputs.in_range(self.start, self.end)
        count = min(len(left), len(right))
        if count == 0:
            logger.debug("Combined: no overlapping points (left=%s, right=%s)", len(left), len(right))
            return None

        timestamps, primary, secondary = align_by_index(left, right, count)
        self.unit = self.inputs.unit(left, right)
        return build_timeseries_result(
            timestamps,
            primary,
            self._smooth(left, timestamps),
            self.start,
            self.end,
            unit=self.unit,
            secondary_raw=secondary,
            secondary_smoothed=self._smooth(right, timestamps),
        )


class DifferenceStrategy(ChartComputationStrategy):
    """``left - right`` by position."""

    strategy_type = StrategyType.DIFFERENCE

    def __init__(
        self,
        left: SeriesSource,
        right: SeriesSource,
        label_left: Optional[str],
        label_right: Optional[str],
        start: datetime,
        end: datetime,
        *,
        timezone: Optional[str] = None,
    ) -> None:
        super().__init__(start, end)
        self.inputs = PairInputs(left, right, label_left, label_right, timezone)

    @property
    def primary_label(self) -> str:
        return f"{self.inputs.label_left} - {self.inputs.label_right}"

    def compute(self) -> Optional[ChartComputationResult]:
        left, right = self.inputs.in_range(self.start, self.end)
        count = min(len(left), len(right))
        if count == 0:
            return None

        timestamps, primary, secondary = align_by_index(left, right, count)
        differences = value_differences(primary, secondary)
        unit = self.inputs.unit(left, right)
        smoothed = self._smooth(synthetic_series(timestamps, differences, unit), timestamps)
        self.unit = unit
        return build_timeseries_result(timestamps, differences, smoothed, self.start, self.end, unit=unit)


class RatioStrategy(ChartComputationStrategy):
    """``left / right`` by position; a zero divisor yields NaN."""

    strategy_type = StrategyType.RATIO

    def __init__(
        self,
        left: SeriesSource,
        right: SeriesSource,
        label_left: Optional[str],
        label_right: Optional[str],
        start: datetime,
        end: datetime,
        *,
        timezone: Optional[str] = None,
    ) -> None:
        super().__init__(start, end)
        self.inputs = PairInputs(left, right, label_left, label_right, timezone)

    @property
    def primary_label(self) -> str:
        return f"{self.inputs.label_left} / {self.inputs.label_right}"

    def compute(self) -> Optional[ChartComputationResult]:
        left, right = self.inputs.in_range(self.start, self.end)
        count = min(len(left), len(right))
        if count == 0:
            return None

        timestamps, primary, secondary = align_by_index(left, right, count)
        ratios = value_ratios(primary, secondary) or []
        smoothed = self._smooth(synthetic_series(timestamps, ratios), timestamps)
        if self.inputs.canonical:
            left_unit, right_unit = self.inputs.left.unit, self.inputs.right.unit
            self.unit = f"{left_unit}/{right_unit}" if left_unit and right_unit else None
        else:
            self.unit = resolve_ratio_unit(left, right)
        return build_timeseries_result(timestamps, ratios, smoothed, self.start, self.end, unit=self.unit)


class NormalizedStrategy(ChartComputationStrategy):
    """Both series rescaled onto a shared scale over the union of their timestamps."""

    strategy_type = StrategyType.NORMALIZED

    def __init__(
        self,
        left: SeriesSource,
        right: SeriesSource,
        label_left: Optional[str],
        label_right: Optional[str],
        start: datetime,
        end: datetime,
        mode: NormalizationMode = NormalizationMode.PERCENTAGE_OF_MAX,
        *,
        timezone: Optional[str] = None,
    ) -> None:
        super().__init__(start, end)
        self.inputs = PairInputs(left, right, label_left, label_right, timezone)
        self.mode = mode

    @property
    def primary_label(self) -> str:
        return f"{self.inputs.label_left} ~ {self.inputs.label_right}"

    @property
    def secondary_label(self) -> str:
        if self.mode is NormalizationMode.RELATIVE_TO_MAX:
            return f"{self.inputs.label_right} (baseline)"
        return ""

    def compute(self) -> Optional[ChartComputationResult]:
        raw_left, raw_right = self.inputs.unfiltered()
        prepared = prepare_data_for_computation(raw_left, raw_right, self.start, self.end)
        if prepared is None:
            return None
        left, right = prepared.left, prepared.right

        timestamps = combine_timestamps(left, right)
        if not timestamps:
            return None
        smoothed_left = self._smooth(left, timestamps)
        smoothed_right = self._smooth(right, timestamps)
        values_left, values_right = create_timestamp_value_dictionaries(left, right)
        aligned_left, aligned_right = extract_aligned_raw_values(timestamps, values_left, values_right)

        normalized = self._normalize(aligned_left, aligned_right, smoothed_left, smoothed_right)
        if normalized is None:
            logger.debug("Normalization produced no output for mode %s", self.mode)
            return None
        norm_raw_left, norm_raw_right, norm_smooth_left, norm_smooth_right = normalized

        self.unit = self.inputs.unit(left, right)
        return build_timeseries_result(
            timestamps,
            norm_raw_left,
            norm_smooth_left,
            self.start,
            self.end,
            unit=self.unit,
            secondary_raw=norm_raw_right,
            secondary_smoothed=norm_smooth_right,
        )

    def _normalize(
        self,
        raw_left: List[float],
        raw_right: List[float],
        smoothed_left: List[float],
        smoothed_right: List[float],
    ) -> Optional[Tuple[List[float], Optional[List[float]], List[float], Optional[List[float]]]]:
        if self.mode is not NormalizationMode.RELATIVE_TO_MAX:
            raw_first = normalize_values(raw_left, self.mode)
            raw_second = normalize_values(raw_right, self.mode)
            smooth_first = normalize_values(smoothed_left, self.mode)
            smooth_second = normalize_values(smoothed_right, self.mode)
        else:
            raw_first, raw_second = normalize_pair(raw_left, raw_right, self.mode)
            smooth_first, smooth_second = normalize_pair(smoothed_left, smoothed_right, self.mode)
        # the secondary side may be missing, the primary side may not
        if raw_first is None or smooth_first is None:
            return None
        return raw_first, raw_second, smooth_first, smooth_second


__all__ = [
    "PairInputs",
    "CombinedMetricStrategy",
    "DifferenceStrategy",
    "RatioStrategy",
    "NormalizedStrategy",
]
