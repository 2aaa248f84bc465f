"""Weekday and hour-of-day value distributions."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple

from healthcharts.data.canonical import SeriesSource, materialize, to_metric_data
from healthcharts.data.models import CanonicalSeries, MetricData, TickInterval
from healthcharts.data.preparation import filter_and_order_by_range
from healthcharts.numeric.binning import (
    MAX_BIN_COUNT,
    MIN_BIN_COUNT,
    TARGET_BIN_COUNT,
    Bin,
    BinnedFrequencies,
    count_frequencies_per_interval,
    create_uniform_intervals,
    frequency_range,
    normalize_frequencies,
    prepare_bins_and_frequencies,
)

from .base import ChartComputationStrategy, StrategyType
from .results import BucketDistributionResult, ChartComputationResult
from .units import resolve_unit

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_COUNT = 25


class DistributionMode(Enum):
    WEEKLY = 7
    HOURLY = 24

    @property
    def bucket_count(self) -> int:
        return self.value

    def bucket_index(self, timestamp: datetime) -> int:
        if self is DistributionMode.WEEKLY:
            # Monday = 0 ... Sunday = 6
            return timestamp.weekday()
        return timestamp.hour


@dataclass(slots=True)
class ShadingResult:
    """Uniform value intervals with per-bucket counts, used for frequency shading."""

    intervals: List[Bin] = field(default_factory=list)
    frequencies: Dict[int, Dict[int, int]] = field(default_factory=dict)
    normalized: Dict[int, Dict[int, float]] = field(default_factory=dict)
    count_range: Optional[Tuple[int, int]] = None


class BucketDistributionStrategy(ChartComputationStrategy):
    """Per-bucket min/max/range/count with global frequency binning.

    ``compute`` returns the legacy-compatible result (``primary_raw`` holds
    the bucket minimums, ``primary_smoothed`` the ranges); the full result is
    available as :attr:`extended_result` afterwards.
    """

    strategy_type = StrategyType.WEEKLY_DISTRIBUTION

    def __init__(
        self,
        data: SeriesSource,
        label: Optional[str],
        start: datetime,
        end: datetime,
        mode: DistributionMode = DistributionMode.WEEKLY,
        *,
        timezone: Optional[str] = None,
    ) -> None:
        super().__init__(start, end)
        self._data = materialize(data)
        self._label = label or "Distribution"
        self._timezone = timezone
        self.mode = mode
        self.target_bin_count: float = TARGET_BIN_COUNT
        self.min_bins = MIN_BIN_COUNT
        self.max_bins = MAX_BIN_COUNT
        self.interval_count = DEFAULT_INTERVAL_COUNT
        self.extended_result: Optional[BucketDistributionResult] = None

    @property
    def primary_label(self) -> str:
        return self._label

    def _ordered(self) -> List[MetricData]:
        if isinstance(self._data, CanonicalSeries):
            return to_metric_data(self._data, self.start, self.end, timezone=self._timezone)
        return filter_and_order_by_range(self._data, self.start, self.end)

    def compute(self) -> Optional[ChartComputationResult]:
        if self._data is None or self.start > self.end:
            return None
        ordered = self._ordered()
        if not ordered:
            logger.debug("%s distribution: no points in range", self.mode.name.lower())
            return None

        bucket_count = self.mode.bucket_count
        buckets: Dict[int, List[float]] = {index: [] for index in range(bucket_count)}
        for point in ordered:
            buckets[self.mode.bucket_index(point.normalized_timestamp)].append(point.as_float())

        mins: List[float] = []
        maxs: List[float] = []
        ranges: List[float] = []
        counts: List[int] = []
        global_min = math.nan
        global_max = math.nan
        for index in range(bucket_count):
            values = buckets[index]
            if not values:
                mins.append(math.nan)
                maxs.append(math.nan)
                ranges.append(math.nan)
                counts.append(0)
                continue
            low, high = min(values), max(values)
            mins.append(low)
            maxs.append(high)
            ranges.append(high - low)
            counts.append(len(values))
            if math.isnan(global_min) or low < global_min:
                global_min = low
            if math.isnan(global_max) or high > global_max:
                global_max = high

        if isinstance(self._data, CanonicalSeries):
            unit = self._data.unit
        else:
            unit = resolve_unit(ordered)
        if math.isnan(global_min) or math.isnan(global_max) or global_max <= global_min:
            binned = BinnedFrequencies()
        else:
            binned = prepare_bins_and_frequencies(
                buckets,
                global_min,
                global_max,
                bucket_count,
                target_bin_count=self.target_bin_count,
                min_bins=self.min_bins,
                max_bins=self.max_bins,
            )

        self.unit = unit
        self.extended_result = BucketDistributionResult(
            bucket_count=bucket_count,
            mins=mins,
            maxs=maxs,
            ranges=ranges,
            counts=counts,
            bucket_values=buckets,
            global_min=0.0 if math.isnan(global_min) else global_min,
            global_max=1.0 if math.isnan(global_max) else global_max,
            bin_size=binned.bin_size,
            bins=binned.bins,
            frequencies_per_bucket=binned.frequencies,
            normalized_frequencies_per_bucket=binned.normalized,
            unit=unit,
        )
        return ChartComputationResult(
            primary_raw=list(mins),
            primary_smoothed=list(ranges),
            timestamps=[],
            unit=unit,
            tick_interval=TickInterval.DAY,
            date_range=self.end - self.start,
        )

    def shading(self, interval_count: Optional[int] = None) -> Optional[ShadingResult]:
        """Uniform-interval counts over the last computed distribution.

        ``interval_count`` defaults to :attr:`interval_count`.
        """
        result = self.extended_result
        if result is None:
            return None
        count = self.interval_count if interval_count is None else interval_count
        intervals = create_uniform_intervals(result.global_min, result.global_max, count)
        frequencies = count_frequencies_per_interval(result.bucket_values, intervals, result.bucket_count)
        return ShadingResult(
            intervals=intervals,
            frequencies=frequencies,
            normalized=normalize_frequencies(frequencies),
            count_range=frequency_range(frequencies),
        )


class WeeklyDistributionStrategy(BucketDistributionStrategy):
    strategy_type = StrategyType.WEEKLY_DISTRIBUTION

    def __init__(
        self,
        data: SeriesSource,
        label: Optional[str],
        start: datetime,
        end: datetime,
        *,
        timezone: Optional[str] = None,
    ) -> None:
        super().__init__(data, label, start, end, DistributionMode.WEEKLY, timezone=timezone)


class HourlyDistributionStrategy(BucketDistributionStrategy):
    strategy_type = StrategyType.HOURLY_DISTRIBUTION

    def __init__(
        self,
        data: SeriesSource,
        label: Optional[str],
        start: datetime,
        end: datetime,
        *,
        timezone: Optional[str] = None,
    ) -> None:
        super().__init__(data, label, start, end, DistributionMode.HOURLY, timezone=timezone)


__all__ = [
    "DEFAULT_INTERVAL_COUNT",
    "DistributionMode",
    "ShadingResult",
    "BucketDistributionStrategy",
    "WeeklyDistributionStrategy",
    "HourlyDistributionStrategy",
]
