"""Chart computation strategies and their result contracts."""
from __future__ import annotations

from .base import ChartComputationStrategy, StrategyType
from .distribution import (
    BucketDistributionStrategy,
    DistributionMode,
    HourlyDistributionStrategy,
    ShadingResult,
    WeeklyDistributionStrategy,
)
from .multi import MultiMetricStrategy
from .pairwise import CombinedMetricStrategy, DifferenceStrategy, NormalizedStrategy, RatioStrategy
from .results import (
    BucketDistributionResult,
    ChartComputationResult,
    DistributionRangeResult,
    SeriesResult,
    WeekdayTrendPoint,
    WeekdayTrendResult,
    WeekdayTrendSeries,
)
from .selection import apply_settings, compute_safely, select_strategy
from .single import SingleMetricStrategy
from .transform_result import TransformResultStrategy
from .weekday_trend import WeekdayTrendComputationStrategy, WeekdayTrendStrategy

__all__ = [
    "BucketDistributionResult",
    "BucketDistributionStrategy",
    "ChartComputationResult",
    "ChartComputationStrategy",
    "CombinedMetricStrategy",
    "DifferenceStrategy",
    "DistributionMode",
    "DistributionRangeResult",
    "HourlyDistributionStrategy",
    "MultiMetricStrategy",
    "NormalizedStrategy",
    "RatioStrategy",
    "SeriesResult",
    "ShadingResult",
    "SingleMetricStrategy",
    "StrategyType",
    "TransformResultStrategy",
    "WeekdayTrendComputationStrategy",
    "WeekdayTrendPoint",
    "WeekdayTrendResult",
    "WeekdayTrendSeries",
    "WeekdayTrendStrategy",
    "WeeklyDistributionStrategy",
    "apply_settings",
    "compute_safely",
    "select_strategy",
]
