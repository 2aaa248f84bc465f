"""Strategy selection by series count and the fault-tolerant compute entry point."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence, Tuple

from healthcharts.config.settings import Settings
from healthcharts.data.canonical import SeriesSource

from .base import ChartComputationStrategy
from .distribution import BucketDistributionStrategy
from .multi import MultiMetricStrategy
from .pairwise import CombinedMetricStrategy, NormalizedStrategy
from .results import ChartComputationResult
from .single import SingleMetricStrategy

logger = logging.getLogger(__name__)


def apply_settings(strategy: ChartComputationStrategy, settings: Settings) -> ChartComputationStrategy:
    """Copy the smoothing, binning, shading and normalization knobs onto ``strategy``."""
    strategy.max_points_per_bin = settings.smoothing.max_points_per_bin
    if isinstance(strategy, BucketDistributionStrategy):
        distribution = settings.distribution
        strategy.target_bin_count = distribution.target_bin_count
        strategy.min_bins = distribution.min_bins
        strategy.max_bins = distribution.max_bins
        strategy.interval_count = distribution.interval_count
    if isinstance(strategy, NormalizedStrategy):
        strategy.mode = settings.normalization.mode
    return strategy


def select_strategy(
    series: Sequence[SeriesSource],
    labels: Sequence[str],
    start: datetime,
    end: datetime,
    *,
    timezone: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> Tuple[ChartComputationStrategy, Optional[str]]:
    """Pick the chart strategy for ``series`` and return it with the secondary label.

    One series gives a single-metric chart, two a combined chart (the second
    label becomes the secondary label) and more than two a multi-metric chart.
    With ``settings`` the knobs are applied and its timezone is used unless
    ``timezone`` is given.
    """
    if not series:
        raise ValueError("At least one series is required")
    if labels is None or len(labels) != len(series):
        raise ValueError("Labels count must match series count")
    if timezone is None and settings is not None:
        timezone = settings.timezone

    secondary_label: Optional[str] = None
    strategy: ChartComputationStrategy
    if len(series) > 2:
        strategy = MultiMetricStrategy(series, labels, start, end, timezone=timezone)
    elif len(series) == 2:
        secondary_label = labels[1]
        strategy = CombinedMetricStrategy(
            series[0], series[1], labels[0], labels[1], start, end, timezone=timezone
        )
    else:
        strategy = SingleMetricStrategy(series[0], labels[0], start, end, timezone=timezone)

    if settings is not None:
        apply_settings(strategy, settings)
    logger.info("Selected %s for %s series", type(strategy).__name__, len(series))
    return strategy, secondary_label


def compute_safely(strategy: Optional[ChartComputationStrategy]) -> Optional[ChartComputationResult]:
    """Run ``strategy.compute()``; failures are logged and reported as ``None``."""
    if strategy is None:
        logger.warning("No strategy supplied")
        return None

    name = type(strategy).__name__
    logger.info("Computing %s", name)
    try:
        result = strategy.compute()
    except Exception:
        logger.error("Strategy %s failed", name, exc_info=True)
        return None
    if result is None:
        logger.info("Strategy %s returned no result (likely no data)", name)
    return result


__all__ = ["apply_settings", "select_strategy", "compute_safely"]
