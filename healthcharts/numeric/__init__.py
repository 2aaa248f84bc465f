"""Pure numeric helpers: intervals, smoothing, operators and frequency binning."""
from __future__ import annotations

from .binning import (
    bin_values_and_count_frequencies,
    calculate_bin_size,
    create_bins,
    create_uniform_intervals,
    normalize_frequencies,
    prepare_bins_and_frequencies,
)
from .intervals import (
    Timeline,
    determine_tick_interval,
    generate_normalized_intervals,
    generate_timeline,
    map_timestamp_to_interval_index,
    map_to_intervals,
)
from .operations import (
    apply_binary_operation,
    apply_unary_operation,
    format_to_three_significant_digits,
    normalize_pair,
    normalize_values,
    round_to_three_significant_digits,
)
from .smoothing import create_smoothed_data, interpolate_smoothed_data, smooth_series

__all__ = [
    "Timeline",
    "apply_binary_operation",
    "apply_unary_operation",
    "bin_values_and_count_frequencies",
    "calculate_bin_size",
    "create_bins",
    "create_smoothed_data",
    "create_uniform_intervals",
    "determine_tick_interval",
    "format_to_three_significant_digits",
    "generate_normalized_intervals",
    "generate_timeline",
    "interpolate_smoothed_data",
    "map_timestamp_to_interval_index",
    "map_to_intervals",
    "normalize_frequencies",
    "normalize_pair",
    "normalize_values",
    "prepare_bins_and_frequencies",
    "round_to_three_significant_digits",
    "smooth_series",
]
