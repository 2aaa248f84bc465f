"""Frequency binning for per-bucket value distributions."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

Bin = Tuple[float, float]

TARGET_BIN_COUNT = 15.0
MIN_BIN_COUNT = 5
MAX_BIN_COUNT = 50
_EDGE_TOLERANCE = 0.0001


@dataclass(slots=True)
class BinnedFrequencies:
    bins: List[Bin] = field(default_factory=list)
    bin_size: float = 1.0
    frequencies: Dict[int, Dict[int, int]] = field(default_factory=dict)
    normalized: Dict[int, Dict[int, float]] = field(default_factory=dict)


def calculate_bin_size(
    min_value: float,
    max_value: float,
    *,
    target_bin_count: float = TARGET_BIN_COUNT,
    min_bins: int = MIN_BIN_COUNT,
    max_bins: int = MAX_BIN_COUNT,
) -> float:
    """Pick a 1/2/5/10 x 10^k width giving about ``target_bin_count`` bins, clamped to ``min_bins..max_bins``."""
    value_range = max_value - min_value
    if not math.isfinite(value_range) or value_range <= 0:
        return 1.0

    raw = value_range / target_bin_count
    magnitude = math.pow(10, math.floor(math.log10(abs(raw))))
    normalized = raw / magnitude
    if normalized <= 1.0:
        nice = 1.0
    elif normalized <= 2.0:
        nice = 2.0
    elif normalized <= 5.0:
        nice = 5.0
    else:
        nice = 10.0

    bin_size = nice * magnitude
    count = math.ceil(value_range / bin_size)
    if count < min_bins:
        bin_size = value_range / min_bins
    elif count > max_bins:
        bin_size = value_range / max_bins
    return bin_size


def create_bins(min_value: float, max_value: float, bin_size: float) -> List[Bin]:
    """Bins from the floor-aligned start up to ``max_value``; the last edge reaches ``max_value``."""
    bins: List[Bin] = []
    if not (math.isfinite(min_value) and math.isfinite(max_value) and math.isfinite(bin_size)) or bin_size <= 0:
        return bins

    start = math.floor(min_value / bin_size) * bin_size
    span = (max_value - start) / bin_size
    if not math.isfinite(span):
        return bins

    # edges are index multiples of bin_size, one per step of the span
    for index in range(max(0, math.ceil(span))):
        low = start + index * bin_size
        if low >= max_value:
            break
        bins.append((low, start + (index + 1) * bin_size))

    if bins and bins[-1][1] < max_value:
        bins[-1] = (bins[-1][0], max_value)
    return bins


def find_bin_index(value: float, bins: Sequence[Bin]) -> int:
    """Half-open lookup; the last bin is closed. ``-1`` when nothing matches."""
    if not bins:
        return -1
    last = len(bins) - 1
    for index, (low, high) in enumerate(bins):
        if index < last:
            if low <= value < high:
                return index
        elif low <= value <= high:
            return index

    if bins[0][0] - _EDGE_TOLERANCE <= value < bins[0][0]:
        return 0
    if bins[last][1] < value <= bins[last][1] + _EDGE_TOLERANCE:
        return last
    return -1


def bin_values_and_count_frequencies(values: Sequence[float], bins: Sequence[Bin]) -> Dict[int, int]:
    frequencies = {index: 0 for index in range(len(bins))}
    for raw in values:
        value = float(raw)
        if not math.isfinite(value):
            continue
        index = find_bin_index(value, bins)
        if 0 <= index < len(bins):
            frequencies[index] += 1
    return frequencies


def normalize_frequencies(per_bucket: Mapping[int, Mapping[int, int]]) -> Dict[int, Dict[int, float]]:
    """Scale every count by the single largest count over all buckets and bins."""
    global_max = 0
    for counts in per_bucket.values():
        for count in counts.values():
            global_max = max(global_max, count)
    if global_max == 0:
        global_max = 1
    return {
        bucket: {index: count / global_max for index, count in counts.items()}
        for bucket, counts in per_bucket.items()
    }


def prepare_bins_and_frequencies(
    bucket_values: Mapping[int, Sequence[float]],
    global_min: float,
    global_max: float,
    bucket_count: int,
    *,
    target_bin_count: float = TARGET_BIN_COUNT,
    min_bins: int = MIN_BIN_COUNT,
    max_bins: int = MAX_BIN_COUNT,
) -> BinnedFrequencies:
    bin_size = calculate_bin_size(
        global_min,
        global_max,
        target_bin_count=target_bin_count,
        min_bins=min_bins,
        max_bins=max_bins,
    )
    bins = create_bins(global_min, global_max, bin_size)
    frequencies = {
        bucket: bin_values_and_count_frequencies(bucket_values.get(bucket, []), bins)
        for bucket in range(bucket_count)
    }
    return BinnedFrequencies(
        bins=bins,
        bin_size=bin_size,
        frequencies=frequencies,
        normalized=normalize_frequencies(frequencies),
    )


def create_uniform_intervals(global_min: float, global_max: float, interval_count: int) -> List[Bin]:
    """Equal-width shading intervals; the final edge is exactly ``global_max``."""
    if interval_count <= 0 or not global_max > global_min:
        return [(global_min, global_max)]
    edges = np.linspace(global_min, global_max, interval_count + 1)
    intervals = [(float(edges[index]), float(edges[index + 1])) for index in range(interval_count)]
    intervals[-1] = (intervals[-1][0], global_max)
    return intervals


def count_frequencies_per_interval(
    bucket_values: Mapping[int, Sequence[float]],
    intervals: Sequence[Bin],
    bucket_count: int,
) -> Dict[int, Dict[int, int]]:
    """Per-bucket interval counts without edge tolerance."""
    result: Dict[int, Dict[int, int]] = {}
    last = len(intervals) - 1
    for bucket in range(bucket_count):
        counts = {index: 0 for index in range(len(intervals))}
        for raw in bucket_values.get(bucket, []):
            value = float(raw)
            if not math.isfinite(value):
                continue
            for index, (low, high) in enumerate(intervals):
                inside = low <= value <= high if index == last else low <= value < high
                if inside:
                    counts[index] += 1
                    break
        result[bucket] = counts
    return result


def frequency_range(per_bucket: Mapping[int, Mapping[int, int]]) -> Optional[Tuple[int, int]]:
    """Smallest and largest non-zero count, ``None`` when every count is zero."""
    counts = [count for bucket in per_bucket.values() for count in bucket.values() if count > 0]
    if not counts:
        return None
    return min(counts), max(counts)


__all__ = [
    "Bin",
    "BinnedFrequencies",
    "calculate_bin_size",
    "create_bins",
    "find_bin_index",
    "bin_values_and_count_frequencies",
    "normalize_frequencies",
    "prepare_bins_and_frequencies",
    "create_uniform_intervals",
    "count_frequencies_per_interval",
    "frequency_range",
]
