"""Elementwise operators, normalization modes and significant-digit rounding."""
from __future__ import annotations

import math
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from healthcharts.data.models import NormalizationMode

NAN = float("nan")


def _to_numpy(values: Sequence[float]) -> np.ndarray:
    return np.asarray(list(values), dtype=float)


def _finite(value: float) -> bool:
    return not (math.isnan(value) or math.isinf(value))


def apply_binary_operation(
    left: Optional[Sequence[float]],
    right: Optional[Sequence[float]],
    operation: Callable[[float, float], float],
) -> List[float]:
    """Apply ``operation`` pairwise up to the shorter length.

    Non-finite operands, non-finite results and arithmetic errors all yield NaN.
    """
    if left is None or right is None:
        return []
    result: List[float] = []
    for a, b in zip(left, right):
        a, b = float(a), float(b)
        if not (_finite(a) and _finite(b)):
            result.append(NAN)
            continue
        try:
            value = float(operation(a, b))
        except (ArithmeticError, ValueError):
            result.append(NAN)
            continue
        result.append(value if _finite(value) else NAN)
    return result


def apply_unary_operation(
    values: Optional[Sequence[float]],
    operation: Callable[[float], float],
) -> List[float]:
    if values is None:
        return []
    result: List[float] = []
    for raw in values:
        value = float(raw)
        if not _finite(value):
            result.append(NAN)
            continue
        try:
            computed = float(operation(value))
        except (ArithmeticError, ValueError):
            result.append(NAN)
            continue
        result.append(computed if _finite(computed) else NAN)
    return result


def _safe_ratio(a: float, b: float) -> float:
    if b == 0.0:
        return NAN
    return a / b


def value_differences(left: Optional[Sequence[float]], right: Optional[Sequence[float]]) -> List[float]:
    return apply_binary_operation(left, right, lambda a, b: a - b)


def value_ratios(left: Optional[Sequence[float]], right: Optional[Sequence[float]]) -> Optional[List[float]]:
    if left is None or right is None:
        return None
    return apply_binary_operation(left, right, _safe_ratio)


def normalize_values(
    values: Optional[Sequence[float]],
    mode: NormalizationMode = NormalizationMode.ZERO_TO_ONE,
) -> Optional[List[float]]:
    """Normalize a single list. ``RELATIVE_TO_MAX`` needs :func:`normalize_pair`."""
    if mode is NormalizationMode.RELATIVE_TO_MAX:
        raise ValueError("RELATIVE_TO_MAX requires two lists; use normalize_pair")
    if values is None or len(values) == 0:
        return None

    array = _to_numpy(values)
    valid = array[~np.isnan(array)]
    if valid.size == 0:
        return [NAN] * len(array)
    low = float(valid.min())
    high = float(valid.max())
    if math.isnan(low) or math.isnan(high) or low == high:
        return [NAN] * len(array)

    if mode is NormalizationMode.ZERO_TO_ONE:
        scaled = (array - low) / (high - low)
    else:
        scaled = array / high * 100.0
    return [float(value) for value in scaled]


def normalize_pair(
    first: Optional[Sequence[float]],
    second: Optional[Sequence[float]],
    mode: NormalizationMode = NormalizationMode.RELATIVE_TO_MAX,
) -> Tuple[Optional[List[float]], Optional[List[float]]]:
    """Express ``first`` relative to ``second`` in percent; ``second`` becomes a 100 baseline."""
    if mode is not NormalizationMode.RELATIVE_TO_MAX:
        raise ValueError(f"normalize_pair only supports RELATIVE_TO_MAX, got {mode}")
    if first is None or second is None:
        return None, None

    count = min(len(first), len(second))
    first_percent = normalize_values(first, NormalizationMode.PERCENTAGE_OF_MAX)
    second_percent = normalize_values(second, NormalizationMode.PERCENTAGE_OF_MAX)
    if first_percent is None or second_percent is None:
        return None, None

    relative: List[float] = []
    for a, b in zip(first_percent[:count], second_percent[:count]):
        if math.isnan(a) or math.isnan(b) or b == 0:
            relative.append(NAN)
            continue
        relative.append(a / b * 100.0)
    return relative, [100.0] * count


def round_to_three_significant_digits(value: float) -> float:
    if math.isnan(value) or math.isinf(value) or value == 0:
        return value
    order = math.floor(math.log10(abs(value)))
    try:
        multiplier = math.pow(10, 2 - order)
    except OverflowError:
        # subnormal magnitudes
        return value
    return round(value * multiplier) / multiplier


def format_to_three_significant_digits(value: float) -> str:
    """Display form with at most three significant digits and no trailing zeros."""
    rounded = round_to_three_significant_digits(value)
    if math.isnan(rounded):
        return "NaN"
    if math.isinf(rounded):
        return "Infinity" if rounded > 0 else "-Infinity"
    if rounded == 0:
        return "0"

    order = math.floor(math.log10(abs(rounded)))
    decimals = max(0, 2 - order)
    if decimals > 0:
        formatted = f"{rounded:.{decimals}f}"
        if "." in formatted:
            formatted = formatted.rstrip("0").rstrip(".")
        return formatted
    return str(int(round(rounded)))


__all__ = [
    "apply_binary_operation",
    "apply_unary_operation",
    "value_differences",
    "value_ratios",
    "normalize_values",
    "normalize_pair",
    "round_to_three_significant_digits",
    "format_to_three_significant_digits",
]
