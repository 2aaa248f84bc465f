"""Unit resolution for single and paired series."""
from __future__ import annotations

from typing import Optional, Sequence

from healthcharts.data.models import CanonicalSeries, MetricData


def resolve_unit(data: Optional[Sequence[MetricData]]) -> Optional[str]:
    if not data:
        return None
    return data[0].unit


def resolve_pair_unit(
    left: Optional[Sequence[MetricData]],
    right: Optional[Sequence[MetricData]],
) -> Optional[str]:
    """Shared unit if both agree, otherwise the left unit, falling back to the right."""
    if not left:
        return resolve_unit(right)
    if not right:
        return resolve_unit(left)
    left_unit = left[0].unit
    right_unit = right[0].unit
    if left_unit == right_unit:
        return left_unit
    return left_unit if left_unit is not None else right_unit


def resolve_canonical_pair_unit(
    left: Optional[CanonicalSeries],
    right: Optional[CanonicalSeries],
) -> Optional[str]:
    """The left unit is authoritative unless blank."""
    if left is None:
        return right.unit if right is not None else None
    if right is None:
        return left.unit
    if not (left.unit or "").strip():
        return right.unit if (right.unit or "").strip() else None
    return left.unit


def resolve_ratio_unit(
    left: Optional[Sequence[MetricData]],
    right: Optional[Sequence[MetricData]],
) -> Optional[str]:
    """``"left/right"`` when both units are present, otherwise ``None``."""
    if not left or not right:
        return None
    left_unit = left[0].unit
    right_unit = right[0].unit
    if left_unit and right_unit:
        return f"{left_unit}/{right_unit}"
    return None


__all__ = [
    "resolve_unit",
    "resolve_pair_unit",
    "resolve_canonical_pair_unit",
    "resolve_ratio_unit",
]
