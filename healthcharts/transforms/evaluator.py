"""Pointwise evaluation and labelling of transform expressions."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from healthcharts.data.models import MetricData

from .expression import TransformExpression, TransformOperand

logger = logging.getLogger(__name__)

NAN = float("nan")
DEFAULT_LABEL = "Transform Result"

_SYMBOLS: Dict[str, str] = {
    "Log": "log",
    "Sqrt": "√",
    "Add": "+",
    "Subtract": "-",
}

_LEGACY_LABELS: Dict[str, str] = {
    "Log": "Log(Result)",
    "Sqrt": "√(Result)",
    "Add": "Result (Sum)",
    "Subtract": "Result (Difference)",
}


class TransformEvaluationError(ValueError):
    """Raised when an expression cannot be evaluated against the given metrics."""


def evaluate(expression: TransformExpression, metrics: Sequence[Sequence[MetricData]]) -> List[float]:
    """Evaluate ``expression`` at every index of the aligned ``metrics``."""
    if expression is None:
        raise TransformEvaluationError("expression is required")
    if not metrics:
        raise TransformEvaluationError("At least one metric series is required")
    length = len(metrics[0])
    if any(len(series) != length for series in metrics):
        raise TransformEvaluationError("All metric series must be aligned (same length)")
    results = [_evaluate_at(expression, metrics, index) for index in range(length)]
    logger.debug("Evaluated %s transform values", len(results))
    return results


def _evaluate_at(expression: TransformExpression, metrics: Sequence[Sequence[MetricData]], index: int) -> float:
    if expression.operation is None:
        if len(expression.operands) != 1 or expression.operands[0].metric_index is None:
            return NAN
        return _metric_value(metrics, expression.operands[0].metric_index, index)
    values = [_evaluate_operand(operand, metrics, index) for operand in expression.operands]
    return expression.operation.execute(values)


def _evaluate_operand(operand: TransformOperand, metrics: Sequence[Sequence[MetricData]], index: int) -> float:
    if operand.metric_index is not None:
        return _metric_value(metrics, operand.metric_index, index)
    if operand.expression is not None:
        return _evaluate_at(operand.expression, metrics, index)
    return NAN


def _metric_value(metrics: Sequence[Sequence[MetricData]], metric_index: int, index: int) -> float:
    if metric_index < 0 or metric_index >= len(metrics) or index >= len(metrics[metric_index]):
        return NAN
    return metrics[metric_index][index].as_float()


def _metric_label(index: int, labels: Sequence[str]) -> str:
    return labels[index] if 0 <= index < len(labels) else f"Metric[{index}]"


def _operand_label(operand: TransformOperand, labels: Sequence[str]) -> str:
    if operand.metric_index is not None:
        return _metric_label(operand.metric_index, labels)
    if operand.expression is not None:
        return f"({_build_label(operand.expression, labels)})"
    return "?"


def _build_label(expression: TransformExpression, labels: Sequence[str]) -> str:
    if expression.operation is None:
        if len(expression.operands) == 1 and expression.operands[0].metric_index is not None:
            return _metric_label(expression.operands[0].metric_index, labels)
        return "Metric"
    symbol = operation_symbol(expression.operation.id)
    parts = [_operand_label(operand, labels) for operand in expression.operands]
    if len(parts) == 1:
        nested = expression.operands[0].expression is not None
        return f"{symbol}{parts[0]}" if nested else f"{symbol}({parts[0]})"
    return f" {symbol} ".join(parts)


def operation_symbol(op_id: str) -> str:
    return _SYMBOLS.get(op_id, op_id)


def generate_label(expression: Optional[TransformExpression], metric_labels: Sequence[str]) -> str:
    """Human readable label; operation nodes are prefixed with ``[Transform]``."""
    if expression is None:
        return DEFAULT_LABEL
    label = _build_label(expression, metric_labels)
    return label if expression.operation is None else f"[Transform] {label}"


def legacy_label(op_id: str) -> str:
    return _LEGACY_LABELS.get(op_id, DEFAULT_LABEL)


def default_metric_labels(count: int, labels: Optional[Sequence[str]] = None) -> List[str]:
    resolved = [label for label in (labels or []) if label][:count]
    while len(resolved) < count:
        resolved.append(f"Metric{len(resolved)}")
    return resolved


def align_metrics_by_timestamp(
    left: Sequence[MetricData],
    right: Sequence[MetricData],
) -> Tuple[List[MetricData], List[MetricData]]:
    """Keep the points of ``left`` whose timestamp also appears in ``right``."""
    lookup: Dict[object, MetricData] = {}
    for point in right:
        lookup[point.normalized_timestamp] = point
    aligned_left: List[MetricData] = []
    aligned_right: List[MetricData] = []
    for point in left:
        match = lookup.get(point.normalized_timestamp)
        if match is not None:
            aligned_left.append(point)
            aligned_right.append(match)
    return aligned_left, aligned_right


__all__ = [
    "DEFAULT_LABEL",
    "TransformEvaluationError",
    "evaluate",
    "generate_label",
    "legacy_label",
    "operation_symbol",
    "default_metric_labels",
    "align_metrics_by_timestamp",
]
