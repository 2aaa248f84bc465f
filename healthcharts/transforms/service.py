"""Unary and binary transform computations over metric series."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from healthcharts.data.models import MetricData
from healthcharts.data.preparation import prepare_ordered_data
from healthcharts.numeric.operations import apply_binary_operation, apply_unary_operation

from .evaluator import (
    align_metrics_by_timestamp,
    default_metric_labels,
    evaluate,
    generate_label,
    legacy_label,
)
from .expression import TransformExpressionBuilder
from .operations import TransformRegistry, logarithm, square_root

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TransformComputation:
    data: List[MetricData] = field(default_factory=list)
    computed_values: List[float] = field(default_factory=list)
    operation: str = ""
    metrics: List[List[MetricData]] = field(default_factory=list)
    success: bool = False
    message: Optional[str] = None

    @classmethod
    def failed(cls, operation: str, message: str) -> "TransformComputation":
        return cls(operation=operation, success=False, message=message)


class TransformComputationService:
    """Runs registered operations; unknown ids fall back to fixed legacy operators."""

    def __init__(self, registry: Optional[TransformRegistry] = None) -> None:
        self.builder = TransformExpressionBuilder(registry)

    def compute_unary(self, data: Optional[Iterable[MetricData]], operation: str) -> TransformComputation:
        prepared = prepare_ordered_data(data)
        if not prepared:
            return TransformComputation.failed(operation, "No valid data points found")

        metrics = [prepared]
        expression = self.builder.build_from_operation(operation, 0)
        if expression is not None:
            values = evaluate(expression, metrics)
        else:
            logger.info("Unknown unary operation %s; using legacy operator", operation)
            func = {"Log": logarithm, "Sqrt": square_root}.get(operation, lambda value: value)
            values = apply_unary_operation([point.as_float() for point in prepared], func)
        return TransformComputation(prepared, values, operation, metrics, True)

    def compute_binary(
        self,
        left: Optional[Iterable[MetricData]],
        right: Optional[Iterable[MetricData]],
        operation: str,
    ) -> TransformComputation:
        prepared_left = prepare_ordered_data(left)
        prepared_right = prepare_ordered_data(right)
        if not prepared_left or not prepared_right:
            return TransformComputation.failed(operation, "One or both data series are empty")

        aligned_left, aligned_right = align_metrics_by_timestamp(prepared_left, prepared_right)
        if not aligned_left:
            return TransformComputation.failed(operation, "No aligned data points found after timestamp alignment")

        metrics = [aligned_left, aligned_right]
        expression = self.builder.build_from_operation(operation, 0, 1)
        if expression is not None:
            values = evaluate(expression, metrics)
        else:
            logger.info("Unknown binary operation %s; using legacy operator", operation)
            funcs = {"Add": lambda a, b: a + b, "Subtract": lambda a, b: a - b}
            values = apply_binary_operation(
                [point.as_float() for point in aligned_left],
                [point.as_float() for point in aligned_right],
                funcs.get(operation, lambda a, b: a),
            )
        return TransformComputation(aligned_left, values, operation, metrics, True)

    def label_for(self, operation: str, metric_count: int, metric_labels: Optional[List[str]] = None) -> str:
        """Label from the expression tree, or a fixed legacy label for unknown operations."""
        indices = list(range(metric_count)) if metric_count > 0 else [0]
        expression = self.builder.build_from_operation(operation, *indices)
        if expression is not None and metric_count > 0:
            return generate_label(expression, default_metric_labels(metric_count, metric_labels))
        return legacy_label(operation)


__all__ = ["TransformComputation", "TransformComputationService"]
