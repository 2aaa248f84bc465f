"""Transform expressions: operations, expression trees, evaluation and computation."""
from __future__ import annotations

from .evaluator import (
    TransformEvaluationError,
    align_metrics_by_timestamp,
    evaluate,
    generate_label,
    legacy_label,
)
from .expression import TransformExpression, TransformExpressionBuilder, TransformOperand
from .operations import TransformOperation, TransformRegistry, default_registry
from .service import TransformComputation, TransformComputationService

__all__ = [
    "TransformComputation",
    "TransformComputationService",
    "TransformEvaluationError",
    "TransformExpression",
    "TransformExpressionBuilder",
    "TransformOperand",
    "TransformOperation",
    "TransformRegistry",
    "align_metrics_by_timestamp",
    "default_registry",
    "evaluate",
    "generate_label",
    "legacy_label",
]
