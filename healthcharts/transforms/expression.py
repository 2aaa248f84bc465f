"""Expression trees over metric series and helpers to build them."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .operations import TransformOperation, TransformRegistry, default_registry


@dataclass(frozen=True)
class TransformOperand:
    """Either a metric index or a nested expression."""

    metric_index: Optional[int] = None
    expression: Optional["TransformExpression"] = None

    @classmethod
    def metric(cls, index: int) -> "TransformOperand":
        return cls(metric_index=index)

    @classmethod
    def from_expression(cls, expression: "TransformExpression") -> "TransformOperand":
        return cls(expression=expression)


@dataclass(frozen=True)
class TransformExpression:
    """Leaf when ``operation`` is ``None`` (single metric operand), otherwise an operation node."""

    operation: Optional[TransformOperation] = None
    operands: List[TransformOperand] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return self.operation is None

    @classmethod
    def metric(cls, index: int) -> "TransformExpression":
        return cls(None, [TransformOperand.metric(index)])

    @classmethod
    def create_operation(cls, operation: TransformOperation, *operands: TransformOperand) -> "TransformExpression":
        return cls(operation, list(operands))

    @classmethod
    def unary(cls, operation: TransformOperation, operand: TransformOperand) -> "TransformExpression":
        return cls(operation, [operand])

    @classmethod
    def binary(
        cls,
        operation: TransformOperation,
        left: TransformOperand,
        right: TransformOperand,
    ) -> "TransformExpression":
        return cls(operation, [left, right])


class TransformExpressionBuilder:
    """Builds expressions from registered operation ids."""

    def __init__(self, registry: Optional[TransformRegistry] = None) -> None:
        self.registry = registry or default_registry()

    def build_from_operation(self, op_id: str, *metric_indices: int) -> Optional[TransformExpression]:
        operation = self.registry.get(op_id)
        if operation is None:
            return None
        if operation.arity > 0 and len(metric_indices) != operation.arity:
            return None
        operands = [TransformOperand.metric(index) for index in metric_indices]
        if operation.arity == 1:
            return TransformExpression.unary(operation, operands[0])
        if operation.arity == 2:
            return TransformExpression.binary(operation, operands[0], operands[1])
        return TransformExpression.create_operation(operation, *operands)

    def build_chained(self, outer_id: str, inner_id: str, *metric_indices: int) -> Optional[TransformExpression]:
        """``outer(inner(metrics...))``; the outer operation must be unary."""
        inner = self.build_from_operation(inner_id, *metric_indices)
        if inner is None:
            return None
        outer = self.registry.get(outer_id)
        if outer is None or outer.arity != 1:
            return None
        return TransformExpression.unary(outer, TransformOperand.from_expression(inner))

    def build_nary(self, op_id: str, *metric_indices: int) -> Optional[TransformExpression]:
        operation = self.registry.get(op_id)
        if operation is None:
            return None
        return TransformExpression.create_operation(
            operation, *(TransformOperand.metric(index) for index in metric_indices)
        )


__all__ = ["TransformOperand", "TransformExpression", "TransformExpressionBuilder"]
