"""Transform operations and the registry that names them."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)

NAN = float("nan")


def _collapse(value: float) -> float:
    return value if math.isfinite(value) else NAN


def _guarded(func: Callable[[Sequence[float]], float]) -> Callable[[Sequence[float]], float]:
    """Wrap ``func`` so non-finite operands, results and arithmetic errors give NaN."""

    def _run(values: Sequence[float]) -> float:
        if any(not math.isfinite(value) for value in values):
            return NAN
        try:
            return _collapse(float(func(values)))
        except (ArithmeticError, ValueError):
            return NAN

    return _run


@dataclass(frozen=True)
class TransformOperation:
    id: str
    display_name: str
    arity: int
    func: Callable[[Sequence[float]], float]

    def execute(self, values: Sequence[float]) -> float:
        return self.func(values)

    @classmethod
    def unary(cls, op_id: str, display_name: str, operation: Callable[[float], float]) -> "TransformOperation":
        def _apply(values: Sequence[float]) -> float:
            return operation(values[0]) if len(values) >= 1 else NAN

        return cls(op_id, display_name, 1, _guarded(_apply))

    @classmethod
    def binary(cls, op_id: str, display_name: str, operation: Callable[[float, float], float]) -> "TransformOperation":
        def _apply(values: Sequence[float]) -> float:
            return operation(values[0], values[1]) if len(values) >= 2 else NAN

        return cls(op_id, display_name, 2, _guarded(_apply))

    @classmethod
    def nary(
        cls,
        op_id: str,
        display_name: str,
        arity: int,
        operation: Callable[[Sequence[float]], float],
    ) -> "TransformOperation":
        """``arity`` below zero means any number of operands."""
        return cls(op_id, display_name, arity, _guarded(operation))


def logarithm(value: float) -> float:
    if value <= 0:
        return NAN
    return math.log(value)


def square_root(value: float) -> float:
    if value < 0:
        return NAN
    return math.sqrt(value)


def ratio(a: float, b: float) -> float:
    if b == 0:
        return NAN
    return a / b


class TransformRegistry:
    """Lookup of operations by id."""

    def __init__(self, operations: Optional[Sequence[TransformOperation]] = None) -> None:
        self._operations: Dict[str, TransformOperation] = {}
        for operation in operations or ():
            self.register(operation)

    def register(self, operation: TransformOperation) -> None:
        if operation is None or not operation.id:
            raise ValueError("Operation and id must be provided")
        if operation.id in self._operations:
            logger.debug("Replacing transform operation %s", operation.id)
        self._operations[operation.id] = operation

    def get(self, op_id: str) -> Optional[TransformOperation]:
        return self._operations.get(op_id)

    def __contains__(self, op_id: object) -> bool:
        return op_id in self._operations

    def all(self) -> List[TransformOperation]:
        return list(self._operations.values())

    def unary(self) -> List[TransformOperation]:
        return [op for op in self._operations.values() if op.arity == 1]

    def binary(self) -> List[TransformOperation]:
        return [op for op in self._operations.values() if op.arity == 2]

    def nary(self) -> List[TransformOperation]:
        return [op for op in self._operations.values() if op.arity > 2 or op.arity < 0]


def default_registry() -> TransformRegistry:
    """A fresh registry holding Log, Sqrt, Add, Subtract and Divide."""
    return TransformRegistry(
        [
            TransformOperation.unary("Log", "Logarithm", logarithm),
            TransformOperation.unary("Sqrt", "Square Root", square_root),
            TransformOperation.binary("Add", "Add", lambda a, b: a + b),
            TransformOperation.binary("Subtract", "Subtract", lambda a, b: a - b),
            TransformOperation.binary("Divide", "Divide", ratio),
        ]
    )


__all__ = [
    "TransformOperation",
    "TransformRegistry",
    "default_registry",
    "logarithm",
    "square_root",
    "ratio",
]
