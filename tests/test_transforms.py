"""Transform registry, expression evaluation, labels and the computation service."""

from __future__ import annotations

import math
from datetime import datetime, timedelta

import pytest

from healthcharts.strategies import TransformResultStrategy
from healthcharts.transforms import (
    TransformComputationService,
    TransformEvaluationError,
    TransformExpression,
    TransformExpressionBuilder,
    TransformOperand,
    TransformOperation,
    TransformRegistry,
    align_metrics_by_timestamp,
    default_registry,
    evaluate,
    generate_label,
    legacy_label,
)
from tests.conftest import get_test_logger
from tests.helpers import build_metric_series

logger = get_test_logger(__name__)
logger.info("Starting tests for transforms")


def test_default_registry_contents() -> None:
    """The default registry exposes the built-in unary and binary operations."""
    registry = default_registry()
    assert {op.id for op in registry.unary()} == {"Log", "Sqrt"}
    assert {op.id for op in registry.binary()} == {"Add", "Subtract", "Divide"}
    assert "Log" in registry
    assert registry.get("Missing") is None
    assert registry.nary() == []


def test_registry_rejects_empty_id() -> None:
    """Operations must carry an id."""
    registry = TransformRegistry()
    with pytest.raises(ValueError):
        registry.register(TransformOperation.unary("", "Nothing", lambda value: value))


def test_registry_instances_are_independent() -> None:
    """Registering on one registry does not leak into a fresh default registry."""
    registry = default_registry()
    registry.register(TransformOperation.nary("Mean", "Mean", -1, lambda values: sum(values) / len(values)))
    assert "Mean" in registry
    assert "Mean" not in default_registry()
    assert [op.id for op in registry.nary()] == ["Mean"]


def test_operations_are_nan_tolerant() -> None:
    """Edge-case inputs produce NaN rather than exceptions."""
    registry = default_registry()
    assert math.isnan(registry.get("Log").execute([-1.0]))
    assert math.isnan(registry.get("Log").execute([0.0]))
    assert math.isnan(registry.get("Sqrt").execute([-4.0]))
    assert math.isnan(registry.get("Divide").execute([1.0, 0.0]))
    assert math.isnan(registry.get("Add").execute([math.nan, 1.0]))
    assert math.isnan(registry.get("Add").execute([1.0]))
    assert registry.get("Sqrt").execute([16.0]) == pytest.approx(4.0)


def test_evaluate_unary_and_binary() -> None:
    """Expressions are evaluated pointwise across aligned metrics."""
    builder = TransformExpressionBuilder()
    first = build_metric_series([math.e, 1.0, None])
    second = build_metric_series([2.0, 3.0, 4.0])

    logs = evaluate(builder.build_from_operation("Log", 0), [first])
    sums = evaluate(builder.build_from_operation("Add", 0, 1), [first, second])

    assert logs[0] == pytest.approx(1.0)
    assert logs[1] == pytest.approx(0.0)
    assert math.isnan(logs[2])
    assert sums[:2] == pytest.approx([math.e + 2.0, 4.0])
    assert math.isnan(sums[2])


def test_evaluate_nested_expression() -> None:
    """Nested operands recurse before the outer operation is applied."""
    builder = TransformExpressionBuilder()
    expression = builder.build_chained("Sqrt", "Add", 0, 1)

    values = evaluate(expression, [build_metric_series([7.0]), build_metric_series([9.0])])

    assert values == pytest.approx([4.0])


def test_evaluate_preconditions() -> None:
    """Missing expressions, missing metrics and misaligned series are contract violations."""
    builder = TransformExpressionBuilder()
    expression = builder.build_from_operation("Add", 0, 1)
    with pytest.raises(TransformEvaluationError, match="aligned"):
        evaluate(expression, [build_metric_series([1.0, 2.0]), build_metric_series([1.0])])
    with pytest.raises(TransformEvaluationError):
        evaluate(expression, [])
    with pytest.raises(ValueError):
        evaluate(None, [build_metric_series([1.0])])


def test_out_of_range_metric_index_is_nan() -> None:
    """A leaf pointing at a missing metric yields NaN."""
    values = evaluate(TransformExpression.metric(3), [build_metric_series([1.0, 2.0])])
    assert all(math.isnan(value) for value in values)


def test_generate_label_mirrors_structure() -> None:
    """Labels substitute metric names and parenthesize nested expressions."""
    builder = TransformExpressionBuilder()
    labels = ["Steps", "Calories"]

    assert generate_label(builder.build_from_operation("Add", 0, 1), labels) == "[Transform] Steps + Calories"
    assert generate_label(builder.build_from_operation("Log", 0), labels) == "[Transform] log(Steps)"
    assert generate_label(builder.build_chained("Sqrt", "Subtract", 0, 1), labels) == "[Transform] √(Steps - Calories)"
    assert generate_label(builder.build_from_operation("Divide", 0, 1), labels) == "[Transform] Steps Divide Calories"
    assert generate_label(TransformExpression.metric(2), labels) == "Metric[2]"
    assert generate_label(None, labels) == "Transform Result"


def test_builder_rejects_unknown_or_mismatched_operations() -> None:
    """Unknown ids, wrong operand counts and non-unary outer operations give ``None``."""
    builder = TransformExpressionBuilder()
    assert builder.build_from_operation("Pow", 0) is None
    assert builder.build_from_operation("Log", 0, 1) is None
    assert builder.build_chained("Add", "Log", 0) is None
    nary = builder.build_nary("Add", 0, 1)
    assert nary is not None and len(nary.operands) == 2


def test_manual_expression_factories() -> None:
    """Expressions can be assembled directly from operations and operands."""
    registry = default_registry()
    inner = TransformExpression.binary(
        registry.get("Subtract"), TransformOperand.metric(0), TransformOperand.metric(1)
    )
    outer = TransformExpression.unary(registry.get("Sqrt"), TransformOperand.from_expression(inner))

    assert not outer.is_leaf
    assert TransformExpression.metric(0).is_leaf
    assert evaluate(outer, [build_metric_series([10.0]), build_metric_series([1.0])]) == pytest.approx([3.0])


def test_align_metrics_by_timestamp() -> None:
    """Only timestamps present on both sides survive, paired with the matching point."""
    left = build_metric_series([1.0, 2.0, 3.0])
    right = build_metric_series([10.0, 30.0], start=left[1].normalized_timestamp)

    aligned_left, aligned_right = align_metrics_by_timestamp(left, right)

    assert [point.value for point in aligned_left] == [2.0, 3.0]
    assert [point.value for point in aligned_right] == [10.0, 30.0]


def test_service_failures_carry_messages() -> None:
    """Empty or non-overlapping inputs produce unsuccessful computations."""
    service = TransformComputationService()
    empty = service.compute_unary([], "Log")
    assert not empty.success
    assert empty.message == "No valid data points found"

    one_sided = service.compute_binary(build_metric_series([1.0]), [], "Add")
    assert one_sided.message == "One or both data series are empty"

    left = build_metric_series([1.0])
    right = build_metric_series([1.0], start=datetime(2025, 1, 1))
    disjoint = service.compute_binary(left, right, "Add")
    assert disjoint.message == "No aligned data points found after timestamp alignment"


def test_service_computes_binary_transform() -> None:
    """Subtract runs over timestamp-aligned points and keeps the left points as data."""
    logger.info("Running binary transform service test")
    service = TransformComputationService()
    left = build_metric_series([10.0, 20.0, 30.0])
    right = build_metric_series([1.0, 2.0, 3.0])

    computation = service.compute_binary(left, right, "Subtract")

    assert computation.success
    assert computation.computed_values == pytest.approx([9.0, 18.0, 27.0])
    assert computation.data == left
    assert len(computation.metrics) == 2


def test_service_unknown_unary_falls_back_to_identity() -> None:
    """Unknown unary ids keep the values unchanged."""
    service = TransformComputationService()
    computation = service.compute_unary(build_metric_series([4.0, 9.0]), "Identity")
    assert computation.success
    assert computation.computed_values == pytest.approx([4.0, 9.0])


def test_service_labels() -> None:
    """Known operations label from their tree; unknown ones use the legacy label."""
    service = TransformComputationService()
    assert service.label_for("Add", 2, ["Steps", "Calories"]) == "[Transform] Steps + Calories"
    assert service.label_for("Log", 1) == "[Transform] log(Metric0)"
    assert service.label_for("Unknown", 1) == "Transform Result"
    assert legacy_label("Log") == "Log(Result)"
    assert legacy_label("Subtract") == "Result (Difference)"


def test_transform_result_strategy_passthrough() -> None:
    """Computed values are re-wrapped on the source timestamps with no unit."""
    data = build_metric_series([1.0, 2.0, 3.0], unit="kg")
    start = data[0].normalized_timestamp
    strategy = TransformResultStrategy(data, [1.0, math.nan, 9.0], None, start, start + timedelta(hours=2))

    result = strategy.compute()

    assert result is not None
    assert strategy.primary_label == "Transform Result"
    assert result.primary_raw[0] == 1.0
    assert math.isnan(result.primary_raw[1])
    assert len(result.primary_smoothed) == 3
    assert result.secondary_raw is None
    assert result.unit is None
    assert strategy.unit is None

    with pytest.raises(TypeError):
        TransformResultStrategy(None, [], None, start, start)
