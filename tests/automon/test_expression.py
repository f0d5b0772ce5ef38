"""
Tests for PythonExpressionEvaluator and the rule syntax translation.
"""

from __future__ import annotations

import pytest

from src.automon.domain.exceptions import ExpressionRuntimeError, UnevaluableExpressionError
from src.automon.infrastructure.expression import PythonExpressionEvaluator, compile_expression, translate


@pytest.fixture
def evaluator() -> PythonExpressionEvaluator:
    return PythonExpressionEvaluator()


class TestTranslate:
    """C-style operators become Python operators."""

    def test_logical_operators(self) -> None:
        assert translate("s010D < 30 && s0C00 > 150") == "s010D < 30 and s0C00 > 150"
        assert translate("a||b") == "a or b"
        assert translate("!(a)") == "not ( a )"

    def test_not_equal_is_not_negation(self) -> None:
        assert translate("a != 1") == "a != 1"

    def test_boolean_literals(self) -> None:
        assert translate("true && false") == "True and False"

    def test_numbers(self) -> None:
        assert translate("a > 1.5e3 && b < .25") == "a > 1.5e3 and b < .25"

    @pytest.mark.parametrize("text", ["a = 1", "a ? b : c", "s010D.real > 1", "'x' == 'x'", "a; b"])
    def test_unknown_characters_rejected(self, text: str) -> None:
        with pytest.raises(UnevaluableExpressionError):
            translate(text)


class TestCheck:
    """Pre-flight validation."""

    def test_accepts_known_identifiers(self, evaluator) -> None:
        evaluator.check("s010D < 30 && s0C00 > 150", {"s010D", "s0C00"})

    def test_rejects_unknown_identifier(self, evaluator) -> None:
        with pytest.raises(UnevaluableExpressionError) as exc_info:
            evaluator.check("s010D < 30 && s0C00 > 150", {"s010D"})

        assert "s0C00" in exc_info.value.details["reason"]

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "   ",
            "s010D <",
            "(s010D < 30",
            "s010D ** 2 > 4",
            "foo(s010D) > 1",
            "abs > 1",
            "max(s010D, key=s010D) > 1",
        ],
    )
    def test_rejects_invalid_text(self, evaluator, text: str) -> None:
        with pytest.raises(UnevaluableExpressionError):
            evaluator.check(text, {"s010D"})

    def test_can_evaluate(self, evaluator) -> None:
        assert evaluator.can_evaluate("s010D > 1", ["s010D"]) is True
        assert evaluator.can_evaluate("s010D >", ["s010D"]) is False

    def test_free_names_reported(self) -> None:
        _, names = compile_expression("max(s010D, s0C00) > abs(s0D00)")
        assert names == frozenset({"s010D", "s0C00", "s0D00"})

    def test_reserved_names(self, evaluator) -> None:
        assert {"abs", "min", "max"} <= evaluator.reserved_names
        assert {"and", "or", "not", "True", "False", "true", "false"} <= evaluator.reserved_names
        assert "&&" not in evaluator.reserved_names


class TestEvaluate:
    """Evaluation against bindings."""

    @pytest.mark.parametrize(
        ("text", "bindings", "expected"),
        [
            ("s010D < 30 && s0C00 > 150", {"s010D": 20.0, "s0C00": 160.0}, True),
            ("s010D < 30 && s0C00 > 150", {"s010D": 35.0, "s0C00": 160.0}, False),
            ("s010D < 30 || s0C00 > 150", {"s010D": 35.0, "s0C00": 160.0}, True),
            ("!(s010D < 30)", {"s010D": 35.0}, True),
            ("s010D < 30 and not s0C00 > 150", {"s010D": 10.0, "s0C00": 100.0}, True),
            ("abs(s010D) > 3", {"s010D": -5.0}, True),
            ("max(s010D, s0C00) >= 160", {"s010D": 20.0, "s0C00": 160.0}, True),
            ("(s010D + s0C00) / 2 == 90", {"s010D": 20.0, "s0C00": 160.0}, True),
            ("s010D % 2 != 0", {"s010D": 3.0}, True),
            ("-s010D > 0", {"s010D": -1.0}, True),
            ("true", {}, True),
            ("1 < 2 && false", {}, False),
        ],
    )
    def test_results(self, evaluator, text: str, bindings: dict, expected: bool) -> None:
        assert evaluator.evaluate(text, bindings) is expected

    def test_division_by_zero_raises_runtime_error(self, evaluator) -> None:
        with pytest.raises(ExpressionRuntimeError) as exc_info:
            evaluator.evaluate("s010D / s0C00 > 1", {"s010D": 1.0, "s0C00": 0.0})

        assert exc_info.value.details["original_error_type"] == "ZeroDivisionError"

    def test_missing_binding_raises_runtime_error(self, evaluator) -> None:
        with pytest.raises(ExpressionRuntimeError):
            evaluator.evaluate("s010D > 1", {})

    def test_invalid_text_raises_runtime_error(self, evaluator) -> None:
        with pytest.raises(ExpressionRuntimeError):
            evaluator.evaluate("s010D >", {"s010D": 1.0})

    def test_builtins_unavailable(self, evaluator) -> None:
        with pytest.raises(UnevaluableExpressionError):
            evaluator.check("len(s010D) > 1", {"s010D"})
