"""Tests for the parse-once, evaluate-many façade."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

import pydantic
import pytest

import calcarg
from calcarg import (
    Calculator,
    EvalError,
    LexError,
    MissingVariableError,
    ParseError,
    ParseOptions,
    analyse,
    parse,
)


class TestParse:
    """parse() builds a Calculator or raises a structured error."""

    def test_keeps_formula(self, health_calculator: Calculator, health_formula: str) -> None:
        assert health_calculator.formula == health_formula

    def test_str_renders_tree(self, health_calculator: Calculator) -> None:
        assert str(health_calculator) == "(((100 - <age>) * <health>) / 100)"

    def test_analyse_alias(self, health_formula: str) -> None:
        assert analyse(health_formula) == parse(health_formula)

    def test_lex_error(self) -> None:
        with pytest.raises(LexError, match="malformed numeric literal"):
            parse("1.2.3")

    def test_parse_error(self) -> None:
        with pytest.raises(ParseError, match="expected closing parenthesis"):
            parse("(1+2")

    def test_errors_share_base(self) -> None:
        for formula in ("1.2.3", "(1+2", "#", ""):
            with pytest.raises(calcarg.CalcError):
                parse(formula)

    def test_lenient_options(self) -> None:
        calc = parse("1 2", ParseOptions(require_eof=False))
        assert calc.evaluate({}) == 1.0

    def test_calculator_is_immutable(self, health_calculator: Calculator) -> None:
        with pytest.raises(pydantic.ValidationError):
            health_calculator.formula = "1"  # type: ignore[misc]

    def test_logs_parsed_tree(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="calcarg.calculator"):
            parse("<x> + 1")
        assert "(<x> + 1)" in caplog.text


class TestEvaluate:
    """Calculator.evaluate() over different bindings."""

    def test_single_variable(self) -> None:
        assert parse("<x>").evaluate({"x": 5}) == 5.0

    def test_reference_formula(
        self, health_calculator: Calculator, health_bindings: dict[str, float]
    ) -> None:
        assert health_calculator.evaluate(health_bindings) == pytest.approx(47.4)

    def test_reuse_with_new_bindings(self, health_calculator: Calculator) -> None:
        assert health_calculator.evaluate({"age": 40, "health": 90}) == 54.0
        assert health_calculator.evaluate({"age": 100, "health": 90}) == 0.0

    def test_eval_alias(
        self, health_calculator: Calculator, health_bindings: dict[str, float]
    ) -> None:
        assert health_calculator.eval(health_bindings) == health_calculator.evaluate(
            health_bindings
        )

    def test_deterministic(
        self, health_calculator: Calculator, health_bindings: dict[str, float]
    ) -> None:
        first = health_calculator.evaluate(health_bindings)
        second = health_calculator.evaluate(health_bindings)
        assert first == second

    def test_division_by_zero(self) -> None:
        assert parse("1/0").evaluate({}) == 0.0

    def test_double_negation(self) -> None:
        assert parse("--3").evaluate({}) == 3.0

    def test_left_associativity(self) -> None:
        assert parse("a-b-c").evaluate({"a": 9, "b": 3, "c": 1}) == 5.0

    def test_missing_variable(self) -> None:
        with pytest.raises(MissingVariableError) as exc_info:
            parse("<missing>").evaluate({})
        assert exc_info.value.name == "missing"
        assert "missing" in str(exc_info.value)

    def test_concurrent_evaluation(self, health_calculator: Calculator) -> None:
        bindings = [{"age": age, "health": 50} for age in range(100)]
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(health_calculator.evaluate, bindings))
        assert results == [health_calculator.evaluate(b) for b in bindings]


class TestEvaluateJson:
    """Calculator.evaluate_json() decodes bindings from JSON."""

    def test_matches_mapping(
        self, health_calculator: Calculator, health_bindings: dict[str, float]
    ) -> None:
        result = health_calculator.evaluate_json('{"age": 21, "health": 60}')
        assert result == health_calculator.evaluate(health_bindings)

    def test_float_values(self) -> None:
        assert parse("<a> * 2").evaluate_json('{"a": 1.25}') == 2.5

    def test_invalid_json(self, health_calculator: Calculator) -> None:
        with pytest.raises(EvalError, match="Invalid JSON"):
            health_calculator.evaluate_json("{age: 21")

    def test_not_an_object(self, health_calculator: Calculator) -> None:
        with pytest.raises(EvalError, match="must be an object"):
            health_calculator.evaluate_json("[21, 60]")

    @pytest.mark.parametrize("value", ['"21"', "true", "null", "[1]"])
    def test_non_numeric_value(self, value: str) -> None:
        with pytest.raises(EvalError, match="must be a number"):
            parse("<a>").evaluate_json(f'{{"a": {value}}}')

    def test_missing_key(self) -> None:
        with pytest.raises(MissingVariableError):
            parse("<a> + <b>").evaluate_json('{"a": 1}')

    def test_huge_integer_saturates(self) -> None:
        calc = parse("<a>")
        assert calc.evaluate_json('{"a": ' + "9" * 400 + "}") == float("inf")
        assert calc.evaluate_json('{"a": -' + "9" * 400 + "}") == float("-inf")

    def test_huge_integer_matches_huge_float(self) -> None:
        calc = parse("<a>")
        assert calc.evaluate_json('{"a": ' + "9" * 400 + "}") == calc.evaluate_json(
            '{"a": 1e999}'
        )


class TestLongFormulas:
    """Long formulas produce a result or a structured error."""

    def test_long_sum(self) -> None:
        calc = parse("+".join(["<x>"] * 2000))
        assert calc.evaluate({"x": 1}) == 2000.0

    def test_long_sum_renders(self) -> None:
        calc = parse("+".join(["1"] * 2000))
        assert str(calc).endswith(" + 1)")

    def test_deep_nesting(self) -> None:
        with pytest.raises(ParseError, match="nested too deeply"):
            parse("(" * 1000 + "1" + ")" * 1000)


class TestVersion:
    def test_version_string(self) -> None:
        assert isinstance(calcarg.__version__, str)
        assert calcarg.__version__
