"""Test classes FormulaRequest and FormulaResult."""
from pydantic import ValidationError
import pytest

from formula_engine.common.models import FormulaRequest, FormulaResult


def test_formula_request_valid() -> None:
    """Test that a valid FormulaRequest can be created."""
    req = FormulaRequest(formula="x = 2 + 2 * 3", line_number=3)
    assert req.formula == "x = 2 + 2 * 3"
    assert req.line_number == 3


@pytest.mark.parametrize("formula", ["", "   "])
def test_formula_request_rejects_empty(formula) -> None:
    """Test that blank formulas raise a validation error."""
    with pytest.raises(ValidationError):
        FormulaRequest(formula=formula)


def test_formula_request_invalid_type() -> None:
    """Test that non-string formulas raise a validation error."""
    with pytest.raises(ValidationError):
        FormulaRequest(formula=123)


def test_formula_request_invalid_line_number() -> None:
    """Test that line numbers start at 1."""
    with pytest.raises(ValidationError):
        FormulaRequest(formula="1", line_number=0)


def test_formula_result_with_results() -> None:
    """Test that results keep floats and booleans apart."""
    res = FormulaResult(formula="[1, 2] > 1", results=[False, True])
    assert res.ok
    assert res.results == [False, True]
    assert res.render() == "[1, 2] > 1 = [False, True]"


def test_formula_result_with_error() -> None:
    """Test that a failed formula renders its error."""
    res = FormulaResult(formula="y + 1", line_number=2, error="Variable y is not defined.")
    assert not res.ok
    assert res.render() == "y + 1 -> ERROR: Variable y is not defined."


@pytest.mark.parametrize(
    "kwargs",
    [
        {},
        {"results": [1.0], "error": "boom"},
    ],
)
def test_formula_result_needs_results_or_error(kwargs) -> None:
    """Test that exactly one of results and error is required."""
    with pytest.raises(ValidationError):
        FormulaResult(formula="1", **kwargs)


def test_formula_result_invalid_result_type() -> None:
    """Test that non-numeric results raise a validation error."""
    with pytest.raises(ValidationError):
        FormulaResult(formula="1", results=["not a number"])
