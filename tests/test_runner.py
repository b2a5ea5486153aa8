"""Test class SheetRunner."""
import pytest

from formula_engine.common.config import EngineConfig
from formula_engine.core.parser import ExpressionParser
from formula_engine.core.trie import MatchPolicy
from formula_engine.common.models import FormulaRequest
from formula_engine.sheet.runner import SheetRunner


@pytest.mark.parametrize(
    "formula,expected",
    [
        ("2 + 3", [5.0]),
        ("10 - 4", [6.0]),
        ("[1, 2] * 4", [4.0, 8.0]),
        ("2 > 1", [True]),
    ],
)
def test_evaluate_valid_formula(formula, expected) -> None:
    """The runner returns the broadcast results of a valid formula."""
    result = SheetRunner().evaluate(ExpressionParser(), FormulaRequest(formula=formula, line_number=1))
    assert result.line_number == 1
    assert result.formula == formula
    assert result.results == expected
    assert result.error is None


@pytest.mark.parametrize(
    "formula",
    [
        "2 +",  # Trailing operator
        "+ 3 4",  # Leading operator
        "3 4 + 5",  # Extra operand remaining
        "y * 2",  # Undefined variable
        "1 / 0",  # Evaluation failure
    ],
)
def test_evaluate_invalid_formula(formula) -> None:
    """The runner records an error message for formulas that fail."""
    result = SheetRunner().evaluate(ExpressionParser(), FormulaRequest(formula=formula, line_number=2))
    assert result.line_number == 2
    assert result.results is None
    assert isinstance(result.error, str)


def test_run_shares_variables_across_lines() -> None:
    """Assignments on one line are visible to the following lines."""
    results = SheetRunner().run(["rate = 0.5", "base = [10, 20]", "base * rate", "missing + 1", "base + 1"])
    assert [r.line_number for r in results] == [1, 2, 3, 4, 5]
    assert results[2].results == [5.0, 10.0]
    assert not results[3].ok
    assert results[4].results == [11.0, 21.0]


def test_run_uses_config() -> None:
    """The engine of a run is built from the runner's configuration."""
    runner = SheetRunner(config=EngineConfig(match_policy=MatchPolicy.FIRST))
    results = runner.run(["2 >= 1"])
    assert not results[0].ok


def test_write(tmp_path) -> None:
    """Results are written one line per formula."""
    runner = SheetRunner()
    output_file = tmp_path / "results.txt"
    runner.write(runner.run(["1 + 1", "y"]), output_file)

    assert output_file.read_text().splitlines() == [
        "1 + 1 = [2.0]",
        'y -> ERROR: Variable y is not defined. Parsed "y". Got ""',
    ]


def test_run_continues_after_unexpected_error(monkeypatch) -> None:
    """A line failing with any exception is reported and the following lines still run."""
    parse = ExpressionParser.parse

    def parse_or_crash(self, text: str) -> None:
        if text == "crash":
            raise RuntimeError("engine crashed")
        parse(self, text)

    monkeypatch.setattr(ExpressionParser, "parse", parse_or_crash)
    results = SheetRunner().run(["x = 1", "crash", "x + 1"])

    assert results[0].results == [1.0]
    assert results[1].error == "engine crashed"
    assert results[2].results == [2.0]


def test_run_survives_long_formula() -> None:
    """A very long formula does not stop the rest of the sheet."""
    results = SheetRunner().run(["x = 1", "+".join(["1"] * 600), "x + 1"])
    assert [r.ok for r in results] == [True, True, True]
    assert results[1].results == [600.0]
    assert results[2].results == [2.0]
