"""Evaluate every formula of a sheet on one engine."""
from pathlib import Path
from typing import Iterable, List

from pydantic import BaseModel, ConfigDict, Field

from formula_engine.common.config import EngineConfig
from formula_engine.common.logger import logger
from formula_engine.common.models import FormulaRequest, FormulaResult
from formula_engine.core.parser import ExpressionParser


class SheetRunner(BaseModel):
    """
    Evaluate the formulas of a sheet in order.

    Lifecycle:
        - One ExpressionParser is shared by all lines of a run, so variables
          assigned on one line are visible to the following lines
        - A failing line records its error and the run continues
        - Lines are evaluated one after the other, never concurrently
    """

    model_config = ConfigDict(frozen=True)

    config: EngineConfig = Field(default_factory=EngineConfig, description="Settings of the engine used for a run")

    def run(self, formulas: Iterable[str]) -> List[FormulaResult]:
        """
        Evaluate formulas on a fresh engine.

        :param Iterable[str] formulas: Formula lines, in sheet order

        :return: One result per formula
        :rtype: List[FormulaResult]
        """
        engine = ExpressionParser(self.config)
        return [
            self.evaluate(engine, FormulaRequest(formula=formula, line_number=line_number))
            for line_number, formula in enumerate(formulas, start=1)
        ]

    def evaluate(self, engine: ExpressionParser, request: FormulaRequest) -> FormulaResult:
        """
        Parse and evaluate a single formula, capturing any error as the result of its line.

        :param ExpressionParser engine: Engine holding the sheet's variables
        :param FormulaRequest request: Formula to evaluate

        :return: Results or error of the formula
        :rtype: FormulaResult
        """
        logger.info(f"🧮🏁 Evaluating line {request.line_number}: {request.formula}")
        try:
            engine.parse(request.formula)
            results = engine.value()
        except Exception as exc:
            logger.error(
                f"🧮❌ Line {request.line_number} failed: {exc}\n"
                f"Invalid formula, could not evaluate: {request.formula!r}"
            )
            return FormulaResult(formula=request.formula, line_number=request.line_number, error=str(exc))

        logger.info(f"🧮✅ Line {request.line_number} evaluated: {results}")
        return FormulaResult(formula=request.formula, line_number=request.line_number, results=results)

    def write(self, results: Iterable[FormulaResult], output_file: Path) -> None:
        """
        Write results to a file, one line per formula.

        :param Iterable[FormulaResult] results: Results to write
        :param Path output_file: Destination file, overwritten if it exists
        """
        with Path(output_file).open("w", encoding="utf-8") as f_out:
            for result in results:
                f_out.write(result.render() + "\n")
        logger.info(f"✉️ Results written to {output_file}")
