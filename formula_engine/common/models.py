"""Pydantic models for formula requests and their results."""
from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

# bool before float so that comparison results are kept as booleans
ResultValue = Optional[Union[bool, float]]


class FormulaRequest(BaseModel):
    """A single formula line submitted for evaluation."""

    formula: str = Field(..., description="Formula text, an assignment or an expression")
    line_number: int = Field(default=1, ge=1, description="Line number in the input sheet")

    @field_validator("formula")
    def formula_must_not_be_empty(cls, v: str) -> str:
        """Ensure that the formula is not empty."""
        if not v.strip():
            raise ValueError("Formula cannot be empty")
        return v


class FormulaResult(BaseModel):
    """Outcome of one formula: its broadcast results or the error that stopped it."""

    formula: str = Field(..., description="Original formula text")
    line_number: int = Field(default=1, ge=1, description="Line number in the input sheet")
    results: Optional[List[ResultValue]] = Field(default=None, description="One value per broadcast step")
    error: Optional[str] = Field(default=None, description="Error message if the formula failed")

    @model_validator(mode="after")
    def results_or_error(self) -> "FormulaResult":
        """Ensure that exactly one of results and error is set."""
        if (self.results is None) == (self.error is None):
            raise ValueError("Exactly one of results and error must be set")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None

    def render(self) -> str:
        """
        Format the result as a line of the results file.

        :return: ``formula = [values]`` or ``formula -> ERROR: message``
        :rtype: str
        """
        if self.ok:
            return f"{self.formula} = {self.results}"
        return f"{self.formula} -> ERROR: {self.error}"
