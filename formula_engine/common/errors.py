"""Error types raised while parsing and evaluating formulas."""
from typing import Optional


class FormulaError(ValueError):
    """Base class for every formula failure."""


class FormulaSyntaxError(FormulaError):
    """
    Raised when a formula cannot be parsed.

    The rendered message is the failure text followed by the parse context:
    the input consumed so far and the character under the cursor.

    Attributes:
        message: Failure text, e.g. ``"Expected operator."``
        position: Cursor position when the failure was detected
        parsed: Input consumed before the failure
        found: Character under the cursor (empty at end of input)
    """

    def __init__(self, message: str, position: int = 0, parsed: str = "", found: str = "") -> None:
        self.message = message
        self.position = position
        self.parsed = parsed
        self.found = found
        super().__init__(f'{message} Parsed "{parsed}". Got "{found}"')


class UndefinedVariableError(FormulaSyntaxError):
    """Raised when a formula references a variable that was never assigned."""

    def __init__(self, name: str, position: int = 0, parsed: str = "", found: str = "") -> None:
        self.name = name
        super().__init__(f"Variable {name} is not defined.", position, parsed, found)


class FormulaEvaluationError(FormulaError):
    """Raised when a parsed formula fails to compute (e.g. division by zero)."""

    def __init__(self, symbol: str, reason: Optional[str] = None) -> None:
        self.symbol = symbol
        self.reason = reason
        msg = f"Could not evaluate {symbol!r}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)
