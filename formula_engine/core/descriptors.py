"""Catalog of the operators and functions a formula may use."""
from enum import Enum
import math
import operator
from typing import Callable, Dict, Union

from pydantic import BaseModel, ConfigDict, Field

# A computed value: numbers, or booleans produced by comparisons
Scalar = Union[bool, float]

# Functions bind tighter than any operator
FUNCTION_PRECEDENCE: int = 12


class Associativity(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class OperatorDescriptor(BaseModel):
    """
    Immutable description of a binary infix operator.

    The rule receives the already evaluated left and right operand values.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Registry name, e.g. PLUS")
    symbol: str = Field(..., min_length=1, description="Text matched in formulas")
    precedence: int = Field(..., description="Higher values bind tighter")
    associativity: Associativity = Field(default=Associativity.LEFT)
    rule: Callable[[Scalar, Scalar], Scalar] = Field(..., description="Computes the operator's value")

    @property
    def left_associative(self) -> bool:
        return self.associativity is Associativity.LEFT

    def apply(self, lhs: Scalar, rhs: Scalar) -> Scalar:
        return self.rule(lhs, rhs)


class FunctionDescriptor(BaseModel):
    """
    Immutable description of a built-in function.

    Zero-arity functions are written without parentheses (``PI``); the others
    take exactly ``arity`` comma separated arguments.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Registry name, e.g. SQRT")
    symbol: str = Field(..., min_length=1, description="Text matched in formulas")
    arity: int = Field(..., ge=0, description="Number of parameters")
    rule: Callable[..., Scalar] = Field(..., description="Computes the function's value")
    precedence: int = Field(default=FUNCTION_PRECEDENCE)
    associativity: Associativity = Field(default=Associativity.LEFT)

    @property
    def left_associative(self) -> bool:
        return self.associativity is Associativity.LEFT

    def apply(self, *params: Scalar) -> Scalar:
        return self.rule(*params)


def _log(value: Scalar, base: Scalar) -> float:
    # A falsy base (0) means natural logarithm
    return math.log(value) / (math.log(base) if base else 1)


OPERATORS: Dict[str, OperatorDescriptor] = {
    d.name: d
    for d in (
        OperatorDescriptor(name="POWER", symbol="^", precedence=11, associativity=Associativity.RIGHT, rule=math.pow),
        OperatorDescriptor(name="MULTIPLY", symbol="*", precedence=10, rule=operator.mul),
        OperatorDescriptor(name="DIVIDE", symbol="/", precedence=10, rule=operator.truediv),
        # Truncated remainder: the sign follows the dividend
        OperatorDescriptor(name="MODULO", symbol="%", precedence=10, rule=math.fmod),
        OperatorDescriptor(name="PLUS", symbol="+", precedence=9, rule=operator.add),
        OperatorDescriptor(name="MINUS", symbol="-", precedence=9, rule=operator.sub),
        OperatorDescriptor(name="GREATER_THAN", symbol=">", precedence=8, rule=operator.gt),
        OperatorDescriptor(name="LESS_THAN", symbol="<", precedence=8, rule=operator.lt),
        OperatorDescriptor(name="GREATER_THAN_OR_EQUALS", symbol=">=", precedence=8, rule=operator.ge),
        OperatorDescriptor(name="LESS_THAN_OR_EQUALS", symbol="<=", precedence=8, rule=operator.le),
        OperatorDescriptor(name="EQUALS", symbol="==", precedence=7, rule=operator.eq),
        OperatorDescriptor(name="NOT_EQUALS", symbol="!=", precedence=7, rule=operator.ne),
        OperatorDescriptor(name="IS", symbol="IS", precedence=7, rule=operator.eq),
        # Both operands are always evaluated before combining them
        OperatorDescriptor(name="AND", symbol="AND", precedence=6, rule=lambda a, b: a and b),
        OperatorDescriptor(name="OR", symbol="OR", precedence=5, rule=lambda a, b: a or b),
    )
}

FUNCTIONS: Dict[str, FunctionDescriptor] = {
    d.name: d
    for d in (
        FunctionDescriptor(name="PI", symbol="PI", arity=0, rule=lambda: math.pi),
        FunctionDescriptor(name="E", symbol="E", arity=0, rule=lambda: math.e),
        FunctionDescriptor(name="SQRT", symbol="sqrt", arity=1, rule=math.sqrt),
        FunctionDescriptor(name="LOG", symbol="log", arity=2, rule=_log),
        FunctionDescriptor(name="LN", symbol="ln", arity=1, rule=math.log),
        FunctionDescriptor(name="SIN", symbol="sin", arity=1, rule=math.sin),
        FunctionDescriptor(name="COS", symbol="cos", arity=1, rule=math.cos),
    )
}
