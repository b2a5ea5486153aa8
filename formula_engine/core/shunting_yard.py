"""Infix to postfix conversion using the Shunting-yard algorithm."""
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Union

from formula_engine.core.atoms import (
    Atom,
    CommaAtom,
    FunctionAtom,
    LeftParenAtom,
    ListAtom,
    Node,
    NumberAtom,
    OperatorAtom,
    RightParenAtom,
    VariableAtom,
)


@dataclass
class ParseContext:
    """Output queue, operator stack and tree root of one (sub-)expression."""

    output: List[Atom] = field(default_factory=list)
    operators: List[Atom] = field(default_factory=list)
    root: Optional[Node] = None


def fires_first(top: Union[OperatorAtom, FunctionAtom], incoming: OperatorAtom) -> bool:
    """
    Decide whether the operator on top of the stack must be output before ``incoming`` is pushed.

    A left-associative incoming operator yields to anything of equal or higher
    precedence, a right-associative one only to strictly higher precedence.

    :param top: Operator or function on top of the operator stack
    :param OperatorAtom incoming: Operator being pushed

    :return: True if ``top`` must be popped to the output first
    :rtype: bool
    """
    if incoming.descriptor.left_associative:
        return incoming.descriptor.precedence <= top.descriptor.precedence
    return incoming.descriptor.precedence < top.descriptor.precedence


class ShuntingYard:
    """
    Shunting-yard converter with an explicit stack of parse contexts.

    Nested sub-expressions that must be built and evaluated on their own (list
    elements) run inside :meth:`nested`, which saves the enclosing context and
    restores it on exit.

    Examples:
        - Infix: 3 + 4 * 2
        - Postfix: 3 4 2 * +
    """

    def __init__(self) -> None:
        self.context = ParseContext()
        self.depth = 0
        self._saved: List[ParseContext] = []

    def push(self, atom: Atom) -> None:
        """
        Route one atom to the output queue or the operator stack.

        :param Atom atom: Atom produced by the scanner
        """
        output = self.context.output
        operators = self.context.operators

        if isinstance(atom, (NumberAtom, VariableAtom, ListAtom)):
            # Operands go straight to the output
            output.append(atom)
        elif isinstance(atom, FunctionAtom):
            operators.append(atom)
        elif isinstance(atom, CommaAtom):
            # End of one argument: flush it up to the enclosing parenthesis
            while operators and not isinstance(operators[-1], LeftParenAtom):
                output.append(operators.pop())
        elif isinstance(atom, OperatorAtom):
            while (
                operators
                and isinstance(operators[-1], (OperatorAtom, FunctionAtom))
                and fires_first(operators[-1], atom)
            ):
                output.append(operators.pop())
            operators.append(atom)
        elif isinstance(atom, LeftParenAtom):
            operators.append(atom)
            self.depth += 1
        elif isinstance(atom, RightParenAtom):
            while operators and not isinstance(operators[-1], LeftParenAtom):
                output.append(operators.pop())
            # Discard the matching left parenthesis
            if operators:
                operators.pop()
            self.depth -= 1
        else:
            raise TypeError(f"Unsupported atom: {atom!r}")

    def drain(self) -> List[Atom]:
        """
        Move every remaining operator to the output queue.

        :return: Output queue of the active context in postfix order
        :rtype: List[Atom]
        """
        while self.context.operators:
            self.context.output.append(self.context.operators.pop())
        return self.context.output

    @property
    def in_parentheses(self) -> bool:
        return self.depth > 0

    @contextmanager
    def nested(self) -> Iterator[ParseContext]:
        """Run a sub-expression in a fresh context, restoring the enclosing one afterwards."""
        self._saved.append(self.context)
        self.context = ParseContext()
        try:
            yield self.context
        finally:
            self.context = self._saved.pop()
