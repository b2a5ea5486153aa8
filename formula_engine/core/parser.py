"""Parse and evaluate formulas: assignments, arithmetic, functions and lists."""
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Tuple

from formula_engine.common.config import EngineConfig
from formula_engine.common.errors import FormulaSyntaxError, UndefinedVariableError
from formula_engine.common.logger import logger
from formula_engine.core.atoms import (
    CommaAtom,
    FunctionAtom,
    LeftParenAtom,
    ListAtom,
    ListValue,
    Node,
    NumberAtom,
    OperatorAtom,
    RightParenAtom,
    Variable,
    VariableAtom,
)
from formula_engine.core.descriptors import FUNCTIONS, OPERATORS, Scalar
from formula_engine.core.evaluator import broadcast, evaluate
from formula_engine.core.printer import format_tree
from formula_engine.core.scanner import Scanner
from formula_engine.core.shunting_yard import ShuntingYard
from formula_engine.core.tree_builder import build_tree
from formula_engine.core.trie import SymbolTrie
from formula_engine.core.variables import VariableStore, rewind_lists


@dataclass
class ParseState:
    """Everything that changes while one formula is being parsed."""

    scanner: Scanner
    yard: ShuntingYard = field(default_factory=ShuntingYard)
    # Length of the longest list seen so far
    width: int = 0
    param_depth: int = 0
    list_depth: int = 0

    def widen(self, size: int) -> None:
        self.width = max(self.width, size)

    @property
    def accepts_comma(self) -> bool:
        return self.param_depth > 0 or self.list_depth > 0


class ExpressionParser:
    """
    Formula engine: parses formulas into expression trees and evaluates them.

    Grammar:
        assignment := identifier '=' expression
        expression := primary (operator primary)*
        primary    := '(' expression ')'
                    | ['-'] digit+ ['.' digit+]
                    | function-name ['(' expression (',' expression)* ')']
                    | identifier
                    | '[' expression (',' expression)* ']'

    Algorithm:
        1. Scan atoms with a recursive-descent driver, matching operator and
           function symbols through prefix tries
        2. Convert them to postfix order using Shunting-yard
        3. Link the postfix queue into a tree
        4. Evaluate the tree once per element of the longest list (broadcast)

    Variables persist across calls to :meth:`parse` and are re-evaluated every
    time they are read.

    Examples:
        >>> engine = ExpressionParser()
        >>> engine.parse("a = [1, 2, 3]")
        >>> engine.parse("a * 2 + 1")
        >>> engine.value()
        [3.0, 5.0, 7.0]
    """

    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        self.config = config or EngineConfig()

        self._operators = SymbolTrie.from_descriptors(OPERATORS.values(), policy=self.config.match_policy)
        self._functions = SymbolTrie.from_descriptors(FUNCTIONS.values(), policy=self.config.match_policy)
        self._variables = VariableStore()
        self._trees: List[Node] = []
        self._expression: Optional[str] = None
        self._root: Optional[Node] = None
        self._width: int = 0

    # Public API

    def parse(self, text: str) -> None:
        """
        Parse a formula, either ``name = expression`` or a plain expression.

        On success the tree becomes the current root and is appended to the
        tree history; an assignment also binds the variable. A failed parse
        leaves the engine exactly as it was.

        :param str text: Formula to parse

        :raises FormulaSyntaxError: If the formula is malformed or references an undefined variable
        """
        logger.debug(f"Parsing formula: {text!r}")
        state = ParseState(scanner=Scanner(text))

        try:
            name = self._parse_assignment_target(state)
            self._parse_expression(state)
            if state.scanner.more():
                raise state.scanner.error("Expected operator.")
            root = self._build(state)
        except RecursionError:
            raise state.scanner.error("Expression is nested too deeply.") from None

        if name is not None:
            try:
                self._variables.bind(name, root)
            except FormulaSyntaxError as exc:
                raise state.scanner.error(exc.message) from exc
            logger.debug(f"Assigned variable {name}")

        self._expression = text
        self._root = root
        self._width = state.width
        self._trees.append(root)

    def value(self) -> Optional[List[Optional[Scalar]]]:
        """
        Evaluate the most recently parsed formula.

        The root is evaluated once per element of the longest list it uses, so
        list operands produce one result per element; shorter lists cycle.

        :return: Results in order, or None if nothing has been parsed yet
        :rtype: Optional[List[Optional[Scalar]]]
        :raises FormulaEvaluationError: If an operator or function cannot compute its value
        """
        if self._root is None:
            return None
        results = broadcast(self._root, self._width)
        logger.debug(f"Evaluated {self._expression!r}: {results}")
        return results

    def get_variables(self) -> Mapping[str, Variable]:
        """Return a read-only view of the variables bound so far."""
        return self._variables.as_mapping()

    def get_expression_trees(self) -> Tuple[Node, ...]:
        """Return the root of every formula parsed by this engine, in call order."""
        return tuple(self._trees)

    def print_tree(self) -> str:
        """Render the current tree as an indented outline."""
        return format_tree(self._root)

    @property
    def expression(self) -> Optional[str]:
        return self._expression

    @property
    def expression_tree_root(self) -> Optional[Node]:
        return self._root

    # Recursive descent

    def _parse_assignment_target(self, state: ParseState) -> Optional[str]:
        """
        Consume ``identifier =`` if the formula starts with one.

        The scan is speculative: on any mismatch the scanner is rewound and
        None is returned so the formula is parsed as an expression.
        """
        scanner = state.scanner
        scanner.skip_whitespace()
        while scanner.is_identifier_char():
            scanner.accumulate()
        name = scanner.take_token()
        if name:
            scanner.skip_whitespace()
            # "a == b" is a comparison, not an assignment
            if scanner.is_equals() and scanner.peek() != "=":
                scanner.skip()
                return name
        scanner.rewind()
        return None

    def _parse_expression(self, state: ParseState) -> None:
        """
        Parse ``primary (operator primary)*`` and stop at the end of the expression.

        Operands and operators are pushed in reading order and the shunting yard
        sorts out precedence, so only nesting (parentheses, function arguments,
        list elements) recurses.
        """
        scanner = state.scanner
        while True:
            self._parse_primary(state)
            scanner.skip_whitespace()
            if not scanner.more() or (
                (scanner.is_close_paren() and state.yard.in_parentheses)
                or (scanner.is_comma() and state.accepts_comma)
                or (scanner.is_close_bracket() and state.list_depth > 0)
            ):
                return
            if not self._parse_operator(state):
                raise scanner.error("Expected operator.")

    def _parse_primary(self, state: ParseState) -> None:
        scanner = state.scanner
        scanner.skip_whitespace()

        if scanner.is_open_paren():
            self._open_paren(state)
            self._parse_expression(state)
            if not scanner.is_close_paren():
                raise scanner.error("Expected closing parenthesis.")
            self._close_paren(state)
        elif scanner.is_digit() or scanner.is_minus():
            self._parse_number(state)
        elif self._parse_function(state):
            pass
        elif self._parse_variable(state):
            pass
        elif self._parse_list(state):
            pass
        else:
            raise scanner.error("Expected token or opening parenthesis.")

    def _parse_operator(self, state: ParseState) -> bool:
        scanner = state.scanner
        match = self._operators.match(scanner.text, scanner.position)
        if not match:
            return False
        scanner.accumulate(match.length)
        state.yard.push(OperatorAtom(scanner.take_token(), match.descriptor))
        return True

    def _parse_number(self, state: ParseState) -> None:
        scanner = state.scanner
        if scanner.is_minus():
            scanner.accumulate()
        if not scanner.is_digit():
            raise scanner.error("Expected one or more integers.")
        while scanner.is_digit():
            scanner.accumulate()
        if scanner.is_dot():
            scanner.accumulate()
            if not scanner.is_digit():
                raise scanner.error("Expected one or more integers after decimal point.")
            while scanner.is_digit():
                scanner.accumulate()
        token = scanner.take_token()
        state.yard.push(NumberAtom(token, float(token)))

    def _parse_function(self, state: ParseState) -> bool:
        scanner = state.scanner
        match = self._functions.match(scanner.text, scanner.position)
        if not match:
            return False
        descriptor = match.descriptor
        scanner.accumulate(match.length)
        state.yard.push(FunctionAtom(scanner.take_token(), descriptor))
        if descriptor.arity == 0:
            return True

        scanner.skip_whitespace()
        if not scanner.is_open_paren():
            raise scanner.error("Expected opening parenthesis.")
        self._open_paren(state)

        state.param_depth += 1
        for i in range(descriptor.arity):
            self._parse_expression(state)
            if i < descriptor.arity - 1:
                if not scanner.is_comma():
                    raise scanner.error("Expected comma.")
                scanner.accumulate()
                state.yard.push(CommaAtom(scanner.take_token()))
        state.param_depth -= 1

        if not scanner.is_close_paren():
            raise scanner.error("Expected closing parenthesis.")
        self._close_paren(state)
        return True

    def _parse_variable(self, state: ParseState) -> bool:
        scanner = state.scanner
        while scanner.is_identifier_char():
            scanner.accumulate()
        name = scanner.take_token()
        if not name:
            return False
        try:
            variable = self._variables.lookup(name)
        except UndefinedVariableError:
            raise UndefinedVariableError(
                name, scanner.position, scanner.text[:scanner.position], scanner.current()
            ) from None
        # Every use of a list variable starts broadcasting from its first element
        state.widen(rewind_lists(variable.root))
        state.yard.push(VariableAtom(name, variable))
        return True

    def _parse_list(self, state: ParseState) -> bool:
        scanner = state.scanner
        if not scanner.is_open_bracket():
            return False
        start = scanner.position
        scanner.skip()

        state.list_depth += 1
        items: List[Optional[Scalar]] = []
        while True:
            items.append(self._evaluate_element(state))
            if not scanner.is_comma():
                break
            scanner.skip()
        state.list_depth -= 1

        if not scanner.is_close_bracket():
            raise scanner.error("Expected closing square bracket.")
        scanner.skip()

        values = ListValue(items)
        state.widen(len(values))
        state.yard.push(ListAtom(scanner.text[start:scanner.position], values))
        return True

    def _evaluate_element(self, state: ParseState) -> Optional[Scalar]:
        """Parse one list element in its own context and evaluate it right away; its tree is discarded."""
        with state.yard.nested() as context:
            self._parse_expression(state)
            context.root = self._build(state)
            return evaluate(context.root)

    # Helpers

    def _open_paren(self, state: ParseState) -> None:
        state.scanner.accumulate()
        state.yard.push(LeftParenAtom(state.scanner.take_token()))

    def _close_paren(self, state: ParseState) -> None:
        state.scanner.accumulate()
        state.yard.push(RightParenAtom(state.scanner.take_token()))

    def _build(self, state: ParseState) -> Node:
        try:
            return build_tree(state.yard.drain())
        except FormulaSyntaxError as exc:
            raise state.scanner.error(exc.message) from exc
