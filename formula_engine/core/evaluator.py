"""Compute the value of an expression tree."""
from typing import List, Optional, Tuple, Union

from formula_engine.common.errors import FormulaEvaluationError
from formula_engine.core.atoms import FunctionAtom, ListAtom, Node, NumberAtom, OperatorAtom, VariableAtom, children
from formula_engine.core.descriptors import Scalar


def evaluate(node: Node) -> Optional[Scalar]:
    """
    Evaluate a tree node by evaluating its children and applying its rule.

    Children are evaluated left to right on an explicit stack, so the depth of
    a tree is not limited by the interpreter's recursion limit. Variables are
    re-evaluated on every access, and every read of a list advances its cursor
    by one.

    :param Node node: Node to evaluate

    :return: Computed scalar
    :rtype: Optional[Scalar]
    :raises FormulaEvaluationError: If an operator or function cannot compute its value
    """
    values: List[Optional[Scalar]] = []
    # A node is visited twice: once to schedule its children, once to apply its rule
    pending: List[Tuple[Node, bool]] = [(node, False)]

    while pending:
        current, ready = pending.pop()
        if isinstance(current, NumberAtom):
            values.append(current.value)
        elif isinstance(current, ListAtom):
            values.append(current.values.next())
        elif isinstance(current, VariableAtom):
            pending.append((current.variable.root, False))
        elif isinstance(current, (OperatorAtom, FunctionAtom)):
            if ready:
                count = len(children(current))
                params = values[len(values) - count:]
                del values[len(values) - count:]
                values.append(_apply(current, params))
            else:
                pending.append((current, True))
                pending.extend((child, False) for child in reversed(children(current)))
        else:
            raise TypeError(f"Cannot evaluate {current!r}")

    return values[0]


def _apply(node: Union[OperatorAtom, FunctionAtom], params: List[Optional[Scalar]]) -> Optional[Scalar]:
    try:
        return node.descriptor.apply(*params)
    except (ArithmeticError, ValueError, TypeError) as exc:
        raise FormulaEvaluationError(node.descriptor.symbol, str(exc)) from exc


def broadcast(root: Node, width: int) -> List[Optional[Scalar]]:
    """
    Evaluate the root once per broadcast step.

    Each evaluation advances every list in the tree by one element, producing
    an element-wise result; a width of 0 is treated as 1.

    :param Node root: Root of the expression tree
    :param int width: Length of the longest list seen while parsing

    :return: One result per evaluation
    :rtype: List[Optional[Scalar]]
    """
    return [evaluate(root) for _ in range(max(width, 1))]
