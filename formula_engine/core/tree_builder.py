"""Link a postfix queue of atoms into an expression tree."""
from typing import List, Sequence

from formula_engine.common.errors import FormulaSyntaxError
from formula_engine.core.atoms import Atom, FunctionAtom, Node, OperatorAtom


def build_tree(postfix: Sequence[Atom]) -> Node:
    """
    Attach operands to their operators and functions and return the root.

    Operators pop their right operand first, then their left one. Functions pop
    ``arity`` nodes and keep them in their original left-to-right order.

    :param Sequence[Atom] postfix: Atoms in postfix order

    :return: Root of the expression tree
    :rtype: Node
    :raises FormulaSyntaxError: If the queue does not reduce to exactly one node
    """
    nodes: List[Node] = []

    for atom in postfix:
        if isinstance(atom, OperatorAtom):
            if len(nodes) < 2:
                raise FormulaSyntaxError("Expected expression.")
            atom.rhs = nodes.pop()
            atom.lhs = nodes.pop()
        elif isinstance(atom, FunctionAtom):
            arity = atom.descriptor.arity
            if len(nodes) < arity:
                raise FormulaSyntaxError("Expected expression.")
            atom.params = []
            for _ in range(arity):
                atom.params.insert(0, nodes.pop())
        nodes.append(atom)

    if len(nodes) != 1:
        raise FormulaSyntaxError("Expected expression.")
    return nodes[0]
