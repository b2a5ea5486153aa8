"""Name to expression-tree bindings that persist across parse calls."""
from types import MappingProxyType
from typing import Dict, Mapping

from formula_engine.common.errors import FormulaSyntaxError, UndefinedVariableError
from formula_engine.core.atoms import ListAtom, Node, Variable, VariableAtom, walk


def rewind_lists(root: Node) -> int:
    """
    Reset the cursor of every list reachable from ``root``, including through variables.

    :param Node root: Root of an expression tree

    :return: Size of the longest list found, 0 if there is none
    :rtype: int
    """
    width = 0
    for node in walk(root, follow_variables=True):
        if isinstance(node, ListAtom):
            node.values.reset()
            width = max(width, len(node.values))
    return width


class VariableStore:
    """Variables of one engine instance; a binding lives until it is reassigned."""

    def __init__(self) -> None:
        self._variables: Dict[str, Variable] = {}

    def bind(self, name: str, root: Node) -> Variable:
        """
        Bind ``name`` to an expression tree, replacing any previous binding.

        Rebinding updates the existing Variable in place, so trees that already
        reference it read the new definition. Inside the new tree itself, direct
        references to ``name`` (``x = x + 1``) read the previous definition.

        :param str name: Variable name
        :param Node root: Root of the tree evaluated whenever the variable is read

        :return: The binding
        :rtype: Variable
        :raises FormulaSyntaxError: If the new tree reaches ``name`` through another variable
        """
        existing = self._variables.get(name)
        if existing is None:
            variable = Variable(name=name, root=root)
            self._variables[name] = variable
            return variable

        previous = Variable(name=name, root=existing.root)
        direct = [
            node for node in walk(root)
            if isinstance(node, VariableAtom) and node.variable is existing
        ]
        for node in direct:
            node.variable = previous
        if any(
            isinstance(node, VariableAtom) and node.variable is existing
            for node in walk(root, follow_variables=True)
        ):
            for node in direct:
                node.variable = existing
            raise FormulaSyntaxError(f"Circular reference to variable {name}.")

        existing.root = root
        return existing

    def lookup(self, name: str) -> Variable:
        """
        Return the binding of ``name``.

        :param str name: Variable name

        :return: Bound variable
        :rtype: Variable
        :raises UndefinedVariableError: If the name was never assigned
        """
        try:
            return self._variables[name]
        except KeyError:
            raise UndefinedVariableError(name) from None

    def as_mapping(self) -> Mapping[str, Variable]:
        """Read-only view of the current bindings."""
        return MappingProxyType(self._variables)
