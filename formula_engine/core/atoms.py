"""Lexed units of a formula and the values they carry."""
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from formula_engine.core.descriptors import FunctionDescriptor, OperatorDescriptor, Scalar


class ListValue:
    """
    Fixed sequence of scalars read through a cycling cursor.

    Every read returns the element under the cursor and advances it, wrapping
    to the start once the end is reached. This is what lets a list broadcast
    element-wise against scalars and lists of other lengths.
    """

    def __init__(self, items: Iterable[Scalar] = ()) -> None:
        self._items: Tuple[Scalar, ...] = tuple(items)
        self._cursor: int = 0

    @property
    def cursor(self) -> int:
        return self._cursor

    def next(self) -> Optional[Scalar]:
        """
        Return the element under the cursor and advance it.

        :return: Current element, or None if the list is empty
        :rtype: Optional[Scalar]
        """
        if not self._items:
            return None
        if self._cursor >= len(self._items):
            self._cursor = 0
        value = self._items[self._cursor]
        self._cursor += 1
        return value

    def reset(self) -> None:
        self._cursor = 0

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"ListValue({list(self._items)!r}, cursor={self._cursor})"


@dataclass(eq=False)
class Atom:
    """Base class of every lexed unit; ``token`` is the raw text consumed."""

    token: str


@dataclass(eq=False)
class NumberAtom(Atom):
    value: float


@dataclass(eq=False)
class Variable:
    """Named reference to a previously built expression tree, evaluated lazily."""

    name: str
    root: "Node"


@dataclass(eq=False)
class VariableAtom(Atom):
    variable: Variable


@dataclass(eq=False)
class ListAtom(Atom):
    values: ListValue


@dataclass(eq=False)
class OperatorAtom(Atom):
    descriptor: OperatorDescriptor
    lhs: Optional["Node"] = None
    rhs: Optional["Node"] = None


@dataclass(eq=False)
class FunctionAtom(Atom):
    descriptor: FunctionDescriptor
    params: List["Node"] = field(default_factory=list)


@dataclass(eq=False)
class CommaAtom(Atom):
    token: str = ","


@dataclass(eq=False)
class LeftParenAtom(Atom):
    token: str = "("


@dataclass(eq=False)
class RightParenAtom(Atom):
    token: str = ")"


# Atoms that can appear in a built expression tree
Node = Union[NumberAtom, VariableAtom, ListAtom, OperatorAtom, FunctionAtom]


def children(node: Node) -> List[Node]:
    """Return the direct children of a tree node in left-to-right order."""
    if isinstance(node, OperatorAtom):
        return [n for n in (node.lhs, node.rhs) if n is not None]
    if isinstance(node, FunctionAtom):
        return list(node.params)
    return []


def walk(node: Node, follow_variables: bool = False) -> Iterator[Node]:
    """
    Iterate over a tree depth-first, parents before children.

    :param Node node: Root of the tree
    :param bool follow_variables: Also descend into the trees referenced by variables

    :return: Iterator over every node
    :rtype: Iterator[Node]
    """
    stack: List[Node] = [node]
    seen = set()
    while stack:
        current = stack.pop()
        yield current
        if follow_variables and isinstance(current, VariableAtom):
            root = current.variable.root
            # Guard against a variable reached through two call sites
            if id(root) not in seen:
                seen.add(id(root))
                stack.append(root)
        stack.extend(reversed(children(current)))
