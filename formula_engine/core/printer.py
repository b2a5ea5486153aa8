"""Indented outline of an expression tree, for debugging."""
from typing import List, Optional, Tuple

from formula_engine.core.atoms import Node, children

INDENT = "·"


def tree_lines(node: Optional[Node]) -> List[str]:
    """
    Render a node and its descendants, one line per node, children indented below their parent.

    :param Optional[Node] node: Root to render

    :return: Rendered lines, empty if ``node`` is None
    :rtype: List[str]
    """
    lines: List[str] = []
    pending: List[Tuple[Node, int]] = [] if node is None else [(node, 0)]
    while pending:
        current, depth = pending.pop()
        lines.append(INDENT * depth + current.token)
        pending.extend((child, depth + 1) for child in reversed(children(current)))
    return lines


def format_tree(node: Optional[Node]) -> str:
    return "\n".join(tree_lines(node))
