"""Prefix tree used to recognise operator and function symbols in formula text."""
from enum import Enum
from typing import Any, Dict, Generic, Iterable, NamedTuple, Optional, TypeVar

D = TypeVar("D")


class MatchPolicy(str, Enum):
    """
    Strategy used when a registered symbol is a strict prefix of another.

    FIRST stops at the first accepting node on the path, so ``>`` shadows ``>=``.
    LONGEST keeps walking and reports the deepest accepting node visited.
    """

    FIRST = "first"
    LONGEST = "longest"


class SymbolMatch(NamedTuple):
    """Result of a trie lookup; a length of 0 means nothing matched."""

    descriptor: Optional[Any]
    length: int

    def __bool__(self) -> bool:
        return self.length > 0


NO_MATCH: SymbolMatch = SymbolMatch(None, 0)


class _TrieNode:
    __slots__ = ("children", "descriptor")

    def __init__(self) -> None:
        self.children: Dict[str, "_TrieNode"] = {}
        self.descriptor = None


class SymbolTrie(Generic[D]):
    """
    Character trie mapping symbol text to descriptors.

    Example:
        >>> trie = SymbolTrie({">": "gt", ">=": "ge"}, policy=MatchPolicy.LONGEST)
        >>> trie.match("a >= 1", 2)
        SymbolMatch(descriptor='ge', length=2)
    """

    def __init__(self, symbols: Dict[str, D], policy: MatchPolicy = MatchPolicy.LONGEST) -> None:
        self.policy = MatchPolicy(policy)
        self._root = _TrieNode()
        for symbol, descriptor in symbols.items():
            self.insert(symbol, descriptor)

    @classmethod
    def from_descriptors(cls, descriptors: Iterable[D], policy: MatchPolicy = MatchPolicy.LONGEST) -> "SymbolTrie[D]":
        """Build a trie keyed on each descriptor's ``symbol`` attribute."""
        return cls({d.symbol: d for d in descriptors}, policy=policy)

    def insert(self, symbol: str, descriptor: D) -> None:
        """
        Insert a symbol character by character and tag its last node as accepting.

        :param str symbol: Symbol text, must not be empty
        :param descriptor: Value reported when the symbol is matched

        :raises ValueError: If the symbol is empty
        """
        if not symbol:
            raise ValueError("Cannot register an empty symbol")
        node = self._root
        for char in symbol:
            node = node.children.setdefault(char, _TrieNode())
        node.descriptor = descriptor

    def match(self, text: str, position: int) -> SymbolMatch:
        """
        Match a registered symbol starting at ``position`` in ``text``.

        :param str text: Text being scanned
        :param int position: Index of the first character to match

        :return: Matched descriptor and number of characters consumed
        :rtype: SymbolMatch
        """
        node = self._root
        best = NO_MATCH
        i = position
        while i < len(text):
            node = node.children.get(text[i])
            if node is None:
                break
            i += 1
            if node.descriptor is not None:
                best = SymbolMatch(node.descriptor, i - position)
                if self.policy is MatchPolicy.FIRST:
                    break
        return best
