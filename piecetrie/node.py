from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, TypeAlias, TypeVar

from sortedcontainers import SortedDict  # type: ignore[reportMissingTypeStubs]

if TYPE_CHECKING:
    from collections.abc import Iterable

__all__ = ("MISSING", "Node", "Sentinel")


class _Sentinel(type):
    def __new__(cls, name: str) -> _Sentinel:
        return super().__new__(cls, name, (), {})

    def __repr__(cls) -> str:
        return "..."

    def __hash__(cls) -> int:
        return 0

    def __eq__(cls, other: object) -> bool:
        return other is cls


Sentinel: TypeAlias = _Sentinel
MISSING: Sentinel = _Sentinel("MISSING")


P = TypeVar("P")
V = TypeVar("V")


class Node(Generic[P, V]):
    """One trie vertex.

    ``children`` is ordered by the natural comparison of pieces, which fixes the
    enumeration order. ``values`` is non-empty exactly when ``is_terminal`` is set.
    """

    __slots__ = ("children", "is_terminal", "key", "piece", "values")

    def __init__(self, piece: P | None = None) -> None:
        self.piece = piece
        self.children: SortedDict[P, Node[P, V]] = SortedDict()
        self.is_terminal: bool = False
        self.values: list[V] = []
        self.key: Iterable[P] | Any = None

    def child(self, piece: P) -> Node[P, V] | None:
        return self.children.get(piece)

    def descend(self, piece: P) -> Node[P, V]:
        try:
            return self.children[piece]
        except KeyError:
            node = self.children[piece] = Node(piece)
            return node

    def attach(self, key: Iterable[P], value: V) -> bool:
        """Append ``value`` to the collision list. Returns whether the node just became terminal."""
        became_terminal = not self.is_terminal
        self.values.append(value)
        self.key = key
        self.is_terminal = True
        return became_terminal

    def clear(self) -> None:
        self.values.clear()
        self.key = None
        self.is_terminal = False

    def __repr__(self) -> str:
        return (
            f"<Node piece={self.piece!r} terminal={self.is_terminal}"
            f" values={len(self.values)} children={len(self.children)}>"
        )
