from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator, Mapping
from typing import TYPE_CHECKING, Any, Generic, NamedTuple, TypeVar

from piecetrie.enumerator import Entry, TrieEnumerator
from piecetrie.errors import InvalidArgument
from piecetrie.node import MISSING, Node

if TYPE_CHECKING:
    from piecetrie.node import Sentinel

__all__ = ("Entry", "PieceTrie", "TrieInfo", "iter_pieces")

log = logging.getLogger(__name__)


class TrieInfo(NamedTuple):
    keys: int
    entries: int
    nodes: int
    generation: int


P = TypeVar("P")
V = TypeVar("V")
T = TypeVar("T")


def iter_pieces(key: Iterable[P]) -> Iterator[P]:
    if key is None:
        msg = "key must not be None"
        raise InvalidArgument(msg)
    try:
        return iter(key)
    except TypeError as exc:
        msg = f"key must be an iterable of pieces, not {type(key).__name__}"
        raise InvalidArgument(msg) from exc


class PieceTrie(Generic[P, V]):
    """A trie over sequences of comparable pieces, each level an ordered map.

    Adding a value under a key that is already present appends it to that key's
    collision list. ``len()`` counts distinct keys, not collision entries.

    Writers are serialized by an internal lock; readers are not, so callers that
    mix readers and writers across threads must synchronize themselves.
    """

    __slots__ = ("_generation", "_lock", "_root", "_size")

    def __init__(self, pairs: Iterable[tuple[Iterable[P], V]] | Mapping[Iterable[P], V] = (), /) -> None:
        self._root: Node[P, V] = Node()
        self._size = 0
        self._generation = 0
        self._lock = threading.RLock()
        self.update(pairs)

    @property
    def root(self) -> Node[P, V]:
        return self._root

    @property
    def generation(self) -> int:
        """Modification token, bumped by every call that changes the structure."""
        return self._generation

    @property
    def count(self) -> int:
        return self._size

    def _find(self, key: Iterable[P]) -> Node[P, V] | None:
        node = self._root
        for piece in iter_pieces(key):
            if (child := node.child(piece)) is None:
                return None
            node = child
        return node

    def _find_terminal(self, key: Iterable[P]) -> Node[P, V] | None:
        node = self._find(key)
        return node if node is not None and node.is_terminal else None

    def add(self, key: Iterable[P], value: V) -> None:
        pieces = iter_pieces(key)
        if isinstance(key, Iterator):
            # one-shot iterators cannot be handed back out as the representative key
            key = tuple(pieces)
            pieces = iter(key)

        with self._lock:
            node = self._root
            for piece in pieces:
                node = node.descend(piece)

            if node.attach(key, value):
                self._size += 1
            self._generation += 1

    def update(self, pairs: Iterable[tuple[Iterable[P], V]] | Mapping[Iterable[P], V], /) -> None:
        items = pairs.items() if isinstance(pairs, Mapping) else pairs
        for key, value in items:
            self.add(key, value)

    def remove(self, key: Iterable[P], value: V | Sentinel = MISSING) -> bool:
        """Remove ``key`` entirely or, when ``value`` is given, one equal value from its collision list.

        Returns whether anything was removed. The key stays present while its
        collision list still holds other values.
        """
        with self._lock:
            if (node := self._find_terminal(key)) is None:
                return False

            if value is MISSING:
                node.clear()
            else:
                try:
                    node.values.remove(value)
                except ValueError:
                    return False
                if not node.values:
                    node.clear()

            if not node.is_terminal:
                self._size -= 1
            self._generation += 1
            return True

    def clear(self) -> None:
        with self._lock:
            log.debug("Clearing trie holding %d keys", self._size)
            self._root = Node()
            self._size = 0
            self._generation += 1

    def contains_key(self, key: Iterable[P]) -> bool:
        return self._find_terminal(key) is not None

    def contains(self, key: Iterable[P], value: V) -> bool:
        node = self._find_terminal(key)
        return node is not None and value in node.values

    def try_get(self, key: Iterable[P], default: T | None = None) -> V | T | None:
        """Return the first value stored under ``key``, or ``default``."""
        node = self._find_terminal(key)
        return node.values[0] if node is not None else default

    def search(self, key: Iterable[P]) -> list[V]:
        """Return the whole collision list for ``key``; empty when absent."""
        node = self._find_terminal(key)
        return list(node.values) if node is not None else []

    def entries(self, *, cancel: threading.Event | None = None) -> TrieEnumerator[P, V]:
        return TrieEnumerator(self, cancel=cancel)

    def keys(self) -> list[Any]:
        return [entry.key for entry in self]

    def values(self) -> list[V]:
        return [entry.value for entry in self]

    def items(self) -> list[Entry]:
        return list(self)

    def info(self) -> TrieInfo:
        entries = nodes = 0
        stack = [self._root]
        while stack:
            node = stack.pop()
            nodes += 1
            entries += len(node.values)
            stack.extend(node.children.values())
        return TrieInfo(self._size, entries, nodes, self._generation)

    def __iter__(self) -> TrieEnumerator[P, V]:
        return TrieEnumerator(self)

    def __len__(self) -> int:
        return self._size

    def __contains__(self, key: Iterable[P]) -> bool:
        return self.contains_key(key)

    def __getitem__(self, key: Iterable[P]) -> V:
        if (node := self._find_terminal(key)) is None:
            raise KeyError(key)
        return node.values[0]

    def __setitem__(self, key: Iterable[P], value: V) -> None:
        self.add(key, value)

    def __delitem__(self, key: Iterable[P]) -> None:
        if not self.remove(key):
            raise KeyError(key)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} keys={self._size} generation={self._generation}>"
