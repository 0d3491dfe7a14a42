from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING, Any, Generic, NamedTuple, TypeVar

from piecetrie.errors import ConcurrentModification, SearchCancelled

if TYPE_CHECKING:
    import threading
    from collections.abc import Iterator

    from piecetrie.node import Node
    from piecetrie.trie import PieceTrie

__all__ = ("Entry", "EnumeratorState", "TrieEnumerator")

log = logging.getLogger(__name__)


class Entry(NamedTuple):
    key: Any
    value: Any


class EnumeratorState(enum.Enum):
    CREATED = enum.auto()
    ACTIVE = enum.auto()
    EXHAUSTED = enum.auto()
    FAILED = enum.auto()


P = TypeVar("P")
V = TypeVar("V")


class TrieEnumerator(Generic[P, V]):
    """Lazy, ordered enumeration of ``(key, value)`` entries.

    Nodes are visited depth-first with siblings in ascending piece order and a
    node before its descendants, so keys come out lexicographically. Every
    collision value of a key is produced, in insertion order.

    The trie's generation is captured on creation and checked on every step: a
    change raises :class:`ConcurrentModification` and leaves the enumerator
    failed until :meth:`reset` is called.
    """

    __slots__ = ("_cancel", "_generation", "_key", "_pending", "_stack", "_trie", "state")

    def __init__(self, trie: PieceTrie[P, V], *, cancel: threading.Event | None = None) -> None:
        self._trie = trie
        self._cancel = cancel
        self.reset()

    def reset(self) -> None:
        """Rewind to the root, validating against the trie's current generation."""
        self._generation = self._trie.generation
        self._stack: list[Iterator[Node[P, V]]] = []
        self._pending: Iterator[V] | None = None
        self._key: Any = None
        self.state = EnumeratorState.CREATED

    def _fail(self) -> ConcurrentModification:
        self.state = EnumeratorState.FAILED
        self._stack.clear()
        self._pending = None
        log.debug("Enumerator invalidated at generation %d (trie is at %d)", self._generation, self._trie.generation)
        return ConcurrentModification(self._generation, self._trie.generation)

    def __iter__(self) -> TrieEnumerator[P, V]:
        return self

    def __next__(self) -> Entry:
        match self.state:
            case EnumeratorState.EXHAUSTED:
                raise StopIteration
            case EnumeratorState.FAILED:
                raise ConcurrentModification(self._generation, self._trie.generation)
            case EnumeratorState.CREATED:
                if self._trie.generation != self._generation:
                    raise self._fail()
                self._stack.append(iter((self._trie.root,)))
                self.state = EnumeratorState.ACTIVE
            case EnumeratorState.ACTIVE:
                if self._trie.generation != self._generation:
                    raise self._fail()

        while True:
            if self._pending is not None:
                try:
                    return Entry(self._key, next(self._pending))
                except StopIteration:
                    self._pending = None

            if not self._stack:
                self.state = EnumeratorState.EXHAUSTED
                raise StopIteration

            try:
                node = next(self._stack[-1])
            except StopIteration:
                self._stack.pop()
                continue

            if self._cancel is not None and self._cancel.is_set():
                self.state = EnumeratorState.EXHAUSTED
                self._stack.clear()
                msg = "Enumeration was cancelled"
                raise SearchCancelled(msg)

            if node.children:
                self._stack.append(iter(node.children.values()))
            if node.is_terminal:
                self._key = node.key
                self._pending = iter(node.values)

    def __repr__(self) -> str:
        return f"<TrieEnumerator state={self.state.name} generation={self._generation}>"
