"""Reverse wildcard matching.

A :class:`PatternTrie` stores *patterns*: keys that may contain two reserved
pieces, ``any_one`` (exactly one arbitrary piece) and ``any_sequence`` (zero or
more arbitrary pieces). A concrete query is then matched against every stored
pattern at once, the inverse of testing one regex against many inputs::

    >>> patterns = PatternTrie([("c?t", "c-t"), ("a*", "a-words")])
    >>> patterns.match("cat")
    ['c-t']
    >>> patterns.match("apple")
    ['a-words']
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from contextlib import contextmanager
from operator import itemgetter
from typing import TYPE_CHECKING, Any, TypeVar

from piecetrie.config import get_wildcards
from piecetrie.errors import ConcurrentModification, InvalidArgument, SearchCancelled
from piecetrie.node import MISSING
from piecetrie.trie import PieceTrie, iter_pieces

if TYPE_CHECKING:
    from collections.abc import Generator, Iterable, Iterator, Mapping

    from piecetrie.node import Node, Sentinel

__all__ = ("PatternTrie", "timed_match")

log = logging.getLogger(__name__)


@contextmanager
def timed_match(trie: PieceTrie[Any, Any], query: object) -> Generator[None]:
    start = time.perf_counter()
    yield
    log.debug("Matched %r against %d patterns in %.4f seconds", query, len(trie), time.perf_counter() - start)


P = TypeVar("P")
V = TypeVar("V")


class PatternTrie(PieceTrie[P, V]):
    """A :class:`PieceTrie` whose keys are wildcard patterns.

    Wildcards that are not given fall back to the configured defaults
    (``?`` and ``*`` unless overridden through ``piecetrie.toml`` or the
    ``PIECETRIE_ANY_ONE`` / ``PIECETRIE_ANY_SEQUENCE`` environment variables).
    Exact-key operations inherited from :class:`PieceTrie` treat wildcards as
    ordinary pieces.
    """

    __slots__ = ("any_one", "any_sequence")

    def __init__(
        self,
        pairs: Iterable[tuple[Iterable[P], V]] | Mapping[Iterable[P], V] = (),
        /,
        *,
        any_one: P | Sentinel = MISSING,
        any_sequence: P | Sentinel = MISSING,
    ) -> None:
        if any_one is MISSING or any_sequence is MISSING:
            defaults = get_wildcards()
            any_one = defaults.any_one if any_one is MISSING else any_one
            any_sequence = defaults.any_sequence if any_sequence is MISSING else any_sequence

        if any_one is None or any_sequence is None:
            msg = "wildcard pieces must not be None"
            raise InvalidArgument(msg)
        if any_one == any_sequence:
            msg = f"any_one and any_sequence must be different pieces, got {any_one!r} for both"
            raise InvalidArgument(msg)

        self.any_one: P = any_one  # type: ignore[assignment]
        self.any_sequence: P = any_sequence  # type: ignore[assignment]
        super().__init__(pairs)

    def _advance(self, piece: P, positions: frozenset[int], query: tuple[P, ...]) -> frozenset[int]:
        """Positions in ``query`` reachable after crossing an edge labelled ``piece``."""
        end = len(query)
        if piece == self.any_sequence:
            return frozenset(range(min(positions), end + 1))
        if piece == self.any_one:
            return frozenset(i + 1 for i in positions if i < end)
        return frozenset(i + 1 for i in positions if i < end and query[i] == piece)

    def _candidates(
        self, node: Node[P, V], positions: frozenset[int], query: tuple[P, ...]
    ) -> list[tuple[P, Node[P, V]]]:
        wanted = {query[i] for i in positions if i < len(query)}
        wanted.update((self.any_one, self.any_sequence))
        found = [(piece, child) for piece in wanted if (child := node.child(piece)) is not None]
        found.sort(key=itemgetter(0))
        return found

    def iter_matches(self, query: Iterable[P], *, cancel: threading.Event | None = None) -> Iterator[Node[P, V]]:
        """Lazily yield every terminal node whose pattern ``query`` satisfies, in key order.

        Each node carries the set of query positions its pattern prefix can end
        at, so every way an ``any_sequence`` piece can split the query is
        explored without visiting a node twice.
        """
        pieces = tuple(iter_pieces(query))
        end = len(pieces)
        generation = self.generation

        stack: list[tuple[Node[P, V], frozenset[int]]] = [(self.root, frozenset((0,)))]
        while stack:
            if cancel is not None and cancel.is_set():
                msg = "Pattern search was cancelled"
                raise SearchCancelled(msg)

            if self.generation != generation:
                log.debug("Pattern trie changed while matching %r", query)
                raise ConcurrentModification(generation, self.generation)

            node, positions = stack.pop()
            if end in positions and node.is_terminal:
                yield node

            for piece, child in reversed(self._candidates(node, positions, pieces)):
                if reached := self._advance(piece, positions, pieces):
                    stack.append((child, reached))

    def match(self, query: Iterable[P], *, cancel: threading.Event | None = None) -> list[V]:
        """Return the values of every stored pattern satisfied by ``query``."""
        with timed_match(self, query):
            return [value for node in self.iter_matches(query, cancel=cancel) for value in node.values]

    def matches(self, query: Iterable[P]) -> bool:
        return next(self.iter_matches(query), None) is not None

    async def amatch(self, query: Iterable[P]) -> list[V]:
        """:meth:`match` in a worker thread; cancelling the caller stops the search at its next step."""
        cancel = threading.Event()
        try:
            return await asyncio.to_thread(self.match, query, cancel=cancel)
        except asyncio.CancelledError:
            cancel.set()
            raise

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} keys={len(self)} generation={self.generation}"
            f" any_one={self.any_one!r} any_sequence={self.any_sequence!r}>"
        )
