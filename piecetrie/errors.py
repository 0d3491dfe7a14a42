__all__ = ("ConcurrentModification", "InvalidArgument", "SearchCancelled", "TrieError")


class TrieError(Exception):
    """Base class for every error raised by piecetrie."""


class InvalidArgument(TrieError, TypeError):
    """A keyed operation received ``None`` or a non-iterable key."""


class ConcurrentModification(TrieError, RuntimeError):
    """The trie changed after an enumerator captured its generation."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Trie was modified during enumeration (generation {expected} -> {actual})")


class SearchCancelled(TrieError): ...
