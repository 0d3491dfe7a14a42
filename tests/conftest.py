import pytest

from piecetrie import PatternTrie, PieceTrie


@pytest.fixture
def trie() -> PieceTrie[str, int]:
    """A small trie of words, inserted out of order, with one collision chain."""
    return PieceTrie([("dog", 3), ("cat", 1), ("car", 2), ("cart", 4), ("cat", 5)])


@pytest.fixture
def patterns() -> PatternTrie[str, str]:
    return PatternTrie(
        [("c?t", "c?t"), ("a*z", "a*z"), ("a*c", "a*c"), ("ab?", "ab?"), ("*", "*")],
        any_one="?",
        any_sequence="*",
    )
