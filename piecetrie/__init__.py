from piecetrie.config import config, get_wildcards

__all__ = (
    "ConcurrentModification",
    "Entry",
    "EnumeratorState",
    "InvalidArgument",
    "PatternTrie",
    "PieceTrie",
    "SearchCancelled",
    "TrieEnumerator",
    "TrieError",
    "TrieInfo",
    "config",
    "get_wildcards",
)

from piecetrie.enumerator import Entry, EnumeratorState, TrieEnumerator
from piecetrie.errors import ConcurrentModification, InvalidArgument, SearchCancelled, TrieError
from piecetrie.pattern import PatternTrie
from piecetrie.trie import PieceTrie, TrieInfo
