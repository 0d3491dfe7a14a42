import threading

import hypothesis.strategies as st
import pytest
from hypothesis import given

from piecetrie import InvalidArgument, PieceTrie, TrieInfo

keys_strategy = st.text(alphabet="abcde", max_size=6)


@given(key=keys_strategy, value=st.integers())
def test_add_then_search(key: str, value: int) -> None:
    """Every added value is found again under its key."""
    trie = PieceTrie[str, int]()
    trie.add(key, value)
    assert value in trie.search(key)
    assert trie.contains_key(key)
    assert trie.try_get(key) == value


def test_collision_order() -> None:
    trie = PieceTrie[str, str]()
    trie.add("k", "v1")
    trie.add("k", "v2")
    assert trie.search("k") == ["v1", "v2"]
    assert trie.try_get("k") == "v1"
    assert trie["k"] == "v1"


def test_count_is_distinct_keys(trie: PieceTrie[str, int]) -> None:
    """Collision entries do not inflate the key count."""
    assert len(trie) == trie.count == 4
    assert trie.info() == TrieInfo(keys=4, entries=5, nodes=9, generation=5)

    trie.add("cat", 6)
    assert len(trie) == 4
    trie.add("ca", 7)
    assert len(trie) == 5


def test_remove_by_key_drops_whole_collision_list(trie: PieceTrie[str, int]) -> None:
    assert trie.search("cat") == [1, 5]
    assert trie.remove("cat") is True
    assert not trie.contains_key("cat")
    assert "cat" not in trie
    assert trie.search("cat") == []
    assert trie.try_get("cat") is None
    assert len(trie) == 3


def test_remove_prefix_keeps_longer_keys(trie: PieceTrie[str, int]) -> None:
    assert trie.remove("car")
    assert trie.search("cart") == [4]
    assert not trie.remove("car")


def test_remove_single_value(trie: PieceTrie[str, int]) -> None:
    """Removing with a value takes that one value out of the collision chain."""
    generation = trie.generation
    assert trie.remove("cat", 1) is True
    assert trie.search("cat") == [5]
    assert trie.contains_key("cat")
    assert len(trie) == 4
    assert trie.generation == generation + 1

    assert trie.remove("cat", 5) is True
    assert not trie.contains_key("cat")
    assert len(trie) == 3


def test_remove_single_value_first_occurrence_only() -> None:
    trie = PieceTrie([("k", 1), ("k", 2), ("k", 1)])
    assert trie.remove("k", 1)
    assert trie.search("k") == [2, 1]


def test_remove_value_mismatch_is_noop(trie: PieceTrie[str, int]) -> None:
    generation = trie.generation
    assert trie.remove("cat", 99) is False
    assert trie.search("cat") == [1, 5]
    assert trie.generation == generation


@given(key=keys_strategy)
def test_remove_absent_key(key: str) -> None:
    """Removing a key that was never inserted changes nothing."""
    trie = PieceTrie([(key + "x", 1)])
    count, generation, nodes = len(trie), trie.generation, trie.info().nodes
    assert trie.remove(key) is False
    assert trie.remove(key, 1) is False
    assert len(trie) == count
    assert trie.generation == generation
    assert trie.info().nodes == nodes


def test_remove_does_not_prune_scaffolding() -> None:
    trie = PieceTrie([("abc", 1)])
    nodes = trie.info().nodes
    assert trie.remove("abc")
    assert len(trie) == 0
    assert trie.info().nodes == nodes
    assert list(trie) == []


def test_empty_key_lives_at_root() -> None:
    trie = PieceTrie([("", 0), ("a", 1)])
    assert trie.contains_key("")
    assert trie.search("") == [0]
    assert trie.keys() == ["", "a"]


def test_missing_lookups() -> None:
    trie = PieceTrie([("abc", 1)])
    assert not trie.contains_key("ab")
    assert not trie.contains_key("abcd")
    assert trie.search("ab") == []
    assert trie.try_get("ab", -1) == -1
    with pytest.raises(KeyError):
        trie["ab"]
    with pytest.raises(KeyError):
        del trie["ab"]


@pytest.mark.parametrize(
    "operation",
    [
        lambda t: t.add(None, 1),
        lambda t: t.remove(None),
        lambda t: t.remove(None, 1),
        lambda t: t.contains_key(None),
        lambda t: t.try_get(None),
        lambda t: t.search(None),
        lambda t: t.contains(None, 1),
        lambda t: t.add(42, 1),
    ],
)
def test_invalid_key(operation) -> None:  # noqa: ANN001
    trie = PieceTrie([("a", 1)])
    with pytest.raises(InvalidArgument):
        operation(trie)
    with pytest.raises(TypeError):
        operation(trie)
    assert len(trie) == 1


def test_arbitrary_pieces() -> None:
    """Keys are any sequences of comparable pieces, and the original key object is kept."""
    trie = PieceTrie[int, str]()
    key = (3, 1, 4)
    trie.add(key, "pi")
    trie.add([3, 1], "short")
    trie.add(iter([2, 7]), "e")

    assert trie.search([3, 1, 4]) == ["pi"]
    assert trie.keys() == [(2, 7), [3, 1], (3, 1, 4)]
    assert trie.keys()[2] is key


def test_contains_pair(trie: PieceTrie[str, int]) -> None:
    assert trie.contains("cat", 5)
    assert not trie.contains("cat", 3)
    assert not trie.contains("ca", 1)


def test_mapping_style_access() -> None:
    trie = PieceTrie[str, int]({"one": 1, "two": 2})
    trie["one"] = 11
    assert trie.search("one") == [1, 11]
    del trie["one"]
    assert "one" not in trie
    assert trie.values() == [2]


def test_clear(trie: PieceTrie[str, int]) -> None:
    generation = trie.generation
    trie.clear()
    assert len(trie) == 0
    assert trie.items() == []
    assert trie.info() == TrieInfo(keys=0, entries=0, nodes=1, generation=generation + 1)


def test_concurrent_writers_are_serialized() -> None:
    trie = PieceTrie[str, int]()

    def writer(offset: int) -> None:
        for i in range(200):
            trie.add(f"{offset}-{i}", i)

    threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(trie) == 800
    assert trie.generation == 800
