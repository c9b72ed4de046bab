"""Tests for Store handles."""

import pytest

from guistore import InvalidKey, KeyedStore, ScalarStore, Shape, StoreManager, WatcherError
from guistore.store import DerivedStore


class _Player:
    def __init__(self, name):
        self.name = name


class TestKeyedStore:
    def test_set_get_with_serializer(self):
        m = StoreManager()
        scores = KeyedStore(m, lambda player: player.name)
        alice = _Player("alice")
        scores.set(alice, 10)
        assert scores.get(alice) == 10
        assert scores.get("alice") == 10
        assert scores.get() == {"alice": 10}

    def test_shape(self):
        m = StoreManager()
        assert KeyedStore(m).shape is Shape.KEYED
        assert ScalarStore(m).shape is Shape.SCALAR

    def test_replace_and_clear(self):
        m = StoreManager()
        s = KeyedStore(m)
        s.replace({"a": 1, "b": 2})
        s.clear("a")
        assert s.get() == {"b": 2}
        s.clear()
        assert s.get() is None

    def test_update_and_map(self):
        m = StoreManager()
        s = KeyedStore(m)
        s.set("a", 1)
        s.set("b", 2)
        s.update("a", lambda v: v + 10)
        s.map(lambda v, k: v * 2)
        assert s.get() == {"a": 22, "b": 4}

    def test_watch(self):
        m = StoreManager()
        s = KeyedStore(m)
        log = []
        s.watch(lambda v, k: log.append((v, k)))
        s.set("a", 1)
        s.trigger("a", 5)
        assert log == [(1, "a"), (5, "a")]

    def test_handles_share_manager_data(self):
        m = StoreManager()
        s = KeyedStore(m)
        s.set("a", 1)
        assert m.get(s.id, "a") == 1

    def test_repr(self):
        m = StoreManager()
        assert repr(KeyedStore(m)) == "KeyedStore(1)"


class TestScalarStore:
    def test_set_get(self):
        m = StoreManager()
        difficulty = ScalarStore(m)
        difficulty.set("hard")
        assert difficulty.get() == "hard"

    def test_update(self):
        m = StoreManager()
        counter = ScalarStore(m)
        counter.set(0)
        counter.update(lambda v: v + 1)
        assert counter.get() == 1

    def test_clear(self):
        m = StoreManager()
        s = ScalarStore(m)
        s.set(1)
        s.clear()
        assert s.get() is None

    def test_read_with_key_rejected(self):
        m = StoreManager()
        s = ScalarStore(m)
        with pytest.raises(InvalidKey):
            s.read("k")


class _Upper(DerivedStore):
    """Keeps an upper-cased copy of every value."""

    def __init__(self, primary, manager):
        self.copy = KeyedStore(manager)
        super().__init__(primary)

    def _derive(self, value, key):
        if value is None:
            self.copy.clear(key)
        else:
            self.copy.set(key, value.upper())


class TestDerivedStore:
    def test_derives_on_change(self):
        m = StoreManager()
        derived = _Upper(KeyedStore(m), m)
        derived.set("a", "hello")
        assert derived.get("a") == "hello"
        assert derived.copy.get("a") == "HELLO"
        derived.clear("a")
        assert derived.copy.get("a") is None

    def test_derive_runs_before_later_watchers(self):
        m = StoreManager()
        derived = _Upper(KeyedStore(m), m)
        seen = []
        derived.watch(lambda v, k: seen.append(derived.copy.get(k)))
        derived.set("a", "x")
        assert seen == ["X"]

    def test_base_derive_not_implemented(self):
        m = StoreManager()
        derived = DerivedStore(KeyedStore(m))
        with pytest.raises(WatcherError):
            derived.set("a", 1)
