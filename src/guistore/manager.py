"""StoreManager — owns the registry and the data table.

One manager is built per process and handed to everything that touches
stores. Every mutating call validates first, mutates the table, then runs
the store's watchers synchronously in registration order.

Usage:
    manager = StoreManager()
    scores = manager.register()
    manager.lock()  # setup phase is over

    manager.set(scores, 10, key="alice")
    manager.get(scores)  # {"alice": 10}
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable

from guistore import _dispatch
from guistore._table import DataTable
from guistore.errors import InvalidKey, WatcherError
from guistore.registry import Serializer, Shape, StoreRegistry
from guistore.watch import Watcher, WatchHandle

logger = logging.getLogger(__name__)


class StoreManager:
    """Registry + data table + mutation operations."""

    def __init__(self, table: dict[int, object] | None = None, *, allow_reentry: bool = False) -> None:
        self.registry = StoreRegistry()
        self._table = DataTable(table)
        self.allow_reentry = allow_reentry

    # --- Setup ---

    def register(self, serializer: Serializer | None = None, *, shape: Shape = Shape.KEYED) -> int:
        return self.registry.register(serializer, shape=shape)

    def register_scalar(self) -> int:
        return self.registry.register(shape=Shape.SCALAR)

    def lock(self) -> None:
        self.registry.lock()

    @property
    def locked(self) -> bool:
        return self.registry.locked

    def validate(self, store: object, key: object = None) -> str | None:
        return self.registry.validate(store, key)

    def watch(self, store: int, watcher: Watcher) -> WatchHandle:
        return self.registry.watch(store, watcher)

    # --- Persistence ---

    @property
    def table(self) -> dict[int, object]:
        """The live data table, for the host to checkpoint."""
        return self._table.entries

    def attach(self, table: dict[int, object]) -> None:
        """Re-attach a checkpointed data table. Trusted as consistent."""
        self._table = DataTable(table)
        logger.info("Attached data table with %d store entries", len(self._table))

    # --- Data ---

    def get(self, store: int, key: Any = None) -> Any:
        """Stored value; for a keyed store without key, a copy of the mapping."""
        key = self.validate(store, key)
        if self.registry.shapes[store] is Shape.SCALAR:
            return self._table.get(store)

        data = self._table.mapping(store)
        if data is None:
            return None
        if key is None:
            return dict(data)
        return data.get(key)

    def set(self, store: int, value: Any, *, key: Any = None) -> None:
        """Set a value and trigger watchers.

        On a keyed store without key, value replaces the whole mapping.
        """
        key = self.validate(store, key)
        self._guard(store)

        if self.registry.shapes[store] is Shape.SCALAR:
            self._table.put(store, value)
        elif key is not None:
            self._table.keyed(store)[key] = value
        elif isinstance(value, Mapping):
            if None in value:
                raise InvalidKey(f"Store {store} can not hold a None key")
            self._table.put(store, {self.validate(store, k): v for k, v in value.items()})
        else:
            raise InvalidKey(f"Store {store} is keyed; set without a key needs a mapping")

        self._trigger(store, key, value)

    def clear(self, store: int, key: Any = None) -> None:
        """Remove a key, or the whole entry when no key is given."""
        key = self.validate(store, key)
        self._guard(store)

        if key is None:
            self._table.drop(store)
        else:
            data = self._table.get(store)
            if isinstance(data, dict):
                data.pop(key, None)

        self._trigger(store, key, None)

    def update(self, store: int, updater: Callable[[Any], Any], *, key: Any = None) -> None:
        """Pass the current value to updater.

        A non-None return replaces the value; otherwise the value is kept,
        including any in-place changes updater made to it.
        """
        key = self.validate(store, key)
        self._guard(store)

        if key is None:
            current = self._current(store)
            result = updater(current)
            if result is not None:
                if self.registry.shapes[store] is Shape.KEYED and not isinstance(result, Mapping):
                    raise InvalidKey(f"Store {store} is keyed; update without a key must return a mapping")
                self._table.put(store, result)
            elif current and current is not self._table.get(store):
                # a fresh mapping filled in place
                self._table.put(store, current)
            value = self._table.get(store)
        else:
            data = self._table.mapping(store) or {}
            result = updater(data.get(key))
            if result is not None:
                self._table.keyed(store)[key] = result
            value = (self._table.mapping(store) or {}).get(key)

        self._trigger(store, key, value)

    def map(self, store: int, updater: Callable[[Any, str], Any]) -> None:
        """Run updater(value, key) for every key of a keyed store.

        Watchers fire once per key. Failures from every key are collected
        and raised together after the last key.
        """
        self.validate(store)
        if self.registry.shapes[store] is Shape.SCALAR:
            raise InvalidKey(f"Store {store} is a scalar store and has no keys to map")
        self._guard(store)

        if self._table.get(store) is None:
            return
        data = self._table.keyed(store)
        failures = []
        for key, value in list(data.items()):
            try:
                result = updater(value, key)
            except Exception as exc:
                if not failures:
                    raise
                # keep the watcher failures of the keys already mapped
                failures.append((updater, exc))
                raise WatcherError(store, failures) from exc
            if result is not None:
                data[key] = result
            failures.extend(self._run(store, key, data.get(key)))
        _dispatch.raise_failures(store, failures)

    def trigger(self, store: int, key: Any = None, value: Any = None) -> None:
        """Run the watchers of a store without changing its data."""
        key = self.validate(store, key)
        self._trigger(store, key, value)

    # --- Internals ---

    def _current(self, store: int) -> Any:
        if self.registry.shapes[store] is Shape.SCALAR:
            return self._table.get(store)
        data = self._table.mapping(store)
        return data if data is not None else {}

    def _guard(self, store: int) -> None:
        if not self.allow_reentry:
            _dispatch.guard(id(self.registry), store)

    def _run(self, store: int, key: str | None, value: Any) -> list:
        return _dispatch.run(id(self.registry), store, self.registry.watchers_of(store), value, key)

    def _trigger(self, store: int, key: str | None, value: Any) -> None:
        _dispatch.raise_failures(store, self._run(store, key, value))

    def __repr__(self) -> str:
        state = "locked" if self.locked else "setup"
        return f"StoreManager({self.registry.uid} stores, {state})"
