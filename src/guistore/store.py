"""Store handles — typed views over one registered store.

A handle is a thin object holding a manager and a store id; all data lives
in the manager's table. The shape is chosen by the constructor:
KeyedStore for key -> value data, ScalarStore for a single value.

DerivedStore wraps a primary store, keeps the same get/set contract and
re-derives its own state from the primary's changes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Generic, TypeVar

from guistore.registry import Shape
from guistore.watch import WatchHandle

if TYPE_CHECKING:
    from guistore.manager import StoreManager

K = TypeVar("K")
V = TypeVar("V")


class Store(Generic[K, V]):
    """Base handle. read/write/erase take an optional key."""

    __slots__ = ("_manager", "_id")

    def __init__(self, manager: StoreManager, store_id: int) -> None:
        manager.validate(store_id)
        self._manager = manager
        self._id = store_id

    @property
    def id(self) -> int:
        return self._id

    @property
    def manager(self) -> StoreManager:
        return self._manager

    @property
    def shape(self) -> Shape:
        return self._manager.registry.shapes[self._id]

    def read(self, key: K | None = None) -> Any:
        return self._manager.get(self._id, key)

    def write(self, value: V, key: K | None = None) -> None:
        self._manager.set(self._id, value, key=key)

    def erase(self, key: K | None = None) -> None:
        self._manager.clear(self._id, key)

    def watch(self, watcher: Callable[[V | None, str | None], None]) -> WatchHandle:
        return self._manager.watch(self._id, watcher)

    def trigger(self, key: K | None = None, value: V | None = None) -> None:
        self._manager.trigger(self._id, key, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._id})"


class KeyedStore(Store[K, V]):
    """key -> value store. Non-string keys need a serializer.

    Usage:
        player_scores = KeyedStore(manager, lambda player: player.name)
        player_scores.set(player, 10)
        player_scores.get(player)  # 10
        player_scores.get()        # {"alice": 10}
    """

    __slots__ = ()

    def __init__(self, manager: StoreManager, serializer: Callable[[K], str] | None = None) -> None:
        super().__init__(manager, manager.register(serializer))

    def get(self, key: K | None = None) -> V | dict[str, V] | None:
        return self.read(key)

    def set(self, key: K, value: V) -> None:
        self.write(value, key)

    def replace(self, data: dict[K, V]) -> None:
        """Replace every key at once."""
        self.write(data)

    def clear(self, key: K | None = None) -> None:
        self.erase(key)

    def update(self, key: K, updater: Callable[[V | None], V | None]) -> None:
        self._manager.update(self._id, updater, key=key)

    def map(self, updater: Callable[[V, str], V | None]) -> None:
        self._manager.map(self._id, updater)


class ScalarStore(Store[None, V]):
    """Single-value store. Takes no keys."""

    __slots__ = ()

    def __init__(self, manager: StoreManager) -> None:
        super().__init__(manager, manager.register_scalar())

    def get(self) -> V | None:
        return self.read()

    def set(self, value: V) -> None:
        self.write(value)

    def clear(self) -> None:
        self.erase()

    def update(self, updater: Callable[[V | None], V | None]) -> None:
        self._manager.update(self._id, updater)


class DerivedStore(Generic[V]):
    """A store whose own state is re-derived from a primary store.

    Subclasses implement _derive(value, key). It is the primary's first
    watcher, so derived state is settled before any later watcher runs.
    """

    def __init__(self, primary: Store[str, V]) -> None:
        self.primary = primary
        self._handle = primary.watch(self._derive)

    @property
    def id(self) -> int:
        return self.primary.id

    def get(self, key: str | None = None) -> V | None:
        return self.primary.read(key)

    def set(self, key: str | None, value: V) -> None:
        self.primary.write(value, key)

    def clear(self, key: str | None = None) -> None:
        self.primary.erase(key)

    def watch(self, watcher: Callable[[V | None, str | None], None]) -> WatchHandle:
        return self.primary.watch(watcher)

    def _derive(self, value: V | None, key: str | None) -> None:
        raise NotImplementedError
