"""Store registry — ids, serializers, shapes and watchers.

Stores are registered once, during the setup phase, and never removed.
Ids are dense and monotonic starting at 1; an id is valid iff it is at or
below the high-water mark.
"""

from __future__ import annotations

import enum
import itertools
import logging
from typing import Any, Callable

from guistore.errors import (
    InvalidKey,
    InvalidStore,
    RegistrationTimingError,
    SerializerError,
)
from guistore.watch import Watcher, WatchHandle

logger = logging.getLogger(__name__)

Serializer = Callable[[Any], str]


class Shape(enum.Enum):
    """Data shape a store commits to at registration."""

    KEYED = "keyed"
    SCALAR = "scalar"


class StoreRegistry:
    """Issues store ids and validates store/key pairs."""

    def __init__(self) -> None:
        self.uid = 0
        self.serializers: dict[int, Serializer] = {}
        self.shapes: dict[int, Shape] = {}
        self.watchers: dict[int, list[Watcher]] = {}
        self._counter = itertools.count(1)
        self._locked = False

    # --- Setup phase ---

    @property
    def locked(self) -> bool:
        return self._locked

    def lock(self) -> None:
        """End the setup phase. register() raises from now on."""
        self._locked = True

    def register(self, serializer: Serializer | None = None, *, shape: Shape = Shape.KEYED) -> int:
        """Allocate the next store id.

        serializer converts non-string keys into string keys. Scalar stores
        take no keys, so they take no serializer either.
        """
        if self._locked:
            raise RegistrationTimingError("Stores can not be registered during runtime")
        if serializer is not None and shape is Shape.SCALAR:
            raise ValueError("A scalar store does not use keys and can not have a serializer")

        uid = next(self._counter)
        self.uid = uid
        self.shapes[uid] = shape
        if serializer is not None:
            self.serializers[uid] = serializer
        logger.debug("Registered %s store %d", shape.value, uid)
        return uid

    # --- Validation ---

    def validate(self, store: object, key: object = None) -> str | None:
        """Check a store id and turn key into its string form.

        Returns None when no key was given.
        """
        if not isinstance(store, int) or isinstance(store, bool):
            raise InvalidStore(f"Store id is not an integer; received {type(store).__name__}")
        if store < 1 or store > self.uid:
            raise InvalidStore(f"Store id is out of range; received {store}")
        if key is None:
            return None

        if self.shapes[store] is Shape.SCALAR:
            raise InvalidKey(f"Store {store} is a scalar store and does not take keys")
        if isinstance(key, str):
            return key

        serializer = self.serializers.get(store)
        if serializer is None:
            raise InvalidKey(
                f"Store key is not a string and no serializer has been registered; "
                f"received {type(key).__name__}"
            )
        try:
            serialized = serializer(key)
        except Exception as exc:
            raise SerializerError(f"Key serializer of store {store} raised: {exc}") from exc
        if not isinstance(serialized, str):
            raise SerializerError(
                f"Key serializer of store {store} did not return a string; "
                f"received {type(serialized).__name__}"
            )
        return serialized

    def shape(self, store: int) -> Shape:
        self.validate(store)
        return self.shapes[store]

    # --- Watchers ---

    def watch(self, store: int, watcher: Watcher) -> WatchHandle:
        """Append a watcher to a store. Watchers fire in the order added."""
        self.validate(store)
        watchers = self.watchers.setdefault(store, [])
        watchers.append(watcher)
        return WatchHandle(store, watchers, watcher)

    def watchers_of(self, store: int) -> list[Watcher]:
        return list(self.watchers.get(store, ()))
