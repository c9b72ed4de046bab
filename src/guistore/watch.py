"""WatchHandle — disposable handle for a watcher subscription.

Returned by watch(). dispose() removes the watcher from its store; the
remaining watchers keep their registration order.
"""

from __future__ import annotations

from typing import Callable

Watcher = Callable[[object, "str | None"], None]


class WatchHandle:
    """Disposable handle for one watcher on one store."""

    __slots__ = ("_watchers", "_watcher", "_store", "_disposed")

    def __init__(self, store: int, watchers: list[Watcher], watcher: Watcher) -> None:
        self._store = store
        self._watchers = watchers
        self._watcher = watcher
        self._disposed = False

    @property
    def store(self) -> int:
        return self._store

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """Stop calling the watcher. Safe to call twice."""
        if self._disposed:
            return
        self._disposed = True
        try:
            self._watchers.remove(self._watcher)
        except ValueError:
            pass  # already removed

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else "active"
        return f"WatchHandle(store={self._store}, {state})"
