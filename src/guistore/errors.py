"""Store errors.

Validation errors (InvalidStore, InvalidKey, SerializerError) are raised
before any mutation happens. WatcherError is raised after a full dispatch,
once every watcher has seen the change.
"""

from __future__ import annotations


class StoreError(Exception):
    """Base class for all store errors."""


class InvalidStore(StoreError):
    """Store id is not an integer or was never issued."""


class InvalidKey(StoreError):
    """Key cannot be used with this store."""


class SerializerError(StoreError):
    """Key serializer raised or did not return a string."""


class RegistrationTimingError(StoreError):
    """register() called after the setup phase ended."""


class ReentrantMutationError(StoreError):
    """A watcher mutated a store that is still dispatching."""


class WatcherError(StoreError):
    """One or more watchers raised during dispatch.

    errors holds (watcher, exception) pairs in the order they failed.
    """

    def __init__(self, store: int, errors: list[tuple[object, BaseException]]) -> None:
        self.store = store
        self.errors = errors
        names = ", ".join(_name(w) for w, _ in errors)
        super().__init__(f"{len(errors)} watcher(s) of store {store} failed: {names}")


def _name(watcher: object) -> str:
    return getattr(watcher, "__qualname__", None) or repr(watcher)
