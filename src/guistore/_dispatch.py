"""Watcher dispatch — synchronous fan-out with run-all-then-report.

Uses contextvars to track which stores are dispatching right now, so a
watcher that writes back into a store it is reacting to can be caught
before it recurses. Store ids repeat across managers, so each entry is
(owner, store id) where owner identifies the issuing registry.
"""

from __future__ import annotations

import contextvars
import logging
from typing import Iterable

from guistore.errors import ReentrantMutationError, WatcherError
from guistore.watch import Watcher

logger = logging.getLogger(__name__)

# (owner, store id) pairs whose watchers are running in the current call chain.
dispatching: contextvars.ContextVar[frozenset[tuple[int, int]]] = contextvars.ContextVar(
    "dispatching", default=frozenset()
)


def guard(owner: int, store: int) -> None:
    """Refuse a mutation of a store whose watchers are still running."""
    if (owner, store) in dispatching.get():
        raise ReentrantMutationError(
            f"Store {store} was mutated by one of its own watchers"
        )


def run(owner: int, store: int, watchers: Iterable[Watcher], value: object, key: str | None) -> list:
    """Call every watcher with (value, key). Returns the failures.

    A failing watcher is logged and skipped; the rest still run.
    """
    failures: list[tuple[Watcher, BaseException]] = []
    token = dispatching.set(dispatching.get() | {(owner, store)})
    try:
        for watcher in watchers:
            try:
                watcher(value, key)
            except Exception as exc:
                logger.exception("Watcher %r of store %d failed", watcher, store)
                failures.append((watcher, exc))
    finally:
        dispatching.reset(token)
    return failures


def raise_failures(store: int, failures: list) -> None:
    """Report a dispatch with failures as one WatcherError."""
    if failures:
        raise WatcherError(store, failures) from failures[0][1]
