"""Data table — the plain structure that holds every store's data.

Maps store id -> scalar value, or store id -> {key: value} for keyed stores.
Nothing else lives here: ids, serializers and watchers belong to the
registry. Keeping data apart from behavior means the table can be
checkpointed by the host and re-attached after a restart as-is.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

# Key a bare scalar is moved under when a keyed write finds one.
LEGACY_VALUE_KEY = "_value"


class DataTable:
    """store id -> entry. Entries are created on first write."""

    __slots__ = ("entries",)

    def __init__(self, entries: dict[int, object] | None = None) -> None:
        self.entries: dict[int, object] = entries if entries is not None else {}

    def get(self, store: int) -> object:
        return self.entries.get(store)

    def put(self, store: int, value: object) -> None:
        self.entries[store] = value

    def drop(self, store: int) -> None:
        self.entries.pop(store, None)

    def mapping(self, store: int) -> dict | None:
        """The key mapping of a keyed store, or None if nothing was written."""
        data = self.entries.get(store)
        if data is None or isinstance(data, dict):
            return data
        return {LEGACY_VALUE_KEY: data}

    def keyed(self, store: int) -> dict:
        """The key mapping of a keyed store, created on demand.

        A bare scalar left by an older table is wrapped under LEGACY_VALUE_KEY.
        """
        data = self.entries.get(store)
        if isinstance(data, dict):
            return data
        if data is None:
            data = {}
        else:
            logger.warning(
                "Store %d held a bare value in a keyed table, moved under %r",
                store, LEGACY_VALUE_KEY,
            )
            data = {LEGACY_VALUE_KEY: data}
        self.entries[store] = data
        return data

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"DataTable({self.entries!r})"
