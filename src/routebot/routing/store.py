"""Per-guild channel routing tables.

Each guild may route at most one channel per :class:`RoutingKind`.  The
tables live in memory for the lifetime of the process; nothing is persisted.

Usage::

    store = RoutingStore()
    previous = store.set(guild_id, RoutingKind.AI, channel_id)
    store.get(guild_id, RoutingKind.AI)        # -> channel_id
    store.remove(guild_id, RoutingKind.AI, 42)  # -> None unless 42 is current
"""

from __future__ import annotations

import logging
from enum import Enum

log = logging.getLogger(__name__)


class RoutingKind(str, Enum):
    """What a routed channel does with incoming messages."""

    AI = "ai"
    IMAGE = "image"


class RoutingStore:
    """Two independent ``guild_id -> channel_id`` mappings, one per kind.

    All operations are synchronous and total.  Callers running on the event
    loop never observe a half-applied update; concurrent commands for the
    same guild and kind resolve as last-write-wins.
    """

    def __init__(self) -> None:
        self._tables: dict[RoutingKind, dict[int, int]] = {kind: {} for kind in RoutingKind}

    def get(self, guild_id: int, kind: RoutingKind) -> int | None:
        """Return the channel routed for *kind* in *guild_id*, if any."""
        return self._tables[kind].get(guild_id)

    def set(self, guild_id: int, kind: RoutingKind, channel_id: int) -> int | None:
        """Route *kind* to *channel_id*, replacing any existing entry.

        Returns:
            The previously routed channel id, or ``None`` if there was none.
        """
        table = self._tables[kind]
        previous = table.get(guild_id)
        table[guild_id] = channel_id
        log.debug("Routing set: guild=%s kind=%s channel=%s (previous=%s)", guild_id, kind.value, channel_id, previous)
        return previous

    def remove(self, guild_id: int, kind: RoutingKind, channel_id: int) -> int | None:
        """Clear the entry only if it currently points at *channel_id*.

        Returns:
            The removed channel id, or ``None`` when nothing was stored or the
            stored channel differs (the table is left untouched).
        """
        table = self._tables[kind]
        if table.get(guild_id) != channel_id:
            return None
        del table[guild_id]
        log.debug("Routing removed: guild=%s kind=%s channel=%s", guild_id, kind.value, channel_id)
        return channel_id

    def channels_for(self, guild_id: int) -> dict[RoutingKind, int]:
        """Snapshot of every configured kind for *guild_id*."""
        return {
            kind: table[guild_id]
            for kind, table in self._tables.items()
            if guild_id in table
        }
