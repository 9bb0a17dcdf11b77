"""Per-guild channel routing: storage, permission checks and mutations.

Public API:
    :class:`RoutingStore` -- the two in-memory routing tables.
    :class:`RoutingKind` -- AI or image routing.
    :class:`CommandPermissionGuard` -- capability checks for commands.
    :class:`RoutingCommandHandler` -- enable/remove with user-facing outcomes.
"""

from routebot.routing.handler import OutcomeStatus, RoutingCommandHandler, RoutingOutcome
from routebot.routing.permissions import (
    ROUTING_ADMIN,
    VIEWER,
    Capability,
    CommandPermissionGuard,
)
from routebot.routing.store import RoutingKind, RoutingStore

__all__ = [
    "Capability",
    "CommandPermissionGuard",
    "OutcomeStatus",
    "ROUTING_ADMIN",
    "RoutingCommandHandler",
    "RoutingKind",
    "RoutingOutcome",
    "RoutingStore",
    "VIEWER",
]
