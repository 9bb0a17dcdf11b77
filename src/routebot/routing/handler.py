"""Enable/remove routing commands and their user-facing outcomes.

The handler is the only writer of :class:`~routebot.routing.store.RoutingStore`.
Every mutation is authorized first; a denied request never touches the store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

import discord

from routebot.routing.permissions import ROUTING_ADMIN, CommandPermissionGuard, describe
from routebot.routing.store import RoutingKind, RoutingStore

log = logging.getLogger(__name__)


class OutcomeStatus(str, Enum):
    ENABLED = "enabled"
    REMOVED = "removed"
    NOT_ENABLED = "not_enabled"
    PERMISSION_DENIED = "permission_denied"


@dataclass(frozen=True, slots=True)
class _Wording:
    enabled: str
    disabled_previous: str
    removed: str
    not_enabled: str


_WORDING: dict[RoutingKind, _Wording] = {
    RoutingKind.AI: _Wording(
        enabled="AI has been enabled for {channel}",
        disabled_previous="⚠️ Previous AI channel {previous} has been disabled.",
        removed="AI has been removed from {channel}",
        not_enabled=(
            "AI is not enabled for {channel}. "
            "Use /channel setai first to enable AI for this channel."
        ),
    ),
    RoutingKind.IMAGE: _Wording(
        enabled="Automatic image generation has been enabled for {channel}",
        disabled_previous="⚠️ Previous image channel {previous} has been disabled.",
        removed="Automatic image generation has been removed from {channel}",
        not_enabled=(
            "Automatic image generation is not enabled for {channel}. "
            "Use /image set-image first to enable it for this channel."
        ),
    ),
}

_OVERLAP_NOTICE: dict[RoutingKind, str] = {
    RoutingKind.AI: "ℹ️ {channel} is also the image channel; AI replies take precedence there.",
    RoutingKind.IMAGE: "ℹ️ {channel} is also the AI channel; AI replies take precedence there.",
}


def mention(channel_id: int) -> str:
    """Discord channel mention markup."""
    return f"<#{channel_id}>"


@dataclass(frozen=True, slots=True)
class RoutingOutcome:
    """Result of a routing command, ready to be shown to the invoking user.

    Attributes:
        status: What happened.
        kind: Which routing table the command targeted.
        channel_id: The channel named in the command.
        message: User-facing text.
        previous_channel_id: Channel routed before an enable, if any.
    """

    status: OutcomeStatus
    kind: RoutingKind
    channel_id: int
    message: str
    previous_channel_id: int | None = None

    @property
    def ephemeral(self) -> bool:
        """Denials and "not enabled" notices are shown only to the invoker."""
        return self.status in (OutcomeStatus.NOT_ENABLED, OutcomeStatus.PERMISSION_DENIED)

    @property
    def disabled_channel_id(self) -> int | None:
        """The channel that stopped being routed because of this enable."""
        if self.previous_channel_id is None or self.previous_channel_id == self.channel_id:
            return None
        return self.previous_channel_id


class RoutingCommandHandler:
    """Apply enable/remove requests to a :class:`RoutingStore`.

    Args:
        store: The routing tables to mutate.
        guard: Permission checker used before every mutation.
    """

    def __init__(self, store: RoutingStore, guard: CommandPermissionGuard) -> None:
        self.store = store
        self.guard = guard

    def enable(
        self,
        user: discord.abc.User,
        guild: discord.Guild | None,
        channel_id: int,
        kind: RoutingKind,
    ) -> RoutingOutcome:
        """Route *kind* in the invoking guild to *channel_id*.

        The confirmation names the newly enabled channel and, when a
        different channel was routed before, the channel that was disabled.
        """
        denied = self._deny_unless_authorized(user, guild, channel_id, kind)
        if denied is not None:
            return denied

        wording = _WORDING[kind]
        previous = self.store.set(guild.id, kind, channel_id)

        lines = [wording.enabled.format(channel=mention(channel_id))]
        if previous is not None and previous != channel_id:
            lines.append(wording.disabled_previous.format(previous=mention(previous)))

        other = RoutingKind.IMAGE if kind is RoutingKind.AI else RoutingKind.AI
        if self.store.channels_for(guild.id).get(other) == channel_id:
            lines.append(_OVERLAP_NOTICE[kind].format(channel=mention(channel_id)))

        log.info(
            "%s routing enabled in guild %s: channel=%s previous=%s (by %s)",
            kind.value, guild.id, channel_id, previous, user.id,
        )
        return RoutingOutcome(
            status=OutcomeStatus.ENABLED,
            kind=kind,
            channel_id=channel_id,
            message="\n".join(lines),
            previous_channel_id=previous,
        )

    def remove(
        self,
        user: discord.abc.User,
        guild: discord.Guild | None,
        channel_id: int,
        kind: RoutingKind,
    ) -> RoutingOutcome:
        """Stop routing *kind* if it currently points at *channel_id*."""
        denied = self._deny_unless_authorized(user, guild, channel_id, kind)
        if denied is not None:
            return denied

        wording = _WORDING[kind]
        removed = self.store.remove(guild.id, kind, channel_id)
        if removed is None:
            return RoutingOutcome(
                status=OutcomeStatus.NOT_ENABLED,
                kind=kind,
                channel_id=channel_id,
                message=wording.not_enabled.format(channel=mention(channel_id)),
            )

        log.info("%s routing removed in guild %s: channel=%s (by %s)", kind.value, guild.id, channel_id, user.id)
        return RoutingOutcome(
            status=OutcomeStatus.REMOVED,
            kind=kind,
            channel_id=channel_id,
            message=wording.removed.format(channel=mention(channel_id)),
        )

    def _deny_unless_authorized(
        self,
        user: discord.abc.User,
        guild: discord.Guild | None,
        channel_id: int,
        kind: RoutingKind,
    ) -> RoutingOutcome | None:
        if guild is not None and self.guard.authorize(user, guild, ROUTING_ADMIN):
            return None
        log.info("Routing change denied for user %s (kind=%s, channel=%s)", getattr(user, "id", "?"), kind.value, channel_id)
        return RoutingOutcome(
            status=OutcomeStatus.PERMISSION_DENIED,
            kind=kind,
            channel_id=channel_id,
            message=(
                "You do not have permission to use this command. "
                f"Required permissions: {describe(ROUTING_ADMIN)}."
            ),
        )
