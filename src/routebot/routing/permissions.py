"""Capability checks for slash commands.

Commands declare the capabilities that are *sufficient* to run them; holding
any one of them is enough.  Lookups that fail for any reason deny access.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum

import discord

log = logging.getLogger(__name__)


class Capability(str, Enum):
    """Guild permissions the bot cares about.

    Values match the attribute names on :class:`discord.Permissions`.
    """

    ADMINISTRATOR = "administrator"
    MANAGE_CHANNELS = "manage_channels"
    VIEW_CHANNEL = "view_channel"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


ROUTING_ADMIN: frozenset[Capability] = frozenset(
    {Capability.ADMINISTRATOR, Capability.MANAGE_CHANNELS}
)
"""Required to change which channels are AI- or image-enabled."""

VIEWER: frozenset[Capability] = frozenset({Capability.VIEW_CHANNEL})
"""Required to generate images on demand."""


def capabilities_of(permissions: discord.Permissions) -> set[Capability]:
    """Return the subset of :class:`Capability` granted by *permissions*."""
    return {cap for cap in Capability if getattr(permissions, cap.value, False) is True}


def describe(required: Iterable[Capability]) -> str:
    """Human-readable ``"Administrator or Manage Channels"`` style list."""
    labels = sorted(cap.label for cap in required)
    if len(labels) <= 1:
        return "".join(labels)
    return f"{', '.join(labels[:-1])} or {labels[-1]}"


class CommandPermissionGuard:
    """Decide whether a user may run a command in a guild."""

    def authorize(
        self,
        user: discord.abc.User,
        guild: discord.Guild | None,
        required: Iterable[Capability],
    ) -> bool:
        """Return ``True`` iff *user* holds at least one *required* capability.

        An empty requirement always authorizes.  A missing guild, a member
        that cannot be resolved, or an error during the lookup denies.
        """
        required = frozenset(required)
        if not required:
            return True
        if guild is None:
            return False

        try:
            member = guild.get_member(user.id)
            if member is None and isinstance(user, discord.Member):
                member = user
            if member is None:
                log.info("Permission lookup failed: user %s not resolvable in guild %s", user.id, guild.id)
                return False
            granted = capabilities_of(member.guild_permissions)
        except (AttributeError, discord.DiscordException) as exc:
            log.warning("Permission lookup error for user %s: %s", getattr(user, "id", "?"), exc)
            return False

        return bool(granted & required)
