"""``/channel`` commands: choose the guild's AI channel.

Provides ``/channel setai <channel>`` and ``/channel setai-remove <channel>``.
Both require Administrator or Manage Channels.

Usage::

    # In bot startup:
    await bot.load_extension("routebot.commands.channel")
"""

from __future__ import annotations

import logging

import discord
from discord import app_commands
from discord.ext import commands

from routebot.channels.formatter import ResponseRenderer
from routebot.channels.replies import reply_for
from routebot.routing.handler import OutcomeStatus, RoutingOutcome
from routebot.routing.store import RoutingKind

log = logging.getLogger(__name__)


async def send_outcome(
    interaction: discord.Interaction,
    outcome: RoutingOutcome,
    renderer: ResponseRenderer,
) -> None:
    """Deliver a routing outcome as the interaction's reply."""
    reply = reply_for(interaction)
    if outcome.status is OutcomeStatus.PERMISSION_DENIED:
        await reply.send(embed=renderer.permission_denied(outcome.message, interaction.user), ephemeral=True)
        return
    await reply.send(content=outcome.message, ephemeral=outcome.ephemeral)


class ChannelCommands(commands.Cog):
    """AI channel management.

    Attributes:
        bot: The parent bot; supplies the routing handler and renderer.
    """

    channel = app_commands.Group(
        name="channel",
        description="Channel management commands",
        default_permissions=discord.Permissions(manage_channels=True),
    )

    def __init__(self, bot: commands.Bot) -> None:
        self.bot = bot

    @channel.command(name="setai", description="Enable AI for a channel")
    @app_commands.describe(channel="The channel to enable AI for")
    async def setai(self, interaction: discord.Interaction, channel: discord.abc.GuildChannel) -> None:
        outcome = self.bot.routing.enable(interaction.user, interaction.guild, channel.id, RoutingKind.AI)
        await send_outcome(interaction, outcome, self.bot.renderer)

    @channel.command(name="setai-remove", description="Remove AI from a channel")
    @app_commands.describe(channel="The channel to remove AI from")
    async def setai_remove(self, interaction: discord.Interaction, channel: discord.abc.GuildChannel) -> None:
        outcome = self.bot.routing.remove(interaction.user, interaction.guild, channel.id, RoutingKind.AI)
        await send_outcome(interaction, outcome, self.bot.renderer)


async def setup(bot: commands.Bot) -> None:
    """Load the ChannelCommands cog into the bot."""
    await bot.add_cog(ChannelCommands(bot))
