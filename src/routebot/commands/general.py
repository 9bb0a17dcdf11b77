"""``/bot`` utility commands.

Provides ``/bot uptime``, ``/bot ping``, ``/bot help``,
``/bot feedback <message>``, ``/bot support`` and ``/bot invite``.  None of
them need special permissions.

Usage::

    # In bot startup:
    await bot.load_extension("routebot.commands.general")
"""

from __future__ import annotations

import logging
import time

import discord
from discord import app_commands
from discord.ext import commands

from routebot.channels.replies import reply_for

log = logging.getLogger(__name__)


class BotCommands(commands.Cog):
    """Bot information and feedback commands.

    Attributes:
        bot: The parent bot; supplies settings, renderer and start time.
    """

    group = app_commands.Group(name="bot", description="Bot management commands")

    def __init__(self, bot: commands.Bot) -> None:
        self.bot = bot

    # ------------------------------------------------------------------
    # /bot uptime
    # ------------------------------------------------------------------

    @group.command(name="uptime", description="Show bot uptime")
    async def uptime(self, interaction: discord.Interaction) -> None:
        elapsed = time.monotonic() - self.bot.started_at
        await reply_for(interaction).send(embed=self.bot.renderer.uptime(elapsed, interaction.user))

    # ------------------------------------------------------------------
    # /bot ping -- reply first, then edit in the measured latency
    # ------------------------------------------------------------------

    @group.command(name="ping", description="Check bot latency")
    async def ping(self, interaction: discord.Interaction) -> None:
        reply = reply_for(interaction)
        await reply.send(content="Pinging...")
        sent = await reply.original_message()
        round_trip_ms = (sent.created_at - interaction.created_at).total_seconds() * 1000
        gateway_ms = self.bot.latency * 1000
        await reply.edit(content=None, embed=self.bot.renderer.ping(round_trip_ms, gateway_ms, interaction.user))

    # ------------------------------------------------------------------
    # /bot help
    # ------------------------------------------------------------------

    @group.command(name="help", description="Show bot help information")
    async def help(self, interaction: discord.Interaction) -> None:
        await reply_for(interaction).send(embed=self.bot.renderer.help(interaction.user))

    # ------------------------------------------------------------------
    # /bot feedback
    # ------------------------------------------------------------------

    @group.command(name="feedback", description="Send feedback to the bot developers")
    @app_commands.describe(message="Your feedback message")
    async def feedback(self, interaction: discord.Interaction, message: str) -> None:
        channel_id = self.bot.settings.FEEDBACK_CHANNEL_ID
        if channel_id is not None:
            channel = self.bot.get_channel(channel_id)
            if not isinstance(channel, discord.abc.Messageable):
                log.warning("Feedback channel %s not found or cannot receive messages", channel_id)
            else:
                guild_name = interaction.guild.name if interaction.guild else None
                embed = self.bot.renderer.feedback(message, interaction.user, guild_name)
                try:
                    await channel.send(embed=embed)
                except discord.HTTPException as exc:
                    log.error("Error sending feedback: %s", exc)

        await reply_for(interaction).send(
            content="Thank you for your feedback! It has been sent to our team.",
            ephemeral=True,
        )

    # ------------------------------------------------------------------
    # /bot support, /bot invite
    # ------------------------------------------------------------------

    @group.command(name="support", description="Get support information")
    async def support(self, interaction: discord.Interaction) -> None:
        embed = self.bot.renderer.support(self.bot.settings.SUPPORT_MESSAGE, interaction.user)
        await reply_for(interaction).send(embed=embed)

    @group.command(name="invite", description="Get bot invite link")
    async def invite(self, interaction: discord.Interaction) -> None:
        await reply_for(interaction).send(embed=self.bot.renderer.invite(interaction.user))


async def setup(bot: commands.Bot) -> None:
    """Load the BotCommands cog into the bot."""
    await bot.add_cog(BotCommands(bot))
