"""``/image`` commands: on-demand generation and the guild's image channel.

Provides ``/image generate <prompt>``, ``/image set-image <channel>`` and
``/image remove-image <channel>``.  Generation needs View Channel; changing
the image channel needs Administrator or Manage Channels.

Usage::

    # In bot startup:
    await bot.load_extension("routebot.commands.image")
"""

from __future__ import annotations

import logging

import discord
from discord import app_commands
from discord.ext import commands

from routebot.channels.replies import reply_for
from routebot.channels.router import generate_into
from routebot.commands.channel import send_outcome
from routebot.routing.permissions import VIEWER, describe
from routebot.routing.store import RoutingKind

log = logging.getLogger(__name__)


class ImageCommands(commands.Cog):
    """Image generation commands.

    Attributes:
        bot: The parent bot; supplies the image client, routing handler,
            permission guard and renderer.
    """

    image = app_commands.Group(
        name="image",
        description="Image generation commands",
        default_permissions=discord.Permissions(view_channel=True),
    )

    def __init__(self, bot: commands.Bot) -> None:
        self.bot = bot

    @image.command(name="generate", description="Generate an image from a text prompt")
    @app_commands.describe(prompt="The text prompt for image generation")
    async def generate(self, interaction: discord.Interaction, prompt: str) -> None:
        reply = reply_for(interaction)
        if not self.bot.guard.authorize(interaction.user, interaction.guild, VIEWER):
            message = (
                "You do not have permission to use this command. "
                f"Required permissions: {describe(VIEWER)}."
            )
            await reply.send(embed=self.bot.renderer.permission_denied(message, interaction.user), ephemeral=True)
            return

        await generate_into(reply, prompt, interaction.user, self.bot.images, self.bot.renderer)

    @image.command(name="set-image", description="Set a channel for automatic image generation")
    @app_commands.describe(channel="The channel to enable automatic image generation for")
    async def set_image(self, interaction: discord.Interaction, channel: discord.abc.GuildChannel) -> None:
        outcome = self.bot.routing.enable(interaction.user, interaction.guild, channel.id, RoutingKind.IMAGE)
        await send_outcome(interaction, outcome, self.bot.renderer)

    @image.command(name="remove-image", description="Remove a channel from automatic image generation")
    @app_commands.describe(channel="The channel to remove automatic image generation from")
    async def remove_image(self, interaction: discord.Interaction, channel: discord.abc.GuildChannel) -> None:
        outcome = self.bot.routing.remove(interaction.user, interaction.guild, channel.id, RoutingKind.IMAGE)
        await send_outcome(interaction, outcome, self.bot.renderer)


async def setup(bot: commands.Bot) -> None:
    """Load the ImageCommands cog into the bot."""
    await bot.add_cog(ImageCommands(bot))
