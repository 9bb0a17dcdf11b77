"""RouteBot: the Discord client that owns the routing state."""

from __future__ import annotations

import logging
import time

import discord
from discord import app_commands
from discord.ext import commands

from routebot.channels.formatter import ResponseRenderer
from routebot.channels.replies import MessageReply, reply_for
from routebot.channels.router import MessageRouter
from routebot.commands import COMMAND_EXTENSIONS
from routebot.config import RouteBotSettings, get_settings
from routebot.models.completion import CompletionClient
from routebot.models.imagegen import ImageClient
from routebot.routing.handler import RoutingCommandHandler
from routebot.routing.permissions import CommandPermissionGuard
from routebot.routing.store import RoutingStore

log = logging.getLogger(__name__)

COMMAND_ERROR_TEXT = "An error occurred while processing your command."
MESSAGE_ERROR_TEXT = "An error occurred while processing your message."


class RouteBotTree(app_commands.CommandTree):
    """Command tree that rejects DMs and catches unhandled command errors."""

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        if interaction.guild is not None:
            return True
        renderer: ResponseRenderer = interaction.client.renderer
        await reply_for(interaction).send(embed=renderer.server_only(interaction.user), ephemeral=True)
        return False

    async def on_error(
        self,
        interaction: discord.Interaction,
        error: app_commands.AppCommandError,
    ) -> None:
        command = getattr(interaction.command, "qualified_name", "unknown")
        log.error("Error handling interaction /%s", command, exc_info=error)
        await reply_for(interaction).send_fallback(COMMAND_ERROR_TEXT)


class RouteBot(commands.Bot):
    """Routes slash commands and channel messages to the AI and image proxies.

    Wires together:
    - the routing store, permission guard and command handler
    - the completion and image proxy clients
    - the message router and the response renderer

    Args:
        settings: Configuration; defaults to :func:`get_settings`.
    """

    def __init__(self, settings: RouteBotSettings | None = None) -> None:
        settings = settings or get_settings()

        intents = discord.Intents.default()
        intents.message_content = True
        intents.guilds = True

        super().__init__(
            # Required by commands.Bot; every command is an application command.
            command_prefix=commands.when_mentioned,
            intents=intents,
            help_command=None,
            tree_cls=RouteBotTree,
            application_id=settings.DISCORD_APPLICATION_ID,
        )

        # --- Config ---
        self.settings = settings
        self.started_at: float = time.monotonic()

        # --- Routing ---
        self.store = RoutingStore()
        self.guard = CommandPermissionGuard()
        self.routing = RoutingCommandHandler(self.store, self.guard)

        # --- Rendering ---
        self.renderer = ResponseRenderer(
            success_color=settings.SUCCESS_COLOR,
            error_color=settings.ERROR_COLOR,
            invite_url=settings.invite_url,
            support_url=settings.SUPPORT_SERVER_URL,
        )

        # --- Upstream proxies ---
        self.completions = CompletionClient(base_url=settings.AI_ENDPOINT_URL)
        self.images = ImageClient(base_url=settings.IMAGE_ENDPOINT_URL, api_key=settings.IMAGE_API_KEY)

        # --- Messages ---
        self.message_router = MessageRouter(self.store, self.completions, self.images, self.renderer)

    async def setup_hook(self) -> None:
        """Called after login, before the bot starts processing events."""
        for ext in COMMAND_EXTENSIONS:
            await self.load_extension(ext)
        log.info("Command cogs loaded")

        try:
            synced = await self.tree.sync()
            log.info("Synced %d application commands", len(synced))
        except discord.HTTPException:
            log.exception("Error registering application commands")

    async def on_ready(self) -> None:
        log.info("Logged in as %s (ID: %s) in %d guild(s)", self.user, self.user.id, len(self.guilds))

    async def on_message(self, message: discord.Message) -> None:
        """Route messages posted in AI- or image-enabled channels."""
        if message.author.bot:
            return

        reply = MessageReply(message)
        try:
            await self.message_router.route(message, reply)
        except Exception:
            log.exception("Error handling message %s in channel %s", message.id, message.channel.id)
            await reply.send_fallback(MESSAGE_ERROR_TEXT)

    async def close(self) -> None:
        """Clean shutdown."""
        log.info("Shutting down...")
        await self.completions.close()
        await self.images.close()
        await super().close()
