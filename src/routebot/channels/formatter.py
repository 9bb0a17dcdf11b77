"""Discord embed formatting for every reply the bot sends.

Rendering is pure: no method here performs I/O or raises.  Optional values
that are missing render as ``"N/A"``.

Usage::

    from routebot.channels.formatter import ResponseRenderer

    renderer = ResponseRenderer(success_color=0x57F287, error_color=0xED4245)
    embed = renderer.completion("Hello!", requester=message.author)
    await message.reply(embed=embed)
"""

from __future__ import annotations

from typing import Any

import discord

from routebot.models.imagegen import ImageResult

# Discord hard limits
_EMBED_DESCRIPTION_LIMIT: int = 4096
_EMBED_FIELD_LIMIT: int = 1024

PLACEHOLDER: str = "N/A"

HELP_SECTIONS: tuple[tuple[str, str], ...] = (
    (
        "Channel Commands",
        "`/channel setai <#channel>` - Enable AI for a channel\n"
        "`/channel setai-remove <#channel>` - Remove AI from a channel",
    ),
    (
        "Image Commands",
        "`/image generate <prompt>` - Generate an image from text\n"
        "`/image set-image <#channel>` - Enable auto image generation\n"
        "`/image remove-image <#channel>` - Remove auto image generation",
    ),
    (
        "Bot Commands",
        "`/bot ping` - Check bot latency\n"
        "`/bot uptime` - Show bot uptime\n"
        "`/bot help` - Show this help menu\n"
        "`/bot feedback <message>` - Send feedback\n"
        "`/bot support` - Get support info\n"
        "`/bot invite` - Get invite link",
    ),
)


def or_placeholder(value: Any) -> str:
    """``str(value)``, or :data:`PLACEHOLDER` when *value* is missing."""
    if value is None or value == "":
        return PLACEHOLDER
    return str(value)


def format_uptime(seconds: float) -> str:
    """Format a duration as ``"{d}d {h}h {m}m {s}s"``."""
    total = max(int(seconds), 0)
    days, rest = divmod(total, 86_400)
    hours, rest = divmod(rest, 3_600)
    minutes, secs = divmod(rest, 60)
    return f"{days}d {hours}h {minutes}m {secs}s"


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


class ResponseRenderer:
    """Build the embeds and link views used in replies.

    Args:
        success_color: Accent colour for normal replies.
        error_color: Accent colour for errors and denials.
        invite_url: OAuth2 link for the "Invite Bot" button.
        support_url: Server invite for the "Join Server" button.
    """

    def __init__(
        self,
        success_color: int,
        error_color: int,
        invite_url: str = "",
        support_url: str = "",
    ) -> None:
        self.success_color = success_color
        self.error_color = error_color
        self.invite_url = invite_url
        self.support_url = support_url

    # ------------------------------------------------------------------
    # Building blocks
    # ------------------------------------------------------------------

    def _embed(self, *, error: bool = False, **kwargs: Any) -> discord.Embed:
        return discord.Embed(
            color=self.error_color if error else self.success_color,
            timestamp=discord.utils.utcnow(),
            **kwargs,
        )

    @staticmethod
    def _footer(embed: discord.Embed, requester: Any, *, with_icon: bool = False) -> discord.Embed:
        name = getattr(requester, "name", None) or "unknown"
        icon_url = None
        if with_icon:
            avatar = getattr(requester, "display_avatar", None)
            icon_url = getattr(avatar, "url", None)
        embed.set_footer(text=f"Requested by: {name}", icon_url=icon_url)
        return embed

    @staticmethod
    def _prompt_block(prompt: str) -> str:
        return f"**Prompt:**\n```{prompt}```"

    # ------------------------------------------------------------------
    # AI completion
    # ------------------------------------------------------------------

    def completion(self, text: str, requester: Any) -> discord.Embed:
        """Embed carrying the completion proxy's answer."""
        embed = self._embed(description=_truncate(text, _EMBED_DESCRIPTION_LIMIT))
        return self._footer(embed, requester)

    # ------------------------------------------------------------------
    # Image generation
    # ------------------------------------------------------------------

    def image_progress(self, prompt: str, requester: Any) -> discord.Embed:
        """Provisional embed shown while an image is being generated."""
        embed = self._embed(
            title="⏳ Generating Image...",
            description=_truncate(
                f"{self._prompt_block(prompt)}\n\n🎨 Please wait while we generate your image...",
                _EMBED_DESCRIPTION_LIMIT,
            ),
        )
        return self._footer(embed, requester, with_icon=True)

    def image_result(
        self,
        result: ImageResult | None,
        prompt: str,
        requester: Any,
        *,
        automatic: bool = False,
    ) -> discord.Embed:
        """Final embed for a generation, or the error embed if *result* is missing."""
        if result is None:
            return self.image_error(requester, automatic=automatic)

        embed = self._embed(
            title="🎨 Image Generate",
            description=_truncate(self._prompt_block(result.prompt or prompt), _EMBED_DESCRIPTION_LIMIT),
        )
        embed.add_field(
            name="Information",
            value=_truncate(
                f"**imageId:** {or_placeholder(result.image_id)}\n"
                f"**status:** {or_placeholder(result.status)}\n"
                f"**duration:** {or_placeholder(result.duration)}",
                _EMBED_FIELD_LIMIT,
            ),
            inline=False,
        )
        if result.image_url:
            embed.set_image(url=result.image_url)
        return self._footer(embed, requester, with_icon=True)

    def image_error(self, requester: Any, *, automatic: bool = False) -> discord.Embed:
        what = "generating the image automatically" if automatic else "generating the image"
        embed = self._embed(
            error=True,
            title="❌ Error",
            description=f"Sorry, there was an error {what}. Please try again later.",
        )
        return self._footer(embed, requester, with_icon=True)

    def links(self) -> discord.ui.View:
        """"Invite Bot" / "Join Server" buttons attached to image results.

        Must be called from within a running event loop.
        """
        view = discord.ui.View(timeout=None)
        if self.invite_url:
            view.add_item(discord.ui.Button(style=discord.ButtonStyle.link, label="Invite Bot", url=self.invite_url))
        if self.support_url:
            view.add_item(discord.ui.Button(style=discord.ButtonStyle.link, label="Join Server", url=self.support_url))
        return view

    # ------------------------------------------------------------------
    # Errors and denials
    # ------------------------------------------------------------------

    def permission_denied(self, message: str, requester: Any) -> discord.Embed:
        embed = self._embed(error=True, title="❌ Permission Denied", description=message)
        return self._footer(embed, requester)

    def server_only(self, requester: Any) -> discord.Embed:
        embed = self._embed(error=True, title="❌ Server Only", description="Commands only work in servers.")
        return self._footer(embed, requester)

    # ------------------------------------------------------------------
    # /bot utilities
    # ------------------------------------------------------------------

    def uptime(self, seconds: float, requester: Any) -> discord.Embed:
        embed = self._embed(title="⏰ Bot Uptime", description=format_uptime(seconds))
        return self._footer(embed, requester)

    def ping(self, round_trip_ms: float, gateway_ms: float, requester: Any) -> discord.Embed:
        embed = self._embed(title="🏓 Pong!")
        embed.add_field(name="Latency", value=f"{round(round_trip_ms)}ms", inline=True)
        embed.add_field(name="API Latency", value=f"{round(gateway_ms)}ms", inline=True)
        return self._footer(embed, requester)

    def help(self, requester: Any) -> discord.Embed:
        embed = self._embed(title="📋 Bot Commands")
        for name, value in HELP_SECTIONS:
            embed.add_field(name=name, value=value, inline=False)
        return self._footer(embed, requester)

    def feedback(self, message: str, requester: Any, guild_name: str | None) -> discord.Embed:
        """Embed relayed to the feedback channel."""
        embed = self._embed(title="💬 New Feedback")
        embed.add_field(name="User", value=f"{getattr(requester, 'name', 'unknown')} ({getattr(requester, 'id', '?')})", inline=True)
        embed.add_field(name="Server", value=guild_name or "DM", inline=True)
        embed.add_field(name="Message", value=_truncate(message, _EMBED_FIELD_LIMIT), inline=False)
        return self._footer(embed, requester)

    def support(self, text: str, requester: Any) -> discord.Embed:
        embed = self._embed(title="🛠️ Support", description=_truncate(text, _EMBED_DESCRIPTION_LIMIT))
        return self._footer(embed, requester)

    def invite(self, requester: Any) -> discord.Embed:
        embed = self._embed(
            title="🔗 Invite Bot",
            description=f"[Click here to invite the bot to your server]({self.invite_url})",
        )
        return self._footer(embed, requester)
