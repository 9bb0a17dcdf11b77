"""Dispatch of channel messages to the AI or image proxy.

A message is routed when it is posted in the guild's AI channel or image
channel (see :class:`~routebot.routing.store.RoutingStore`).  When a channel
is configured for both, AI takes precedence.

Usage::

    router = MessageRouter(store, completions, images, renderer)
    kind = await router.route(message)
"""

from __future__ import annotations

import logging
from typing import Any

import discord

from routebot.channels.formatter import ResponseRenderer
from routebot.channels.replies import MessageReply
from routebot.models.completion import CompletionClient
from routebot.models.imagegen import ImageClient, ImageGenerationError
from routebot.routing.store import RoutingKind, RoutingStore

log = logging.getLogger(__name__)

ROUTING_PRECEDENCE: tuple[RoutingKind, ...] = (RoutingKind.AI, RoutingKind.IMAGE)


async def generate_into(
    reply: Any,
    prompt: str,
    requester: Any,
    images: ImageClient,
    renderer: ResponseRenderer,
    *,
    automatic: bool = False,
) -> bool:
    """Run an image generation behind a placeholder reply.

    Sends the "generating" embed through *reply*, then replaces it with either
    the result or an error embed.  If Discord rejects the result (e.g. an
    unusable image URL), the placeholder still becomes the error embed.
    *reply* is an :class:`~routebot.channels.replies.InteractionReply` or
    :class:`~routebot.channels.replies.MessageReply`.

    Returns:
        ``True`` if an image was produced and delivered.
    """
    await reply.send(embed=renderer.image_progress(prompt, requester))
    try:
        result = await images.generate(prompt)
        await reply.edit(
            embed=renderer.image_result(result, prompt, requester, automatic=automatic),
            view=renderer.links(),
        )
    except (ImageGenerationError, discord.HTTPException) as exc:
        log.error("Error generating %simage: %s", "automatic " if automatic else "", exc)
        await reply.edit(embed=renderer.image_error(requester, automatic=automatic), view=None)
        return False
    return True


class MessageRouter:
    """Route guild messages according to the per-guild routing tables.

    Args:
        store: Routing tables to consult.
        completions: Client for the AI completion proxy.
        images: Client for the image generation proxy.
        renderer: Embed formatter for the replies.
    """

    def __init__(
        self,
        store: RoutingStore,
        completions: CompletionClient,
        images: ImageClient,
        renderer: ResponseRenderer,
    ) -> None:
        self.store = store
        self.completions = completions
        self.images = images
        self.renderer = renderer

    def kind_for(self, guild_id: int, channel_id: int) -> RoutingKind | None:
        """Which routing applies to *channel_id*, honouring AI precedence."""
        for kind in ROUTING_PRECEDENCE:
            if self.store.get(guild_id, kind) == channel_id:
                return kind
        return None

    async def route(self, message: discord.Message, reply: MessageReply | None = None) -> RoutingKind | None:
        """Handle *message* if it was posted in a routed channel.

        Args:
            message: The inbound message.
            reply: Tracker for the reply; created if not supplied.  Passing
                one lets the caller send a fallback if this raises.

        Returns:
            The routing kind that handled the message, or ``None``.
        """
        if message.author.bot or message.guild is None:
            return None

        kind = self.kind_for(message.guild.id, message.channel.id)
        if kind is None:
            return None

        reply = reply or MessageReply(message)
        if kind is RoutingKind.AI:
            await self._answer(message, reply)
        else:
            await generate_into(
                reply, message.content, message.author, self.images, self.renderer, automatic=True,
            )
        return kind

    async def _answer(self, message: discord.Message, reply: MessageReply) -> None:
        text = await self.completions.complete(message.content)
        await reply.send(embed=self.renderer.completion(text, message.author))
