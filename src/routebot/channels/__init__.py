"""Message routing, reply tracking and embed formatting.

Public API:
    :class:`MessageRouter` -- routes channel messages to the AI or image proxy.
    :class:`ResponseRenderer` -- formats every reply as a Discord embed.
    :func:`reply_for` -- the reply tracker for an interaction.
"""

from routebot.channels.formatter import ResponseRenderer
from routebot.channels.replies import InteractionReply, MessageReply, ReplyState, reply_for
from routebot.channels.router import MessageRouter, generate_into

__all__ = [
    "InteractionReply",
    "MessageReply",
    "MessageRouter",
    "ReplyState",
    "ResponseRenderer",
    "generate_into",
    "reply_for",
]
