"""Reply tracking for interactions and routed messages.

Every triggering event gets at most one reply.  That reply may be replaced
in place exactly once (the "generating..." placeholder becoming the final
result).  The top-level error handlers consult the tracked state before
sending a generic error so an event is never answered twice.

State machine::

    UNANSWERED --send()--> REPLIED --edit()--> EDITED
        |
        +--send_fallback()--> REPLIED
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

import discord

log = logging.getLogger(__name__)

_EXTRAS_KEY = "routebot.reply"


class ReplyState(str, Enum):
    UNANSWERED = "unanswered"
    REPLIED = "replied"
    EDITED = "edited"


class _TrackedReply:
    """Shared state machine; subclasses supply the delivery primitives."""

    def __init__(self) -> None:
        self.state: ReplyState = ReplyState.UNANSWERED

    def _expect(self, state: ReplyState, action: str) -> None:
        if self.state is not state:
            raise RuntimeError(f"Cannot {action} a reply in state {self.state.value!r}")

    def _can_fallback(self) -> bool:
        return self.state is ReplyState.UNANSWERED

    async def send(
        self,
        *,
        content: str | None = None,
        embed: discord.Embed | None = None,
        view: discord.ui.View | None = None,
        ephemeral: bool = False,
    ) -> None:
        """Send the one reply for this event."""
        self._expect(ReplyState.UNANSWERED, "send")
        await self._send(content=content, embed=embed, view=view, ephemeral=ephemeral)
        self.state = ReplyState.REPLIED

    async def edit(
        self,
        *,
        content: str | None = None,
        embed: discord.Embed | None = None,
        view: discord.ui.View | None = None,
    ) -> None:
        """Replace the reply sent by :meth:`send`.

        Allowed once it succeeds; a rejected edit leaves the reply editable.
        """
        self._expect(ReplyState.REPLIED, "edit")
        await self._edit(content=content, embed=embed, view=view)
        self.state = ReplyState.EDITED

    async def send_fallback(self, content: str) -> bool:
        """Send a generic (ephemeral where possible) notice if nothing was sent yet.

        Errors raised while sending are logged and swallowed.

        Returns:
            ``True`` if the notice was delivered.
        """
        if not self._can_fallback():
            return False
        try:
            await self._send(content=content, embed=None, view=None, ephemeral=True)
        except Exception as exc:  # noqa: BLE001
            log.error("Error sending fallback reply: %s", exc)
            return False
        self.state = ReplyState.REPLIED
        return True

    async def _send(self, **kwargs: Any) -> None:
        raise NotImplementedError

    async def _edit(self, **kwargs: Any) -> None:
        raise NotImplementedError


class InteractionReply(_TrackedReply):
    """Reply tracker for a slash-command :class:`discord.Interaction`.

    Use :func:`reply_for` rather than constructing this directly so that the
    command callback and the tree's error handler share one tracker.
    """

    def __init__(self, interaction: discord.Interaction) -> None:
        super().__init__()
        self._interaction = interaction

    def _can_fallback(self) -> bool:
        return super()._can_fallback() and not self._interaction.response.is_done()

    async def _send(
        self,
        *,
        content: str | None,
        embed: discord.Embed | None,
        view: discord.ui.View | None,
        ephemeral: bool,
    ) -> None:
        kwargs: dict[str, Any] = {"ephemeral": ephemeral}
        if content is not None:
            kwargs["content"] = content
        if embed is not None:
            kwargs["embed"] = embed
        if view is not None:
            kwargs["view"] = view
        await self._interaction.response.send_message(**kwargs)

    async def _edit(
        self,
        *,
        content: str | None,
        embed: discord.Embed | None,
        view: discord.ui.View | None,
    ) -> None:
        await self._interaction.edit_original_response(content=content, embed=embed, view=view)

    async def original_message(self) -> discord.InteractionMessage:
        """The message created by :meth:`send`."""
        if self.state is ReplyState.UNANSWERED:
            raise RuntimeError("No reply has been sent yet")
        return await self._interaction.original_response()


class MessageReply(_TrackedReply):
    """Reply tracker for a routed channel message.

    The first :meth:`send` replies to the triggering message and keeps a
    handle on the bot's message so that :meth:`edit` can update it in place.
    Messages cannot be ephemeral; the flag is ignored.
    """

    def __init__(self, trigger: discord.Message) -> None:
        super().__init__()
        self._trigger = trigger
        self.handle: discord.Message | None = None

    async def _send(
        self,
        *,
        content: str | None,
        embed: discord.Embed | None,
        view: discord.ui.View | None,
        ephemeral: bool,
    ) -> None:
        kwargs: dict[str, Any] = {}
        if content is not None:
            kwargs["content"] = content
        if embed is not None:
            kwargs["embed"] = embed
        if view is not None:
            kwargs["view"] = view
        self.handle = await self._trigger.reply(**kwargs)

    async def _edit(
        self,
        *,
        content: str | None,
        embed: discord.Embed | None,
        view: discord.ui.View | None,
    ) -> None:
        await self.handle.edit(content=content, embed=embed, view=view)


def reply_for(interaction: discord.Interaction) -> InteractionReply:
    """Return the tracker attached to *interaction*, creating it on first use."""
    reply = interaction.extras.get(_EXTRAS_KEY)
    if reply is None:
        reply = InteractionReply(interaction)
        interaction.extras[_EXTRAS_KEY] = reply
    return reply
