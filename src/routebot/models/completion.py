"""Async client for the chat completion proxy.

The proxy takes a single free-text prompt as a query parameter and answers
with an OpenAI-style body (``choices[0].message.content``).  The client never
raises: transport failures and empty answers are turned into fixed fallback
strings that are shown to the user as-is.

Usage::

    async with CompletionClient(base_url=settings.AI_ENDPOINT_URL) as client:
        text = await client.complete("Hello!")
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

logger = logging.getLogger(__name__)

FALLBACK_NO_CONTENT: str = "Sorry, I could not generate a response."
"""Returned when the proxy answered but carried no completion text."""

FALLBACK_ERROR: str = "Error occurred while processing your request."
"""Returned when the proxy could not be reached or returned garbage."""


def extract_completion(body: Any) -> str | None:
    """Pull ``choices[0].message.content`` out of a completion body.

    Returns ``None`` for any shape that does not carry non-empty text.
    """
    if not isinstance(body, dict):
        return None
    choices = body.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    if not isinstance(content, str) or not content.strip():
        return None
    return content


class CompletionClient:
    """GET-based client for the completion proxy.

    The HTTP session is created lazily on first use and reused for the
    lifetime of the client.  No local timeout is applied.

    Args:
        base_url: Endpoint queried as ``{base_url}?prompt=...``.
    """

    def __init__(self, base_url: str) -> None:
        self._base_url: str = base_url
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> CompletionClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=None),
            )
        return self._session

    async def complete(self, prompt: str) -> str:
        """Return the proxy's answer to *prompt*, or a fallback string."""
        try:
            session = await self._ensure_session()
            async with session.get(self._base_url, params={"prompt": prompt}) as resp:
                if resp.status >= 400:
                    logger.error("Completion proxy returned HTTP %d", resp.status)
                    return FALLBACK_ERROR
                body = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            logger.error("Error calling completion proxy: %s", exc)
            return FALLBACK_ERROR

        content = extract_completion(body)
        if content is None:
            logger.warning("Completion proxy answered without content")
            return FALLBACK_NO_CONTENT
        return content

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
