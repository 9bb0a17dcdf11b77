"""Async client for the image generation proxy.

Unlike the completion client, failures here propagate as
:class:`ImageGenerationError` so the caller can replace its "generating..."
placeholder with an error reply.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import aiohttp

logger = logging.getLogger(__name__)


class ImageGenerationError(Exception):
    """Raised when the image proxy fails or returns an unusable payload.

    Attributes:
        message: Human-readable error description.
        status_code: HTTP status of the failed response, if one was received.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(
            f"Image generation failed"
            f"{f' (HTTP {status_code})' if status_code is not None else ''}: {message}"
        )


@dataclass(frozen=True, slots=True)
class ImageResult:
    """A generated image as reported by the proxy.

    Attributes:
        image_url: Where the generated image can be fetched.
        prompt: Prompt echoed (possibly rewritten) by the proxy.
        image_id: Proxy-side identifier.
        status: Proxy-reported status string.
        duration: Proxy-reported generation time, in whatever unit it uses.
    """

    image_url: str
    prompt: str | None = None
    image_id: str | None = None
    status: str | None = None
    duration: str | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> ImageResult:
        """Validate and convert the proxy's JSON body.

        Raises:
            ImageGenerationError: If *payload* is not an object or lacks an
                image URL.
        """
        if not isinstance(payload, dict):
            raise ImageGenerationError(f"Expected a JSON object, got {type(payload).__name__}")
        image_url = payload.get("image")
        if not isinstance(image_url, str) or not image_url:
            raise ImageGenerationError("Response carried no image URL")
        return cls(
            image_url=image_url,
            prompt=_optional_text(payload.get("prompt")),
            image_id=_optional_text(payload.get("imageId")),
            status=_optional_text(payload.get("status")),
            duration=_optional_text(payload.get("duration")),
        )


def _optional_text(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


class ImageClient:
    """GET-based client for the image proxy.

    Args:
        base_url: Endpoint queried as ``{base_url}?prompt=...``.
        api_key: Sent as the ``x-api-key`` header when set.
    """

    def __init__(self, base_url: str, api_key: str | None = None) -> None:
        self._base_url: str = base_url
        self._api_key: str | None = api_key
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> ImageClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _get_headers(self) -> dict[str, str]:
        return {"x-api-key": self._api_key} if self._api_key else {}

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers=self._get_headers(),
                timeout=aiohttp.ClientTimeout(total=None),
            )
        return self._session

    async def generate(self, prompt: str) -> ImageResult:
        """Generate an image for *prompt*.

        Raises:
            ImageGenerationError: On transport errors, HTTP errors, invalid
                JSON or a payload without an image URL.
        """
        try:
            session = await self._ensure_session()
            async with session.get(self._base_url, params={"prompt": prompt}) as resp:
                if resp.status >= 400:
                    raise ImageGenerationError(await resp.text(), status_code=resp.status)
                payload = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            logger.error("Error calling image proxy: %s", exc)
            raise ImageGenerationError(str(exc) or type(exc).__name__) from exc

        result = ImageResult.from_payload(payload)
        logger.debug("Image generated: id=%s status=%s", result.image_id, result.status)
        return result

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
