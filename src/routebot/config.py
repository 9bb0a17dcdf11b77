"""Central configuration for routebot.

All settings are loaded from environment variables (with ``.env`` file support
via *python-dotenv*).  Validation and type coercion are handled by
``pydantic-settings``.

Usage::

    from routebot.config import get_settings

    settings = get_settings()
    print(settings.DISCORD_APPLICATION_ID)

The :func:`get_settings` helper creates the :class:`RouteBotSettings`
singleton lazily so that importing this module never triggers validation
before the caller has had a chance to load a ``.env`` file or populate the
environment.
"""

from __future__ import annotations

import functools
import logging
import os
from pathlib import Path
from typing import Any, ClassVar

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Canonical .env locations (checked in order of priority).
ENV_PATHS: list[str] = ["config/.env", ".env"]

_INVITE_URL_TEMPLATE: str = (
    "https://discord.com/api/oauth2/authorize"
    "?client_id={client_id}&permissions=8&scope=bot%20applications.commands"
)

# ---------------------------------------------------------------------------
# Settings model
# ---------------------------------------------------------------------------


class RouteBotSettings(BaseSettings):
    """Validated configuration for the bot process.

    Required fields (no defaults):
        ``DISCORD_TOKEN``, ``DISCORD_APPLICATION_ID``

    Everything else carries a default so the bot can start with just those
    two values.
    """

    model_config = SettingsConfigDict(
        # .env loading is handled by load_dotenv() in __main__.py.
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Required -- no defaults
    # ------------------------------------------------------------------
    DISCORD_TOKEN: str = Field(
        ...,
        description="Discord bot token from the Developer Portal.",
    )
    DISCORD_APPLICATION_ID: int = Field(
        ...,
        description="Application (client) id, used for command sync and invite links.",
    )

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------
    SUCCESS_COLOR: int = Field(
        default=0x57F287,
        description="Embed colour for successful replies (``#RRGGBB``).",
    )
    ERROR_COLOR: int = Field(
        default=0xED4245,
        description="Embed colour for error replies (``#RRGGBB``).",
    )

    # ------------------------------------------------------------------
    # Feedback / support
    # ------------------------------------------------------------------
    FEEDBACK_CHANNEL_ID: int | None = Field(
        default=None,
        description="Channel that receives ``/bot feedback`` relays.  Unset disables relaying.",
    )
    SUPPORT_MESSAGE: str = Field(
        default="Need help? Join the support server using the button below or contact the bot owner.",
        description="Text shown by ``/bot support``.",
    )
    SUPPORT_SERVER_URL: str = Field(
        default="https://discord.gg/Zg2XkS5hq9",
        description="Invite link used for the \"Join Server\" button.",
    )

    # ------------------------------------------------------------------
    # Upstream services
    # ------------------------------------------------------------------
    AI_ENDPOINT_URL: str = Field(
        default="https://llama-ai-khaki.vercel.app/api/llama/chat",
        description="Chat completion proxy, queried with ``?prompt=``.",
    )
    IMAGE_ENDPOINT_URL: str = Field(
        default="http://67.220.85.146:6207/image",
        description="Image generation proxy, queried with ``?prompt=``.",
    )
    IMAGE_API_KEY: str | None = Field(
        default=None,
        description="Value of the ``x-api-key`` header sent to the image proxy.",
    )

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @field_validator("SUCCESS_COLOR", "ERROR_COLOR", mode="before")
    @classmethod
    def _parse_hex_color(cls, value: Any) -> int:
        """Accept ``#RRGGBB`` / ``RRGGBB`` strings as well as plain integers."""
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            text = value.strip().removeprefix("#").removeprefix("0x")
            try:
                color = int(text, 16)
            except ValueError:
                raise ValueError(f"Invalid hex colour: {value!r}") from None
            if not 0 <= color <= 0xFFFFFF:
                raise ValueError(f"Colour out of range: {value!r}")
            return color
        raise ValueError(f"Colour must be a hex string or int, got {type(value).__name__}")

    @field_validator("FEEDBACK_CHANNEL_ID", "IMAGE_API_KEY", mode="before")
    @classmethod
    def _blank_is_unset(cls, value: Any) -> Any:
        """Treat ``FEEDBACK_CHANNEL_ID=`` (empty) in a .env file as unset."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def invite_url(self) -> str:
        """OAuth2 URL that adds the bot (with slash commands) to a server."""
        return _INVITE_URL_TEMPLATE.format(client_id=self.DISCORD_APPLICATION_ID)

    # ------------------------------------------------------------------
    # Repr safety -- redact secrets in logs / debug output
    # ------------------------------------------------------------------

    _SENSITIVE_FIELDS: ClassVar[set[str]] = {"DISCORD_TOKEN", "IMAGE_API_KEY"}

    def __repr__(self) -> str:
        fields = []
        for name in type(self).model_fields:
            val = getattr(self, name)
            if name in self._SENSITIVE_FIELDS:
                val = "***" if val else None
            fields.append(f"{name}={val!r}")
        return f"RouteBotSettings({', '.join(fields)})"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def find_env_file() -> Path | None:
    """Return the first existing ``.env`` file from :data:`ENV_PATHS`."""
    for candidate in ENV_PATHS:
        p = Path(candidate)
        if p.is_file():
            return p
    return None


def has_config() -> bool:
    """Return ``True`` if the required keys are in the environment or a ``.env`` file."""
    required = ("DISCORD_TOKEN", "DISCORD_APPLICATION_ID")
    if all(os.environ.get(key) for key in required):
        return True
    env_file = find_env_file()
    if env_file is None:
        return False
    text = env_file.read_text(encoding="utf-8", errors="replace")
    present = {
        line.split("=", 1)[0].strip()
        for line in text.splitlines()
        if "=" in line and line.split("=", 1)[1].strip()
    }
    return all(os.environ.get(key) or key in present for key in required)


# ---------------------------------------------------------------------------
# Lazy singleton accessor
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=1)
def get_settings() -> RouteBotSettings:
    """Return the global :class:`RouteBotSettings` singleton.

    Raises:
        pydantic.ValidationError: If required settings are missing or any
            value fails validation.
    """
    logger.debug("Initialising RouteBotSettings from environment.")
    return RouteBotSettings()  # type: ignore[call-arg]
