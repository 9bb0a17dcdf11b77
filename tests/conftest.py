"""Shared fixtures for the routebot test suite."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from routebot.channels.formatter import ResponseRenderer
from routebot.routing.handler import RoutingCommandHandler
from routebot.routing.permissions import CommandPermissionGuard
from routebot.routing.store import RoutingStore

GUILD_ID = 1001
GENERAL = 2001
RANDOM = 2002
ART = 2003


def _member(user_id=500, name="alice", **perms):
    """A guild member holding the given permission flags."""
    member = MagicMock(spec=discord.Member)
    member.id = user_id
    member.name = name
    member.bot = False
    member.guild_permissions = discord.Permissions(**perms)
    member.display_avatar.url = "https://cdn.example/avatar.png"
    return member


def _guild(guild_id=GUILD_ID, members=(), name="Test Guild"):
    guild = MagicMock()
    guild.id = guild_id
    guild.name = name
    lookup = {m.id: m for m in members}
    guild.get_member = MagicMock(side_effect=lookup.get)
    return guild


def _interaction(user, guild):
    interaction = MagicMock()
    interaction.extras = {}
    interaction.user = user
    interaction.guild = guild
    interaction.response.send_message = AsyncMock()
    interaction.response.is_done = MagicMock(return_value=False)
    interaction.edit_original_response = AsyncMock()
    interaction.original_response = AsyncMock()
    return interaction


def _message(content, author, guild, channel_id):
    message = MagicMock()
    message.id = 9000
    message.content = content
    message.author = author
    message.guild = guild
    message.channel.id = channel_id
    message.reply = AsyncMock(return_value=MagicMock(edit=AsyncMock()))
    return message


def _channel(channel_id):
    channel = MagicMock()
    channel.id = channel_id
    return channel


# Factory fixtures


@pytest.fixture
def make_member():
    return _member


@pytest.fixture
def make_guild():
    return _guild


@pytest.fixture
def make_interaction():
    return _interaction


@pytest.fixture
def make_message():
    return _message


@pytest.fixture
def make_channel():
    return _channel


@pytest.fixture
def store():
    return RoutingStore()


@pytest.fixture
def guard():
    return CommandPermissionGuard()


@pytest.fixture
def handler(store, guard):
    return RoutingCommandHandler(store, guard)


@pytest.fixture
def renderer():
    return ResponseRenderer(
        success_color=0x00FF00,
        error_color=0xFF0000,
        invite_url="https://discord.com/api/oauth2/authorize?client_id=42",
        support_url="https://discord.gg/example",
    )


@pytest.fixture
def admin():
    return _member(user_id=500, name="admin", administrator=True)


@pytest.fixture
def moderator():
    return _member(user_id=501, name="mod", manage_channels=True)


@pytest.fixture
def viewer():
    return _member(user_id=502, name="viewer", view_channel=True)


@pytest.fixture
def guild(admin, moderator, viewer):
    return _guild(members=(admin, moderator, viewer))


@pytest.fixture
def mock_completions():
    """Mock completion proxy client."""
    client = AsyncMock()
    client.complete = AsyncMock(return_value="Hello from the model")
    client.close = AsyncMock()
    return client


@pytest.fixture
def mock_images():
    """Mock image proxy client."""
    client = AsyncMock()
    client.generate = AsyncMock()
    client.close = AsyncMock()
    return client


@pytest.fixture
def fake_bot(store, guard, handler, renderer, mock_completions, mock_images):
    """Stand-in for RouteBot exposing the attributes the cogs use."""
    return SimpleNamespace(
        store=store,
        guard=guard,
        routing=handler,
        renderer=renderer,
        completions=mock_completions,
        images=mock_images,
        settings=SimpleNamespace(FEEDBACK_CHANNEL_ID=None, SUPPORT_MESSAGE="Ask in #help"),
        started_at=0.0,
        latency=0.05,
        get_channel=MagicMock(return_value=None),
    )
