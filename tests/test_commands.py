"""Tests for the slash command cogs and top-level error handling."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from routebot.bot import COMMAND_ERROR_TEXT, MESSAGE_ERROR_TEXT, RouteBot, RouteBotTree
from routebot.channels.replies import ReplyState, reply_for
from routebot.commands.channel import ChannelCommands
from routebot.commands.general import BotCommands
from routebot.commands.image import ImageCommands
from routebot.models.imagegen import ImageGenerationError, ImageResult
from routebot.routing.store import RoutingKind

GUILD_ID = 1001
GENERAL = 2001
RANDOM = 2002
ART = 2003


def _sent(interaction):
    """Keyword arguments of the single send_message call."""
    interaction.response.send_message.assert_awaited_once()
    return interaction.response.send_message.await_args.kwargs


# ---------------------------------------------------------------------------
# /channel
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_scenario_a_setai_on_empty_guild(fake_bot, store, guild, admin, make_interaction, make_channel):
    cog = ChannelCommands(fake_bot)
    interaction = make_interaction(admin, guild)

    await ChannelCommands.setai.callback(cog, interaction, make_channel(GENERAL))

    assert store.get(GUILD_ID, RoutingKind.AI) == GENERAL
    kwargs = _sent(interaction)
    assert kwargs["content"] == f"AI has been enabled for <#{GENERAL}>"
    assert kwargs["ephemeral"] is False


@pytest.mark.asyncio
async def test_scenario_b_setai_replaces_previous(fake_bot, store, guild, admin, make_interaction, make_channel):
    store.set(GUILD_ID, RoutingKind.AI, GENERAL)
    cog = ChannelCommands(fake_bot)
    interaction = make_interaction(admin, guild)

    await ChannelCommands.setai.callback(cog, interaction, make_channel(RANDOM))

    assert store.get(GUILD_ID, RoutingKind.AI) == RANDOM
    content = _sent(interaction)["content"]
    assert f"<#{RANDOM}>" in content
    assert f"Previous AI channel <#{GENERAL}> has been disabled." in content


@pytest.mark.asyncio
async def test_scenario_d_unauthorized_setai_remove(fake_bot, store, guild, admin, viewer, make_interaction, make_channel):
    store.set(GUILD_ID, RoutingKind.AI, GENERAL)
    cog = ChannelCommands(fake_bot)
    interaction = make_interaction(viewer, guild)

    await ChannelCommands.setai_remove.callback(cog, interaction, make_channel(GENERAL))

    assert store.get(GUILD_ID, RoutingKind.AI) == GENERAL
    kwargs = _sent(interaction)
    assert kwargs["ephemeral"] is True
    assert kwargs["embed"].title == "❌ Permission Denied"


@pytest.mark.asyncio
async def test_setai_remove_by_moderator(fake_bot, store, guild, moderator, make_interaction, make_channel):
    store.set(GUILD_ID, RoutingKind.AI, GENERAL)
    cog = ChannelCommands(fake_bot)
    interaction = make_interaction(moderator, guild)

    await ChannelCommands.setai_remove.callback(cog, interaction, make_channel(GENERAL))

    assert store.get(GUILD_ID, RoutingKind.AI) is None
    assert _sent(interaction)["content"] == f"AI has been removed from <#{GENERAL}>"


# ---------------------------------------------------------------------------
# /image
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_scenario_c_remove_image_wrong_channel(fake_bot, store, guild, admin, make_interaction, make_channel):
    store.set(GUILD_ID, RoutingKind.IMAGE, ART)
    cog = ImageCommands(fake_bot)
    interaction = make_interaction(admin, guild)

    await ImageCommands.remove_image.callback(cog, interaction, make_channel(GENERAL))

    assert store.get(GUILD_ID, RoutingKind.IMAGE) == ART
    kwargs = _sent(interaction)
    assert kwargs["ephemeral"] is True
    assert f"Automatic image generation is not enabled for <#{GENERAL}>" in kwargs["content"]


@pytest.mark.asyncio
async def test_set_image_enables_channel(fake_bot, store, guild, moderator, make_interaction, make_channel):
    cog = ImageCommands(fake_bot)
    interaction = make_interaction(moderator, guild)

    await ImageCommands.set_image.callback(cog, interaction, make_channel(ART))

    assert store.get(GUILD_ID, RoutingKind.IMAGE) == ART
    assert "Automatic image generation has been enabled" in _sent(interaction)["content"]


@pytest.mark.asyncio
async def test_generate_edits_placeholder_with_result(fake_bot, mock_images, guild, viewer, make_interaction):
    mock_images.generate.return_value = ImageResult(image_url="https://img.example/g.png", status="ok")
    cog = ImageCommands(fake_bot)
    interaction = make_interaction(viewer, guild)

    await ImageCommands.generate.callback(cog, interaction, "a lighthouse")

    mock_images.generate.assert_awaited_once_with("a lighthouse")
    assert _sent(interaction)["embed"].title == "⏳ Generating Image..."
    interaction.edit_original_response.assert_awaited_once()
    edited = interaction.edit_original_response.await_args.kwargs
    assert edited["embed"].title == "🎨 Image Generate"
    assert edited["view"] is not None
    assert reply_for(interaction).state is ReplyState.EDITED


@pytest.mark.asyncio
async def test_generate_failure_edits_placeholder_with_error(fake_bot, mock_images, guild, viewer, make_interaction):
    mock_images.generate.side_effect = ImageGenerationError("timeout")
    cog = ImageCommands(fake_bot)
    interaction = make_interaction(viewer, guild)

    await ImageCommands.generate.callback(cog, interaction, "a lighthouse")

    interaction.response.send_message.assert_awaited_once()
    edited = interaction.edit_original_response.await_args.kwargs
    assert edited["embed"].title == "❌ Error"
    assert edited["view"] is None


@pytest.mark.asyncio
async def test_generate_rejected_result_edit_shows_error(fake_bot, mock_images, guild, viewer, make_interaction):
    mock_images.generate.return_value = ImageResult(image_url="/out/abc.png")
    cog = ImageCommands(fake_bot)
    interaction = make_interaction(viewer, guild)
    rejected = discord.HTTPException(MagicMock(status=400, reason="Bad Request"), "Invalid Form Body")
    interaction.edit_original_response = AsyncMock(side_effect=[rejected, None])

    await ImageCommands.generate.callback(cog, interaction, "a lighthouse")

    assert interaction.edit_original_response.await_count == 2
    edited = interaction.edit_original_response.await_args.kwargs
    assert edited["embed"].title == "❌ Error"
    assert edited["view"] is None
    assert reply_for(interaction).state is ReplyState.EDITED


@pytest.mark.asyncio
async def test_generate_denied_without_view_channel(fake_bot, mock_images, guild, make_member, make_interaction):
    nobody = make_member(user_id=900)
    cog = ImageCommands(fake_bot)
    interaction = make_interaction(nobody, guild)

    await ImageCommands.generate.callback(cog, interaction, "a lighthouse")

    mock_images.generate.assert_not_awaited()
    assert _sent(interaction)["embed"].title == "❌ Permission Denied"


# ---------------------------------------------------------------------------
# /bot
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_uptime(fake_bot, guild, viewer, make_interaction):
    cog = BotCommands(fake_bot)
    interaction = make_interaction(viewer, guild)
    await BotCommands.uptime.callback(cog, interaction)
    assert _sent(interaction)["embed"].title == "⏰ Bot Uptime"


@pytest.mark.asyncio
async def test_ping_replies_then_edits(fake_bot, guild, viewer, make_interaction):
    cog = BotCommands(fake_bot)
    interaction = make_interaction(viewer, guild)
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    interaction.created_at = start
    interaction.original_response = AsyncMock(return_value=SimpleNamespace(created_at=start + timedelta(milliseconds=120)))

    await BotCommands.ping.callback(cog, interaction)

    assert _sent(interaction)["content"] == "Pinging..."
    edited = interaction.edit_original_response.await_args.kwargs
    assert edited["content"] is None
    assert [f.value for f in edited["embed"].fields] == ["120ms", "50ms"]


@pytest.mark.asyncio
async def test_feedback_relayed_when_channel_configured(fake_bot, guild, viewer, make_interaction):
    relay = MagicMock(spec=discord.TextChannel)
    relay.send = AsyncMock()
    fake_bot.settings.FEEDBACK_CHANNEL_ID = 777
    fake_bot.get_channel = MagicMock(return_value=relay)
    cog = BotCommands(fake_bot)
    interaction = make_interaction(viewer, guild)

    await BotCommands.feedback.callback(cog, interaction, "love it")

    fake_bot.get_channel.assert_called_once_with(777)
    relayed = relay.send.await_args.kwargs["embed"]
    assert relayed.title == "💬 New Feedback"
    assert _sent(interaction)["ephemeral"] is True


@pytest.mark.asyncio
async def test_feedback_relay_failure_still_thanks_user(fake_bot, guild, viewer, make_interaction):
    relay = MagicMock(spec=discord.TextChannel)
    relay.send = AsyncMock(side_effect=discord.HTTPException(MagicMock(status=403, reason="Forbidden"), "no access"))
    fake_bot.settings.FEEDBACK_CHANNEL_ID = 777
    fake_bot.get_channel = MagicMock(return_value=relay)
    cog = BotCommands(fake_bot)
    interaction = make_interaction(viewer, guild)

    await BotCommands.feedback.callback(cog, interaction, "love it")

    assert "Thank you for your feedback" in _sent(interaction)["content"]


@pytest.mark.asyncio
async def test_feedback_relay_to_non_text_channel_still_thanks_user(fake_bot, guild, viewer, make_interaction):
    fake_bot.settings.FEEDBACK_CHANNEL_ID = 777
    fake_bot.get_channel = MagicMock(return_value=MagicMock(spec=discord.CategoryChannel))
    cog = BotCommands(fake_bot)
    interaction = make_interaction(viewer, guild)

    await BotCommands.feedback.callback(cog, interaction, "love it")

    kwargs = _sent(interaction)
    assert "Thank you for your feedback" in kwargs["content"]
    assert kwargs["ephemeral"] is True


@pytest.mark.asyncio
async def test_feedback_without_relay_channel(fake_bot, guild, viewer, make_interaction):
    cog = BotCommands(fake_bot)
    interaction = make_interaction(viewer, guild)
    await BotCommands.feedback.callback(cog, interaction, "hello")
    fake_bot.get_channel.assert_not_called()
    assert _sent(interaction)["ephemeral"] is True


@pytest.mark.asyncio
async def test_support_uses_configured_text(fake_bot, guild, viewer, make_interaction):
    cog = BotCommands(fake_bot)
    interaction = make_interaction(viewer, guild)
    await BotCommands.support.callback(cog, interaction)
    assert _sent(interaction)["embed"].description == "Ask in #help"


# ---------------------------------------------------------------------------
# Top-level handling
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_tree_rejects_direct_messages(fake_bot, viewer, make_interaction):
    interaction = make_interaction(viewer, None)
    interaction.client = fake_bot
    allowed = await RouteBotTree.interaction_check(MagicMock(), interaction)
    assert allowed is False
    kwargs = _sent(interaction)
    assert kwargs["embed"].title == "❌ Server Only"
    assert kwargs["ephemeral"] is True


@pytest.mark.asyncio
async def test_tree_allows_guild_interactions(fake_bot, guild, viewer, make_interaction):
    interaction = make_interaction(viewer, guild)
    assert await RouteBotTree.interaction_check(MagicMock(), interaction) is True
    interaction.response.send_message.assert_not_awaited()


@pytest.mark.asyncio
async def test_tree_error_sends_single_fallback(guild, viewer, make_interaction):
    interaction = make_interaction(viewer, guild)
    error = discord.app_commands.AppCommandError("boom")
    await RouteBotTree.on_error(MagicMock(), interaction, error)
    assert _sent(interaction)["content"] == COMMAND_ERROR_TEXT


@pytest.mark.asyncio
async def test_tree_error_after_reply_sends_nothing_more(guild, viewer, make_interaction):
    interaction = make_interaction(viewer, guild)
    await reply_for(interaction).send(content="working...")
    await RouteBotTree.on_error(MagicMock(), interaction, discord.app_commands.AppCommandError("boom"))
    assert interaction.response.send_message.await_count == 1


@pytest.mark.asyncio
async def test_on_message_falls_back_when_routing_raises(guild, viewer, make_message):
    message = make_message("hi", viewer, guild, GENERAL)
    fake = SimpleNamespace(message_router=SimpleNamespace(route=AsyncMock(side_effect=RuntimeError("bug"))))

    await RouteBot.on_message(fake, message)

    message.reply.assert_awaited_once_with(content=MESSAGE_ERROR_TEXT)


@pytest.mark.asyncio
async def test_on_message_skips_bots(guild, make_member, make_message):
    bot_author = make_member(user_id=1)
    bot_author.bot = True
    message = make_message("hi", bot_author, guild, GENERAL)
    fake = SimpleNamespace(message_router=SimpleNamespace(route=AsyncMock()))

    await RouteBot.on_message(fake, message)

    fake.message_router.route.assert_not_awaited()

