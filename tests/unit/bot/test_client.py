"""
Tests for the SimpBot client.

The client is built with __new__ so no Discord connection or token is
needed; only the pieces each method touches are filled in.
"""

from __future__ import annotations

import asyncio
from contextlib import AsyncExitStack
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from simpbot.bot.client import SimpBot
from simpbot.config.settings import BotSettings, Settings, StorageSettings
from simpbot.errors import ChannelNotFoundError
from simpbot.pipeline import IngestionPipeline


def _make_bot(settings=None, user_id=999) -> SimpBot:
    bot = SimpBot.__new__(SimpBot)
    bot.settings = settings or MagicMock(spec=Settings)
    bot.store = None
    bot.pipeline = None
    bot._exit_stack = AsyncExitStack()
    bot._connection = MagicMock()
    bot._connection.user = MagicMock()
    bot._connection.user.id = user_id
    return bot


def _make_guild(*channel_names):
    guild = MagicMock()
    channels = []
    for name in channel_names:
        channel = MagicMock(spec=discord.TextChannel)
        channel.name = name
        channel.send = AsyncMock()
        channels.append(channel)
    guild.text_channels = channels
    return guild


class TestSetupHook:
    @pytest.mark.asyncio
    async def test_wires_pipeline_with_registered_commands(self, tmp_path):
        settings = Settings(
            bot=BotSettings(default_prefix="?", command_timeout=5),
            storage=StorageSettings(database_path=tmp_path / "simpbot.db"),
        )
        bot = _make_bot(settings)

        try:
            await bot.setup_hook()

            assert isinstance(bot.pipeline, IngestionPipeline)
            assert bot.pipeline._prefix_resolver.default_prefix == "?"
            assert bot.pipeline._dispatcher.commands == ["wiki"]
            assert (tmp_path / "simpbot.db").exists()
        finally:
            await bot._exit_stack.aclose()


class TestOnMessage:
    @pytest.mark.asyncio
    async def test_routes_message_through_pipeline(self):
        bot = _make_bot(user_id=999)
        bot.pipeline = MagicMock()
        bot.pipeline.handle = AsyncMock()
        message = MagicMock(spec=discord.Message)
        message.id = 1
        message.author = MagicMock(id=7, bot=False)
        message.channel = MagicMock(id=100)
        message.guild = MagicMock(id=1000)
        message.content = "!wiki Cats"
        message.is_system.return_value = False

        await bot.on_message(message)

        bot.pipeline.handle.assert_awaited_once()
        inbound = bot.pipeline.handle.await_args.args[0]
        assert inbound.content == "!wiki Cats"
        assert inbound.guild_id == 1000
        assert bot.pipeline.handle.await_args.kwargs["self_id"] == 999

    @pytest.mark.asyncio
    async def test_bot_author_never_reaches_dispatcher(self):
        bot = _make_bot(user_id=999)
        store = MagicMock()
        dispatcher = MagicMock()
        dispatcher.try_dispatch = AsyncMock()
        bot.pipeline = IngestionPipeline(
            store=store,
            gateway=MagicMock(),
            mute_filter=MagicMock(),
            prefix_resolver=MagicMock(),
            dispatcher=dispatcher,
        )
        message = MagicMock(spec=discord.Message)
        message.id = 2
        message.author = MagicMock(id=999, bot=True)
        message.channel = MagicMock(id=100)
        message.guild = MagicMock(id=1000)
        message.content = "ubogus"
        message.is_system.return_value = False

        await bot.on_message(message)

        store.session.assert_not_called()
        dispatcher.try_dispatch.assert_not_called()

    @pytest.mark.asyncio
    async def test_ignored_before_setup(self):
        """Messages arriving before setup_hook finishes are dropped."""
        bot = _make_bot()
        await bot.on_message(MagicMock(spec=discord.Message))


class TestAnnounce:
    @pytest.mark.asyncio
    async def test_sends_to_general_channel(self):
        bot = _make_bot()
        guild = _make_guild("rules", "general-chat", "general")
        bot._connection._get_guild.return_value = guild

        await bot.announce("Hello there!", 1000)

        guild.text_channels[1].send.assert_awaited_once_with("Hello there!")
        guild.text_channels[2].send.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_general_channel_raises(self):
        bot = _make_bot()
        bot._connection._get_guild.return_value = _make_guild("rules", "memes")

        with pytest.raises(ChannelNotFoundError):
            await bot.announce("Hello there!", 1000)

    @pytest.mark.asyncio
    async def test_unknown_guild_raises(self):
        bot = _make_bot()
        bot._connection._get_guild.return_value = None

        with pytest.raises(ChannelNotFoundError):
            await bot.announce("Hello there!", 1000)


class TestWaitForConnection:
    @pytest.mark.asyncio
    async def test_returns_once_ready_is_signalled(self):
        bot = _make_bot()
        bot._ready = asyncio.Event()

        waiter = asyncio.create_task(bot.wait_for_connection())
        await asyncio.sleep(0)
        assert not waiter.done()

        bot._ready.set()
        await asyncio.wait_for(waiter, timeout=1)
