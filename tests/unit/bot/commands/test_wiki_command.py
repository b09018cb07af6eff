"""
Tests for WikiCommand.

Covers:
- success: mention + embed reply, returns None
- missing query, no page found, service failure → reason strings
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from simpbot.bot.commands import build_command_registry
from simpbot.bot.commands.wiki import MISSING_QUERY, WikiCommand
from simpbot.pipeline.models import CommandContext, InboundMessage
from simpbot.services.wikipedia import WikiPage, WikipediaError


def _make_context() -> CommandContext:
    gateway = MagicMock()
    gateway.send_reply = AsyncMock()
    message = InboundMessage(
        message_id=555, author_id=7, channel_id=100, guild_id=1000, content="?wiki Cats"
    )
    return CommandContext(message=message, gateway=gateway)


def _make_service(page=None, error=None):
    service = MagicMock()
    service.search_for_page = AsyncMock(return_value=page, side_effect=error)
    return service


class TestWikiCommand:
    @pytest.mark.asyncio
    async def test_success_replies_with_embed(self):
        page = WikiPage(title="Cats", url="https://en.wikipedia.org/wiki/Cats")
        service = _make_service(page)
        context = _make_context()

        result = await WikiCommand(service)("Cats", context)

        assert result is None
        service.search_for_page.assert_awaited_once_with("Cats")
        context.gateway.send_reply.assert_awaited_once()
        call = context.gateway.send_reply.await_args
        assert call.args == (100, "<@7>")
        embed = call.kwargs["embed"]
        assert isinstance(embed, discord.Embed)
        assert embed.title == "Cats"
        assert embed.description == "https://en.wikipedia.org/wiki/Cats"

    @pytest.mark.asyncio
    async def test_missing_query(self):
        service = _make_service()
        context = _make_context()

        result = await WikiCommand(service)("", context)

        assert result == MISSING_QUERY
        service.search_for_page.assert_not_called()
        context.gateway.send_reply.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_page_found(self):
        context = _make_context()

        result = await WikiCommand(_make_service(None))("zzqx", context)

        assert result == "No Wikipedia page found for 'zzqx'."
        context.gateway.send_reply.assert_not_called()

    @pytest.mark.asyncio
    async def test_service_error_becomes_reason(self):
        context = _make_context()

        result = await WikiCommand(_make_service(error=WikipediaError("HTTP 503")))(
            "Cats", context
        )

        assert "unavailable" in result
        context.gateway.send_reply.assert_not_called()


class TestCommandRegistry:
    def test_wiki_registered(self):
        registry = build_command_registry(MagicMock())

        assert set(registry) == {"wiki"}
        assert isinstance(registry["wiki"], WikiCommand)
