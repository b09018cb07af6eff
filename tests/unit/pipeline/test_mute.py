"""
Tests for MuteFilter.

Covers:
- should_suppress reflects the store's mute flag
- suppress() deletes only where the channel allows it
- a failed delete is logged and swallowed
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from simpbot.errors import DeliveryError
from simpbot.pipeline.models import InboundMessage
from simpbot.pipeline.mute import MuteFilter


def _make_message(**kwargs) -> InboundMessage:
    defaults = dict(message_id=555, author_id=7, channel_id=100, guild_id=1, content="?wiki Cats")
    defaults.update(kwargs)
    return InboundMessage(**defaults)


def _make_gateway(can_delete=True):
    gateway = MagicMock()
    gateway.can_delete.return_value = can_delete
    gateway.delete_message = AsyncMock()
    gateway.send_reply = AsyncMock()
    return gateway


class TestShouldSuppress:
    @pytest.mark.asyncio
    async def test_muted_user_is_suppressed(self):
        session = MagicMock()
        session.is_muted = AsyncMock(return_value=True)

        assert await MuteFilter(_make_gateway()).should_suppress(session, 7) is True
        session.is_muted.assert_awaited_once_with(7)

    @pytest.mark.asyncio
    async def test_unmuted_user_is_not_suppressed(self):
        session = MagicMock()
        session.is_muted = AsyncMock(return_value=False)

        assert await MuteFilter(_make_gateway()).should_suppress(session, 7) is False


class TestSuppress:
    @pytest.mark.asyncio
    async def test_deletes_message_in_deletable_channel(self):
        gateway = _make_gateway(can_delete=True)

        await MuteFilter(gateway).suppress(_make_message())

        gateway.delete_message.assert_awaited_once_with(100, 555)

    @pytest.mark.asyncio
    async def test_skips_delete_when_channel_does_not_support_it(self):
        gateway = _make_gateway(can_delete=False)

        await MuteFilter(gateway).suppress(_make_message())

        gateway.delete_message.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_failure_is_swallowed(self, caplog):
        """Missing permissions must not break suppression."""
        gateway = _make_gateway()
        gateway.delete_message.side_effect = DeliveryError("403 Forbidden")

        await MuteFilter(gateway).suppress(_make_message())

        assert "Could not delete message 555" in caplog.text

    @pytest.mark.asyncio
    async def test_never_replies(self):
        gateway = _make_gateway()

        await MuteFilter(gateway).suppress(_make_message())

        gateway.send_reply.assert_not_called()
