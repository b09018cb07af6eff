"""
discord.py implementation of the pipeline's MessageGateway, plus the
conversion from discord.Message to the platform-neutral InboundMessage.
"""

from __future__ import annotations

from typing import Any

import discord

from simpbot.errors import ChannelNotFoundError, DeliveryError
from simpbot.pipeline.models import InboundMessage

# Guild channels where the bot may delete other users' messages
_DELETABLE_CHANNELS = (discord.TextChannel, discord.Thread)


def to_inbound(message: discord.Message) -> InboundMessage:
    """Strip a gateway message down to what the pipeline needs."""
    return InboundMessage(
        message_id=message.id,
        author_id=message.author.id,
        channel_id=message.channel.id,
        guild_id=message.guild.id if message.guild is not None else None,
        content=message.content,
        is_system=message.is_system(),
        is_bot=message.author.bot,
    )


class DiscordGateway:
    """
    Sends and deletes messages through a discord.py client's channel cache.

    Raises ChannelNotFoundError for channels the client cannot see and
    wraps discord.HTTPException (Forbidden, NotFound, ...) in DeliveryError.
    """

    def __init__(self, client: discord.Client) -> None:
        self._client = client

    def _get_channel(self, channel_id: int) -> Any:
        channel = self._client.get_channel(channel_id)
        if channel is None:
            raise ChannelNotFoundError(f"Can't get channel {channel_id}")
        return channel

    def can_delete(self, channel_id: int) -> bool:
        return isinstance(self._client.get_channel(channel_id), _DELETABLE_CHANNELS)

    async def send_reply(
        self, channel_id: int, content: str | None = None, *, embed: Any = None
    ) -> None:
        channel = self._get_channel(channel_id)
        try:
            if embed is None:
                await channel.send(content)
            else:
                await channel.send(content, embed=embed)
        except discord.HTTPException as e:
            raise DeliveryError(f"Send to channel {channel_id} failed: {e}") from e

    async def delete_message(self, channel_id: int, message_id: int) -> None:
        channel = self._get_channel(channel_id)
        try:
            await channel.get_partial_message(message_id).delete()
        except discord.HTTPException as e:
            raise DeliveryError(
                f"Delete of message {message_id} in channel {channel_id} failed: {e}"
            ) from e
