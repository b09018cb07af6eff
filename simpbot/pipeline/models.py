"""
Data structures and capabilities shared by the pipeline stages.

- InboundMessage: one gateway message event, platform-neutral
- CommandContext: what a command handler receives alongside its argument
- DispatchOutcome: the single result of running a message through the pipeline
- MessageGateway: send/delete capability supplied by the chat client
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Protocol

from pydantic import BaseModel, ConfigDict, Field


class InboundMessage(BaseModel):
    """A text message received from the gateway."""

    message_id: int = Field(ge=0, description="Platform message id")
    author_id: int = Field(ge=0, description="Sender's user id")
    channel_id: int = Field(ge=0, description="Channel the message was posted in")
    guild_id: int | None = Field(
        default=None, ge=0, description="Guild id, or None for direct messages"
    )
    content: str = Field(default="", description="Raw message text")
    is_system: bool = Field(
        default=False, description="True for platform-generated messages (joins, pins, ...)"
    )
    is_bot: bool = Field(
        default=False, description="True when the author is a bot account, including this one"
    )

    model_config = ConfigDict(frozen=True)

    @property
    def is_guild_message(self) -> bool:
        return self.guild_id is not None and not self.is_system


class OutcomeKind(str, Enum):
    NOT_A_GUILD_MESSAGE = "not_a_guild_message"
    FROM_BOT = "from_bot"
    SUPPRESSED = "suppressed"
    NO_PREFIX_MATCH = "no_prefix_match"
    COMMAND_SUCCEEDED = "command_succeeded"
    COMMAND_FAILED = "command_failed"


class DispatchOutcome(BaseModel):
    """
    Terminal result of one pipeline run.

    ``reason`` is only set for COMMAND_FAILED; ``command`` is the matched
    token for the two command outcomes.
    """

    kind: OutcomeKind
    reason: str | None = None
    command: str | None = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def not_a_guild_message(cls) -> DispatchOutcome:
        return cls(kind=OutcomeKind.NOT_A_GUILD_MESSAGE)

    @classmethod
    def from_bot(cls) -> DispatchOutcome:
        return cls(kind=OutcomeKind.FROM_BOT)

    @classmethod
    def suppressed(cls) -> DispatchOutcome:
        return cls(kind=OutcomeKind.SUPPRESSED)

    @classmethod
    def no_prefix_match(cls) -> DispatchOutcome:
        return cls(kind=OutcomeKind.NO_PREFIX_MATCH)

    @classmethod
    def succeeded(cls, command: str) -> DispatchOutcome:
        return cls(kind=OutcomeKind.COMMAND_SUCCEEDED, command=command)

    @classmethod
    def failed(cls, reason: str, command: str | None = None) -> DispatchOutcome:
        return cls(kind=OutcomeKind.COMMAND_FAILED, reason=reason, command=command)


class MessageGateway(Protocol):
    """
    Outbound capability of the chat client.

    Implementations raise ChannelNotFoundError when the channel cannot be
    located and DeliveryError when the platform rejects the request.
    """

    def can_delete(self, channel_id: int) -> bool:
        """True if messages in this channel can be deleted by the bot."""
        ...

    async def send_reply(
        self, channel_id: int, content: str | None = None, *, embed: Any = None
    ) -> None:
        ...

    async def delete_message(self, channel_id: int, message_id: int) -> None:
        ...


@dataclass(frozen=True)
class CommandContext:
    """
    Everything a command handler may need besides its argument text.

    ``client`` is the running chat client, passed through opaquely.
    """

    message: InboundMessage
    gateway: MessageGateway
    client: Any = None

    @property
    def author_mention(self) -> str:
        return f"<@{self.message.author_id}>"

    async def reply(self, content: str | None = None, *, embed: Any = None) -> None:
        """Send a message to the channel the command came from."""
        await self.gateway.send_reply(self.message.channel_id, content, embed=embed)


# A handler completes with None on success, or returns a human-readable
# failure reason.
CommandHandler = Callable[[str, CommandContext], Awaitable["str | None"]]
