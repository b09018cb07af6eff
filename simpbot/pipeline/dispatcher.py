"""
CommandDispatcher - match command text and run the registered handler.

A message can address the bot two ways, both sharing one dispatch path:
  - prefix form:   ``?wiki Cats``        (guild prefix immediately followed by a token)
  - mention form:  ``<@BOT_ID> wiki Cats`` (bot mention, whitespace, then a token)

The token is looked up exactly as typed. Handlers report failure by
returning a reason string, which is posted back to the channel; success
is silent at this level because the handler sends its own reply.
"""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from simpbot.config.logging import get_logger
from simpbot.errors import DeliveryError
from simpbot.pipeline.models import CommandContext, CommandHandler, DispatchOutcome

logger = get_logger(__name__)

UNKNOWN_COMMAND = "unknown command"
COMMAND_ERROR = "command failed"
COMMAND_TIMED_OUT = "command timed out"

# <@USER_ID> or <@!USER_ID>, then at least one whitespace character
_MENTION_RE = re.compile(r"<@!?(\d+)>\s+")


@dataclass(frozen=True)
class CommandMatch:
    """A command token and the remaining argument text."""

    token: str
    argument: str


def build_registry(handlers: Mapping[str, CommandHandler]) -> Mapping[str, CommandHandler]:
    """Freeze a token → handler table so it cannot change after startup."""
    for token in handlers:
        if not token or any(ch.isspace() for ch in token):
            raise ValueError(f"Invalid command token: {token!r}")
    return MappingProxyType(dict(handlers))


def match_command(text: str, prefix: str, self_id: int | None) -> CommandMatch | None:
    """
    Split ``text`` into a command token and argument, or return None.

    Returns None when the text uses neither the prefix form nor the
    mention form, or when no token follows the prefix/mention.
    """
    rest: str | None = None
    if text.startswith(prefix):
        candidate = text[len(prefix):]
        if candidate and not candidate[0].isspace():
            rest = candidate
    elif self_id is not None:
        mention = _MENTION_RE.match(text)
        if mention and int(mention.group(1)) == self_id:
            rest = text[mention.end():]

    if not rest:
        return None

    parts = rest.split(maxsplit=1)
    argument = parts[1].strip() if len(parts) > 1 else ""
    return CommandMatch(token=parts[0], argument=argument)


class CommandDispatcher:
    """
    Runs matched commands against an immutable registry.

    Args:
        registry: Token → handler mapping, fixed at startup
        timeout: Seconds a handler may run; None disables the limit
    """

    def __init__(
        self,
        registry: Mapping[str, CommandHandler],
        timeout: float | None = None,
    ) -> None:
        self._registry = registry
        self._timeout = timeout

    @property
    def commands(self) -> list[str]:
        return sorted(self._registry)

    async def try_dispatch(
        self,
        text: str,
        prefix: str,
        self_id: int | None,
        context: CommandContext,
    ) -> DispatchOutcome:
        matched = match_command(text, prefix, self_id)
        if matched is None:
            return DispatchOutcome.no_prefix_match()

        handler = self._registry.get(matched.token)
        if handler is None:
            outcome = DispatchOutcome.failed(UNKNOWN_COMMAND, command=matched.token)
        else:
            outcome = await self._invoke(handler, matched, context)

        if outcome.reason is not None:
            await self._report_failure(context, outcome.reason)
        return outcome

    async def _invoke(
        self,
        handler: CommandHandler,
        matched: CommandMatch,
        context: CommandContext,
    ) -> DispatchOutcome:
        logger.debug(
            f"Running command {matched.token!r} for user {context.message.author_id} "
            f"in channel {context.message.channel_id}"
        )
        try:
            reason = await asyncio.wait_for(
                handler(matched.argument, context), timeout=self._timeout
            )
        except asyncio.TimeoutError:
            logger.warning(f"Command {matched.token!r} timed out after {self._timeout}s")
            return DispatchOutcome.failed(COMMAND_TIMED_OUT, command=matched.token)
        except Exception as e:
            logger.exception(f"Command {matched.token!r} raised: {e}")
            return DispatchOutcome.failed(COMMAND_ERROR, command=matched.token)

        if reason is not None:
            return DispatchOutcome.failed(reason, command=matched.token)
        return DispatchOutcome.succeeded(matched.token)

    async def _report_failure(self, context: CommandContext, reason: str) -> None:
        try:
            await context.reply(reason)
        except DeliveryError as e:
            logger.warning(
                f"Could not send failure reply to channel {context.message.channel_id}: {e}"
            )
