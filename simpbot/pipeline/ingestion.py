"""
IngestionPipeline - the per-message decision sequence.

    received ─┬─ not a guild message ──────────────► NOT_A_GUILD_MESSAGE
              ├─ authored by a bot ────────────────► FROM_BOT
              └─ mute check ─┬─ muted ─────────────► SUPPRESSED (delete requested)
                             └─ prefix resolution
                                 └─ dispatch ─┬────► NO_PREFIX_MATCH
                                              ├────► COMMAND_SUCCEEDED
                                              └────► COMMAND_FAILED (reason replied)

Stage order is fixed: a muted user's message never reaches a handler,
whatever its prefix. Each run opens its own config store session and
shares nothing with concurrently running messages.
"""

from __future__ import annotations

from typing import Any

from simpbot.config.logging import get_logger
from simpbot.pipeline.dispatcher import CommandDispatcher
from simpbot.pipeline.models import (
    CommandContext,
    DispatchOutcome,
    InboundMessage,
    MessageGateway,
    OutcomeKind,
)
from simpbot.pipeline.mute import MuteFilter
from simpbot.pipeline.prefix import PrefixResolver
from simpbot.storage.config_store import ConfigStore

logger = get_logger(__name__)


class IngestionPipeline:
    """
    Runs one inbound message to exactly one DispatchOutcome.

    Args:
        store: Configuration store (read-only from here)
        gateway: Send/delete capability of the chat client
        mute_filter: Suppression stage
        prefix_resolver: Prefix stage
        dispatcher: Command stage
        client: Opaque client handle forwarded to command handlers
    """

    def __init__(
        self,
        store: ConfigStore,
        gateway: MessageGateway,
        mute_filter: MuteFilter,
        prefix_resolver: PrefixResolver,
        dispatcher: CommandDispatcher,
        client: Any = None,
    ) -> None:
        self._store = store
        self._gateway = gateway
        self._mute_filter = mute_filter
        self._prefix_resolver = prefix_resolver
        self._dispatcher = dispatcher
        self._client = client

    async def handle(self, message: InboundMessage, self_id: int | None = None) -> DispatchOutcome:
        """
        Process a single message.

        Args:
            message: The inbound message event
            self_id: The bot's own user id, enabling mention-form commands

        Returns:
            The terminal outcome for this message
        """
        if not message.is_guild_message:
            return DispatchOutcome.not_a_guild_message()
        if message.is_bot:
            # Includes our own replies; a failure reason that starts with the
            # guild prefix would otherwise re-trigger dispatch.
            return DispatchOutcome.from_bot()

        async with self._store.session() as session:
            if await self._mute_filter.should_suppress(session, message.author_id):
                await self._mute_filter.suppress(message)
                outcome = DispatchOutcome.suppressed()
            else:
                prefix = await self._prefix_resolver.resolve(session, message.guild_id)
                context = CommandContext(
                    message=message, gateway=self._gateway, client=self._client
                )
                outcome = await self._dispatcher.try_dispatch(
                    message.content, prefix, self_id, context
                )

        self._log_outcome(message, outcome)
        return outcome

    def _log_outcome(self, message: InboundMessage, outcome: DispatchOutcome) -> None:
        if outcome.kind is OutcomeKind.COMMAND_FAILED:
            logger.info(
                f"Command {outcome.command!r} from user {message.author_id} in guild "
                f"{message.guild_id} failed: {outcome.reason}"
            )
        elif outcome.kind is OutcomeKind.COMMAND_SUCCEEDED:
            logger.info(
                f"Command {outcome.command!r} from user {message.author_id} in guild "
                f"{message.guild_id} succeeded"
            )
        else:
            logger.debug(f"Message {message.message_id}: {outcome.kind.value}")
