"""
Message ingestion and dispatch pipeline.

Every inbound message runs through the same fixed sequence:

    mute check → guild prefix → command match → handler → failure reply

and produces exactly one DispatchOutcome. The pipeline knows nothing about
discord.py; the chat client supplies a MessageGateway for replies and
deletions.
"""

from simpbot.pipeline.dispatcher import CommandDispatcher, build_registry, match_command
from simpbot.pipeline.ingestion import IngestionPipeline
from simpbot.pipeline.models import (
    CommandContext,
    CommandHandler,
    DispatchOutcome,
    InboundMessage,
    MessageGateway,
    OutcomeKind,
)
from simpbot.pipeline.mute import MuteFilter
from simpbot.pipeline.prefix import DEFAULT_PREFIX, PrefixResolver

__all__ = [
    "CommandContext",
    "CommandDispatcher",
    "CommandHandler",
    "DEFAULT_PREFIX",
    "DispatchOutcome",
    "InboundMessage",
    "IngestionPipeline",
    "MessageGateway",
    "MuteFilter",
    "OutcomeKind",
    "PrefixResolver",
    "build_registry",
    "match_command",
]
