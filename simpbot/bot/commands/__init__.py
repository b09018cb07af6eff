"""
Command registry.

Every command the bot understands is listed in build_command_registry().
The resulting mapping is frozen and handed to the dispatcher at startup.
"""

from typing import Mapping

from simpbot.bot.commands.wiki import WikiCommand
from simpbot.pipeline.dispatcher import build_registry
from simpbot.pipeline.models import CommandHandler
from simpbot.services.wikipedia import WikipediaService


def build_command_registry(wikipedia: WikipediaService) -> Mapping[str, CommandHandler]:
    """Build the immutable token → handler table."""
    return build_registry(
        {
            "wiki": WikiCommand(wikipedia),
        }
    )


__all__ = ["WikiCommand", "build_command_registry"]
