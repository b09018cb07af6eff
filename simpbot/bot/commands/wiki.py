"""
WikiCommand - ``wiki <query>`` posts a link to the best-matching article.

Replies with the author's mention and an embed whose title is the article
title and whose description is its URL.
"""

from __future__ import annotations

import discord

from simpbot.config.logging import get_logger
from simpbot.pipeline.models import CommandContext
from simpbot.services.wikipedia import WikipediaError, WikipediaService

logger = get_logger(__name__)

MISSING_QUERY = "The input text has too few parameters."


class WikiCommand:
    """Looks up a Wikipedia page and replies with an embed."""

    def __init__(self, wikipedia: WikipediaService) -> None:
        self.wikipedia = wikipedia

    async def __call__(self, argument: str, context: CommandContext) -> str | None:
        if not argument:
            return MISSING_QUERY

        try:
            page = await self.wikipedia.search_for_page(argument)
        except WikipediaError as e:
            logger.warning(f"Wikipedia lookup failed for {argument!r}: {e}")
            return "Wikipedia is unavailable right now. Please try again later."

        if page is None:
            return f"No Wikipedia page found for {argument!r}."

        embed = discord.Embed(title=page.title[:256], description=page.url)
        await context.reply(context.author_mention, embed=embed)
        return None
