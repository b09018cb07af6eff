"""
SimpBot - discord.py client.

Manages the full bot lifecycle:
- Opens the config store and Wikipedia service once at startup
- Builds the command registry and the ingestion pipeline
- Feeds every gateway message through the pipeline
- Cleans up all resources on shutdown via AsyncExitStack
"""

from __future__ import annotations

from contextlib import AsyncExitStack

import discord

from simpbot.bot.commands import build_command_registry
from simpbot.bot.gateway import DiscordGateway, to_inbound
from simpbot.config.logging import get_logger
from simpbot.config.settings import Settings
from simpbot.errors import ChannelNotFoundError, DeliveryError
from simpbot.pipeline import (
    CommandDispatcher,
    IngestionPipeline,
    MuteFilter,
    PrefixResolver,
)
from simpbot.services.wikipedia import WikipediaService
from simpbot.storage.config_store import ConfigStore

logger = get_logger(__name__)

# Announcements go to the first guild text channel whose name contains this
ANNOUNCE_CHANNEL_HINT = "general"


class SimpBot(discord.Client):
    """
    Discord client that routes messages into the ingestion pipeline.

    discord.py runs each on_message event as its own task, so messages are
    processed concurrently and may finish out of order.

    Args:
        settings: Full application settings (bot token, storage, Wikipedia)
    """

    def __init__(self, settings: Settings) -> None:
        intents = discord.Intents.default()
        intents.message_content = True  # Required to read command text
        super().__init__(intents=intents)
        self.settings = settings
        self.store: ConfigStore | None = None
        self.pipeline: IngestionPipeline | None = None
        self._exit_stack = AsyncExitStack()

    async def setup_hook(self) -> None:
        """
        Called after login, before connecting to the Gateway.

        Initializes the store and services, then wires the pipeline.
        """
        # --- 1. Config store (prefixes + mutes) ---
        self.store = await self._exit_stack.enter_async_context(
            ConfigStore(self.settings.storage.database_path)
        )
        logger.info("Config store ready")

        # --- 2. Command services ---
        wikipedia = await self._exit_stack.enter_async_context(
            WikipediaService(self.settings.wikipedia)
        )

        # --- 3. Pipeline ---
        registry = build_command_registry(wikipedia)
        dispatcher = CommandDispatcher(registry, timeout=self.settings.bot.command_timeout)
        gateway = DiscordGateway(self)
        self.pipeline = IngestionPipeline(
            store=self.store,
            gateway=gateway,
            mute_filter=MuteFilter(gateway),
            prefix_resolver=PrefixResolver(self.settings.bot.default_prefix),
            dispatcher=dispatcher,
            client=self,
        )
        logger.info(f"Pipeline ready (commands: {', '.join(dispatcher.commands)})")

    async def on_ready(self) -> None:
        """Called when the bot successfully connects to Discord."""
        logger.info(f"Logged in as {self.user} (id: {self.user.id})")
        logger.info(f"Connected to {len(self.guilds)} guild(s)")

    async def on_message(self, message: discord.Message) -> None:
        if self.pipeline is None:
            return
        self_id = self.user.id if self.user is not None else None
        await self.pipeline.handle(to_inbound(message), self_id=self_id)

    async def wait_for_connection(self) -> None:
        """Block until the gateway connection is ready (signalled once by discord.py)."""
        await self.wait_until_ready()

    async def announce(self, text: str, guild_id: int) -> None:
        """
        Post ``text`` to a guild's general channel.

        Raises:
            ChannelNotFoundError: If the guild or a matching channel is missing
            DeliveryError: If Discord rejects the message
        """
        guild = self.get_guild(guild_id)
        channel = None
        if guild is not None:
            channel = next(
                (c for c in guild.text_channels if ANNOUNCE_CHANNEL_HINT in c.name),
                None,
            )
        if channel is None:
            raise ChannelNotFoundError(f"Can't get a channel in guild {guild_id}")

        try:
            await channel.send(text)
        except discord.HTTPException as e:
            raise DeliveryError(f"Announcement to guild {guild_id} failed: {e}") from e

    async def close(self) -> None:
        """Graceful shutdown - clean up all async resources before disconnecting."""
        logger.info("Shutting down SimpBot...")
        await self._exit_stack.aclose()
        await super().close()
