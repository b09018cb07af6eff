"""
PrefixResolver - which character starts a command in a given guild.
"""

from __future__ import annotations

from simpbot.storage.config_store import ConfigSession

DEFAULT_PREFIX = "!"


class PrefixResolver:
    """
    Resolves a guild's command prefix, falling back to a process-wide default.

    A guild without a stored prefix is the normal case, not an error.
    """

    def __init__(self, default_prefix: str = DEFAULT_PREFIX) -> None:
        self.default_prefix = default_prefix

    async def resolve(self, session: ConfigSession, guild_id: int) -> str:
        stored = await session.get_prefix(guild_id)
        return stored if stored is not None else self.default_prefix
