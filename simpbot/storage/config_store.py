"""
SQLite-backed store for per-guild prefixes and per-user mutes.

Two tables:
- prefixes(guild_id PRIMARY KEY, prefix_symbol)
- muted_users(user_id PRIMARY KEY, is_muted)

sqlite3 is blocking, so every statement runs in a worker thread via
asyncio.to_thread and never stalls the event loop.

Example:
    >>> async with ConfigStore("data/simpbot.db") as store:
    ...     await store.set_prefix(1234, "?")
    ...     async with store.session() as session:
    ...         await session.get_prefix(1234)
    '?'
"""

from __future__ import annotations

import asyncio
import sqlite3
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from simpbot.config.logging import get_logger
from simpbot.errors import StorageError
from simpbot.storage.models import MutedUser, Prefix

logger = get_logger(__name__)

_SCHEMA = (
    """
    create table if not exists prefixes (
        guild_id integer primary key,
        prefix_symbol text not null
    )
    """,
    """
    create table if not exists muted_users (
        user_id integer primary key,
        is_muted integer not null default 1
    )
    """,
)


def _connect(path: Path) -> sqlite3.Connection:
    # Opened in one worker thread, used from others; a session never
    # issues statements concurrently.
    return sqlite3.connect(path, check_same_thread=False)


class ConfigSession:
    """
    Read handle scoped to a single pipeline run.

    Obtain one with ``ConfigStore.session()``; the underlying connection is
    closed when the ``async with`` block exits.
    """

    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    async def get_prefix(self, guild_id: int) -> str | None:
        """Return the stored prefix symbol for a guild, or None."""
        row = await self._fetchone(
            "select prefix_symbol from prefixes where guild_id = ?", (guild_id,)
        )
        return row[0] if row else None

    async def is_muted(self, user_id: int) -> bool:
        """True iff the user has a mute record with is_muted set."""
        row = await self._fetchone(
            "select is_muted from muted_users where user_id = ?", (user_id,)
        )
        return bool(row and row[0])

    async def _fetchone(self, sql: str, params: tuple) -> tuple | None:
        def run() -> tuple | None:
            return self._conn.execute(sql, params).fetchone()

        try:
            return await asyncio.to_thread(run)
        except sqlite3.Error as e:
            raise StorageError(f"Query failed: {e}") from e


class ConfigStore:
    """
    Persistent prefix and mute configuration.

    The store itself holds no connection: readers open a short-lived
    connection per ``session()`` and writers open one per call, so
    concurrent pipeline runs never share SQLite state.

    Args:
        database_path: SQLite file path (parent directories are created)
    """

    def __init__(self, database_path: Path | str):
        self.database_path = Path(database_path)
        self._initialized = False

    async def initialize(self) -> None:
        """
        Create the database file and tables if they don't exist.

        Raises:
            StorageError: If the database cannot be opened or created
        """
        logger.info(f"Initializing config store at {self.database_path}")

        def run() -> None:
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
            conn = _connect(self.database_path)
            try:
                with conn:
                    for statement in _SCHEMA:
                        conn.execute(statement)
            finally:
                conn.close()

        try:
            await asyncio.to_thread(run)
        except (OSError, sqlite3.Error) as e:
            logger.error(f"Failed to initialize config store: {e}")
            raise StorageError(f"Could not initialize config store: {e}") from e

        self._initialized = True

    async def shutdown(self) -> None:
        """Mark the store closed; later sessions and writes raise StorageError."""
        self._initialized = False

    async def __aenter__(self) -> ConfigStore:
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        await self.shutdown()
        return False

    def _check_initialized(self) -> None:
        if not self._initialized:
            raise StorageError(
                "Config store not initialized. "
                "Use 'async with ConfigStore(...) as store:' or call await store.initialize()"
            )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[ConfigSession]:
        """
        Open a read session, closing its connection on every exit path.

        Raises:
            StorageError: If the store is not initialized or cannot be opened
        """
        self._check_initialized()
        try:
            conn = await asyncio.to_thread(_connect, self.database_path)
        except sqlite3.Error as e:
            raise StorageError(f"Could not open config store: {e}") from e

        try:
            yield ConfigSession(conn)
        finally:
            await asyncio.to_thread(conn.close)

    # ------------------------------------------------------------------
    # Administration writes
    # ------------------------------------------------------------------

    async def set_prefix(self, guild_id: int, prefix_symbol: str) -> Prefix:
        """
        Store (or replace) the prefix for a guild.

        Raises:
            pydantic.ValidationError: If the symbol is not a single character
            StorageError: If the write fails
        """
        record = Prefix(guild_id=guild_id, prefix_symbol=prefix_symbol)
        await self._execute(
            "insert into prefixes (guild_id, prefix_symbol) values (?, ?) "
            "on conflict(guild_id) do update set prefix_symbol = excluded.prefix_symbol",
            (record.guild_id, record.prefix_symbol),
        )
        logger.info(f"Prefix for guild {guild_id} set to {prefix_symbol!r}")
        return record

    async def clear_prefix(self, guild_id: int) -> bool:
        """Remove a guild's prefix. Returns False if none was stored."""
        removed = await self._execute("delete from prefixes where guild_id = ?", (guild_id,))
        if removed:
            logger.info(f"Prefix for guild {guild_id} cleared")
        return removed > 0

    async def set_muted(self, user_id: int, is_muted: bool) -> MutedUser:
        """Create or update a user's mute record."""
        record = MutedUser(user_id=user_id, is_muted=is_muted)
        await self._execute(
            "insert into muted_users (user_id, is_muted) values (?, ?) "
            "on conflict(user_id) do update set is_muted = excluded.is_muted",
            (record.user_id, int(record.is_muted)),
        )
        logger.info(f"User {user_id} {'muted' if is_muted else 'unmuted'}")
        return record

    async def _execute(self, sql: str, params: tuple) -> int:
        self._check_initialized()

        def run() -> int:
            conn = _connect(self.database_path)
            try:
                with conn:
                    return conn.execute(sql, params).rowcount
            finally:
                conn.close()

        try:
            return await asyncio.to_thread(run)
        except sqlite3.Error as e:
            logger.error(f"Config store write failed: {e}")
            raise StorageError(f"Write failed: {e}") from e
