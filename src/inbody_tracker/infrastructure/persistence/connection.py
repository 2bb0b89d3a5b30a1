"""
infrastructure.persistence.connection - Async SQLite connection manager.

Wraps aiosqlite with a context manager: one connection and one transaction
per unit of work. Driver and filesystem errors surface as StorageUnavailable
so callers can tell "store unavailable" apart from "not found".
"""

from __future__ import annotations

import asyncio
import logging
import threading
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

import aiosqlite

from inbody_tracker.domain.exceptions import StorageUnavailable

logger = logging.getLogger(__name__)


class AsyncSQLiteConnection:
    """Async SQLite connection provider with auto-commit/rollback."""

    def __init__(self, db_path: str):
        self._db_path = db_path

    @property
    def db_path(self) -> str:
        return self._db_path

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """Yield an async SQLite connection.

        Commits on success, rolls back on exception.

        Raises:
            StorageUnavailable: if the database cannot be opened or a
                statement fails at the driver level.
        """
        if self._db_path != ":memory:" and not Path(self._db_path).parent.is_dir():
            logger.error("Cannot open database %s: directory does not exist", self._db_path)
            raise StorageUnavailable(f"Database unavailable: no directory for {self._db_path}")

        conn = aiosqlite.connect(self._db_path)
        try:
            await conn
        except (aiosqlite.Error, OSError) as e:
            await _join_worker(conn)
            logger.error("Cannot open database %s: %s", self._db_path, e)
            raise StorageUnavailable(f"Database unavailable: {e}") from e

        try:
            conn.row_factory = aiosqlite.Row
            try:
                yield conn
                await conn.commit()
            except Exception as e:
                await conn.rollback()
                logger.exception("Database operation failed, transaction rolled back.")
                if isinstance(e, (aiosqlite.Error, OSError)):
                    raise StorageUnavailable(f"Database operation failed: {e}") from e
                raise
        finally:
            await conn.close()


async def _join_worker(conn: aiosqlite.Connection) -> None:
    """Wait for a failed connection's worker thread while the loop still runs."""
    if isinstance(conn, threading.Thread) and conn.is_alive():
        await asyncio.get_running_loop().run_in_executor(None, conn.join, 1.0)
