"""
infrastructure.persistence.connection - Async SQLite connection manager.

Each acquire() opens a connection scoped to one unit of work: it commits
on success and rolls back on any exception. Driver errors leave this
module as RepositoryError.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import aiosqlite

from domain.exceptions import DomainError, RepositoryError

logger = logging.getLogger(__name__)


class AsyncSQLiteConnection:
    """Async SQLite connection provider with auto-commit/rollback."""

    def __init__(self, db_path: str, timeout: float = 30.0):
        self._db_path = db_path
        self._timeout = timeout

    @property
    def db_path(self) -> str:
        return self._db_path

    @asynccontextmanager
    async def acquire(self, write_lock: bool = False) -> AsyncIterator[aiosqlite.Connection]:
        """Yield an async SQLite connection with FK support.

        With write_lock=True the transaction starts with BEGIN IMMEDIATE, so
        the write lock is held from the first read. Read-modify-write
        sequences on the same row are then serialized across connections.
        """
        try:
            async with aiosqlite.connect(self._db_path, timeout=self._timeout) as conn:
                await conn.execute("PRAGMA foreign_keys = ON")
                conn.row_factory = aiosqlite.Row
                if write_lock:
                    await conn.execute("BEGIN IMMEDIATE")
                try:
                    yield conn
                    await conn.commit()
                except DomainError as exc:
                    await conn.rollback()
                    logger.info("Transaction rolled back: %s: %s", type(exc).__name__, exc)
                    raise
                except Exception:
                    await conn.rollback()
                    logger.exception("Database operation failed, transaction rolled back.")
                    raise
        except aiosqlite.Error as exc:
            raise RepositoryError(f"Database operation failed: {exc}") from exc
