"""Async Data Access Layer for the SESSION table.

Each row holds one whole `Session` aggregate serialized as JSON; writes
always replace the full record.
"""

from __future__ import annotations

import json
from typing import List, Optional, Sequence

from models.session_models import Session, now_ms
from utils.database_init import AsyncDatabaseInitializer


class SessionDAL:
    """Data access layer for SESSION records.

    The constructor accepts an `AsyncDatabaseInitializer` (or any object
    exposing an async `connection()` context manager that yields an
    `aiosqlite.Connection`).
    """

    def __init__(self, db_initializer: AsyncDatabaseInitializer) -> None:
        self._db = db_initializer

    async def upsert_session(self, session: Session) -> None:
        """Insert or wholly replace the row for `session.id`."""
        payload = json.dumps(session.to_dict())
        async with self._db.connection() as conn:
            await conn.execute(
                """
                INSERT INTO SESSION (id, created_at, updated_at, payload) VALUES (?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET updated_at = excluded.updated_at, payload = excluded.payload
                """,
                (session.id, session.created_at, now_ms(), payload),
            )
            await conn.commit()

    async def get_session_by_id(self, session_id: str) -> Optional[Session]:
        """Return the Session stored under `session_id`, or None if not found."""
        async with self._db.connection() as conn:
            cur = await conn.execute("SELECT payload FROM SESSION WHERE id = ?", (session_id,))
            row = await cur.fetchone()
            return self._row_to_session(row) if row else None

    async def list_sessions(self, limit: int = 100, offset: int = 0) -> List[Session]:
        """List sessions newest first.

        Args:
            limit: Maximum number of rows to return.
            offset: Rows to skip.
        """
        async with self._db.connection() as conn:
            cur = await conn.execute(
                "SELECT payload FROM SESSION ORDER BY created_at DESC LIMIT ? OFFSET ?",
                (limit, offset),
            )
            rows = await cur.fetchall()
            return [self._row_to_session(r) for r in rows]

    @staticmethod
    def _row_to_session(row: Sequence[object]) -> Session:
        return Session.from_dict(json.loads(str(row[0])))
