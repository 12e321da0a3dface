import os
import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

import aiosqlite


class AsyncDatabaseInitializer:
    """
    Manage an async SQLite database using the DATABASE_DIR environment variable.

    - The database file is located at: <DATABASE_DIR>/app.db
    - DATABASE_DIR is required unless `db_dir` is passed explicitly. A
      RuntimeError is raised if it is missing or invalid (not a directory
      and cannot be created).
    - On the first call to `ensure_database()` for a given instance the
      SESSION table is created if missing. When `reset` is true any existing
      database file is deleted first.
    - Subsequent calls to `ensure_database()` on the same instance are no-ops,
      so it is safe for `connection()` to call it.
    """

    def __init__(self, db_dir: Optional[Path | str] = None, reset: bool = False) -> None:
        env_dir = str(db_dir) if db_dir is not None else os.getenv("DATABASE_DIR")

        if env_dir is None or not env_dir.strip():
            raise RuntimeError(
                "DATABASE_DIR environment variable must be set to a writable "
                "directory path where the SQLite database file will be stored."
            )

        path = Path(env_dir).expanduser()

        if path.exists() and not path.is_dir():
            raise RuntimeError(
                f"DATABASE_DIR={env_dir!r} points to a file, not a directory "
                f"({path}). Please set DATABASE_DIR to a directory path."
            )

        try:
            path.mkdir(parents=True, exist_ok=True)
        except Exception as exc:
            raise RuntimeError(
                f"Failed to create or access database directory at {path}"
            ) from exc

        self.db_dir = path
        self.db_path = self.db_dir / "app.db"
        self.reset = reset

        self._initialized = False

    async def ensure_database(self) -> None:
        """
        Ensure the SQLite database at `self.db_path` carries the SESSION table.

        Subsequent calls on the same instance are no-ops.
        """
        if self._initialized:
            return

        if self.reset and self.db_path.exists():
            try:
                self.db_path.unlink()
            except Exception as exc:
                raise RuntimeError(
                    f"Failed to delete existing database at {self.db_path}"
                ) from exc

        max_attempts = 3
        for attempt in range(1, max_attempts + 1):
            try:
                async with aiosqlite.connect(self.db_path) as db:
                    await db.execute(
                        """
                        CREATE TABLE IF NOT EXISTS SESSION (
                            id TEXT PRIMARY KEY,
                            created_at INTEGER NOT NULL,
                            updated_at INTEGER NOT NULL,
                            payload TEXT NOT NULL
                        )
                        """
                    )
                    await db.execute(
                        "CREATE INDEX IF NOT EXISTS idx_session_created_at ON SESSION(created_at)"
                    )
                    await db.commit()
                break
            except FileNotFoundError:
                # On some platforms a transient missing file error may occur; retry a few times.
                if attempt >= max_attempts:
                    raise
                await asyncio.sleep(0.1 * attempt)

        self._initialized = True

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Async context manager yielding an `aiosqlite.Connection`.

        The schema is created on first use via `ensure_database()`.
        """
        await self.ensure_database()
        conn = await aiosqlite.connect(self.db_path)
        try:
            yield conn
        finally:
            await conn.close()
