"""Print the brief and approval log of every session in the SQLite store.

This is the review view of the business dashboard in plain text. It reuses
the same `DATABASE_DIR` behavior as the application via
`utils.database_init.AsyncDatabaseInitializer`.

Run: set the `DATABASE_DIR` environment variable and run
      `python print_sessions.py [limit]`.
"""
import asyncio
import sys
from datetime import datetime, timezone
from typing import List

from models.session_models import Session
from services.realtime.session_store import SqliteSessionStore
from utils.database_init import AsyncDatabaseInitializer


def _fmt_ts(ts_ms: int) -> str:
    return datetime.fromtimestamp(ts_ms / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def format_session(session: Session) -> List[str]:
    """Return the printable lines describing one session.

    Args:
        session: The session to render.

    Returns:
        Lines for the header, non-empty brief fields, to-dos and approvals.
    """
    lines = [f"Session {session.id} (created {_fmt_ts(session.created_at)} UTC)"]
    for key, value in session.brief.to_dict().items():
        if value in (None, [], {}):
            continue
        lines.append(f"  {key}: {value}")
    for todo in session.todos:
        mark = "x" if todo.status == "done" else " "
        lines.append(f"  [{mark}] {todo.text}")
    for approval in session.approvals:
        lines.append(f"  {_fmt_ts(approval.ts)}  {approval.text}")
    return lines


async def main(limit: int = 100) -> None:
    """Print every stored session, newest first."""
    store = SqliteSessionStore(AsyncDatabaseInitializer())
    for session in await store.list_sessions(limit=limit):
        print("\n".join(format_session(session)))
        print()


if __name__ == "__main__":
    asyncio.run(main(int(sys.argv[1]) if len(sys.argv) > 1 else 100))
