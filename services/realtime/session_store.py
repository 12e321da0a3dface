"""Session stores: in-memory by default, SQLite-backed for durability."""

from __future__ import annotations

import asyncio
import copy
import logging
import secrets
import weakref
from typing import Dict, List, Optional

import aiosqlite

from dal.session_dal import SessionDAL
from models.session_models import Session
from services.realtime.errors import SessionStoreError
from utils.database_init import AsyncDatabaseInitializer

LOGGER = logging.getLogger(__name__)


def generate_session_id() -> str:
	"""Return a short random hex identifier."""
	return secrets.token_hex(5)


class SessionStore:
	"""Keep whole `Session` records keyed by id.

	Reads and writes exchange deep copies, so a caller's changes become
	visible only once passed to `save`. Callers that read-modify-write hold
	`lock(session_id)` for the whole cycle.
	"""

	backend = "memory"

	def __init__(self) -> None:
		self._sessions: Dict[str, Session] = {}
		# Entries vanish once no coroutine holds or waits on the lock.
		self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

	def lock(self, session_id: str) -> asyncio.Lock:
		"""Return the lock serializing mutations of `session_id`."""
		lock = self._locks.get(session_id)
		if lock is None:
			lock = self._locks[session_id] = asyncio.Lock()
		return lock

	async def get(self, session_id: str) -> Session:
		"""Return a session or raise KeyError if missing."""
		state = await self._load(session_id)
		if state is None:
			raise KeyError(f"Session {session_id} not found")
		return state

	async def create(self, session_id: Optional[str] = None) -> Session:
		"""Create and store an empty session, generating an id when none is given."""
		state = Session(id=session_id or generate_session_id())
		await self.save(state)
		return state

	async def get_or_create(self, session_id: str) -> Session:
		"""Return the stored session, creating an empty one on first use."""
		state = await self._load(session_id)
		if state is not None:
			return state
		LOGGER.info("Session not found, creating new: %s", session_id)
		return await self.create(session_id)

	async def save(self, session: Session) -> None:
		"""Overwrite the whole record stored under `session.id`."""
		self._sessions[session.id] = copy.deepcopy(session)

	async def list_sessions(self, limit: int = 100) -> List[Session]:
		"""Return stored sessions, newest first."""
		ordered = sorted(self._sessions.values(), key=lambda s: s.created_at, reverse=True)
		return [copy.deepcopy(s) for s in ordered[:limit]]

	async def _load(self, session_id: str) -> Optional[Session]:
		state = self._sessions.get(session_id)
		return copy.deepcopy(state) if state is not None else None


class SqliteSessionStore(SessionStore):
	"""Session store persisting each aggregate as a row in SQLite."""

	backend = "sqlite"

	def __init__(self, db_initializer: AsyncDatabaseInitializer) -> None:
		super().__init__()
		self.dal = SessionDAL(db_initializer)

	async def save(self, session: Session) -> None:
		try:
			await self.dal.upsert_session(session)
		except aiosqlite.Error as exc:
			raise SessionStoreError(f"Failed to save session {session.id}: {exc}") from exc

	async def list_sessions(self, limit: int = 100) -> List[Session]:
		try:
			return await self.dal.list_sessions(limit=limit)
		except (aiosqlite.Error, KeyError, TypeError, ValueError) as exc:
			raise SessionStoreError(f"Failed to list sessions: {exc}") from exc

	async def _load(self, session_id: str) -> Optional[Session]:
		try:
			return await self.dal.get_session_by_id(session_id)
		except (aiosqlite.Error, KeyError, TypeError, ValueError) as exc:
			# Undecodable rows are store errors, never missing sessions.
			raise SessionStoreError(f"Failed to load session {session_id}: {exc}") from exc
