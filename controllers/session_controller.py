"""Session lifecycle helpers behind the HTTP routes."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping

from fastapi import HTTPException, Request

from models.session_models import Session, SessionMessage, TodoItem
from models.wire_messages import TodoPreviewMessage, UIPromptMessage
from services.realtime import approval_log
from services.realtime.brief_merge import merge_brief
from services.realtime.connection_registry import ConnectionRegistry
from services.realtime.session_store import SessionStore

LOGGER = logging.getLogger(__name__)


def _store(request: Request) -> SessionStore:
	return request.app.state.session_store


def _registry(request: Request) -> ConnectionRegistry:
	return request.app.state.connection_registry


async def _require_session(store: SessionStore, session_id: str) -> Session:
	"""Return the session or raise a 404; sessions are never deleted once created."""
	try:
		return await store.get(session_id)
	except KeyError as exc:
		raise HTTPException(status_code=404, detail="Session not found") from exc


async def start_session(request: Request) -> Dict[str, Any]:
	"""Create a new empty session and return its id."""
	state = await _store(request).create()
	LOGGER.info("Created new session: %s", state.id)
	return {"sessionId": state.id}


async def get_session(request: Request, session_id: str) -> Dict[str, Any]:
	"""Return the full session record."""
	state = await _require_session(_store(request), session_id)
	return state.to_dict()


async def list_sessions(request: Request, limit: int = 100) -> List[Dict[str, Any]]:
	"""Summaries of stored sessions for the review dashboard, newest first."""
	sessions = await _store(request).list_sessions(limit=limit)
	return [
		{
			"id": state.id,
			"createdAt": state.created_at,
			"brief": state.brief.to_dict(),
			"approvalCount": len(state.approvals),
			"todoCount": len(state.todos),
		}
		for state in sessions
	]


async def append_message(request: Request, session_id: str, role: str, text: str) -> Dict[str, Any]:
	"""Add a transcript turn to the session conversation."""
	store = _store(request)
	await _require_session(store, session_id)
	async with store.lock(session_id):
		state = await store.get(session_id)
		state.messages.append(SessionMessage(role=role, text=text.strip()))
		await store.save(state)
	return {"sessionId": session_id, "messageCount": len(state.messages)}


async def update_brief(request: Request, session_id: str, updates: Mapping[str, Any]) -> Dict[str, Any]:
	"""Merge a partial brief into the session and log the change."""
	store = _store(request)
	await _require_session(store, session_id)
	async with store.lock(session_id):
		state = await store.get(session_id)
		state.brief = merge_brief(state.brief, updates)
		approval_log.record(state, approval_log.brief_update_text(updates.keys()))
		await store.save(state)
	return {"sessionId": session_id, "brief": state.brief.to_dict()}


async def push_prompt(request: Request, session_id: str, prompt: UIPromptMessage) -> Dict[str, Any]:
	"""Deliver a UI prompt to every connection bound to the session."""
	await _require_session(_store(request), session_id)
	delivered = await _registry(request).push(session_id, prompt)
	LOGGER.info("Pushed UI_PROMPT %s to %d connection(s) of %s", prompt.promptId, delivered, session_id)
	return {"sessionId": session_id, "delivered": delivered}


async def propose_todos(request: Request, session_id: str, items: List[str]) -> Dict[str, Any]:
	"""Replace the session to-do list and offer it to the client for confirmation."""
	texts = [item.strip() for item in items if item and item.strip()]
	if not texts:
		raise HTTPException(status_code=400, detail="At least one to-do item is required")
	store = _store(request)
	await _require_session(store, session_id)
	async with store.lock(session_id):
		state = await store.get(session_id)
		state.todos = [TodoItem(id=f"todo-{idx}", text=text) for idx, text in enumerate(texts, start=1)]
		approval_log.record(state, approval_log.todos_proposed_text(len(texts)))
		await store.save(state)
	delivered = await _registry(request).push(session_id, TodoPreviewMessage(items=texts))
	return {
		"sessionId": session_id,
		"todos": [todo.to_dict() for todo in state.todos],
		"delivered": delivered,
	}
