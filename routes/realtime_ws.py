"""WebSocket endpoint keeping the consultation session in sync."""

from __future__ import annotations

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket
from starlette.websockets import WebSocketDisconnect

from models.wire_messages import ErrorMessage
from services.realtime.connection_registry import ConnectionRegistry
from services.realtime.session_store import SessionStore
from services.realtime.ws_session import POLICY_VIOLATION, RealtimeSessionHandler

LOGGER = logging.getLogger(__name__)

router = APIRouter()


def _require_session_store(websocket: WebSocket) -> SessionStore:
	store = getattr(websocket.app.state, "session_store", None)
	if store is None:
		raise HTTPException(status_code=500, detail="Session store unavailable")
	return store


@router.websocket("/ws")
async def realtime_socket(
	websocket: WebSocket,
	session_id: Optional[str] = Query(None, alias="sessionId"),
	store: SessionStore = Depends(_require_session_store),
):
	"""Bind one connection to a session and process its frames in order."""
	await websocket.accept()
	if not session_id:
		LOGGER.info("WebSocket connection rejected: missing sessionId")
		await websocket.close(code=POLICY_VIOLATION, reason="Missing sessionId parameter")
		return

	LOGGER.info("WebSocket connected: sessionId=%s", session_id)
	try:
		async with store.lock(session_id):
			await store.get_or_create(session_id)
	except Exception as exc:
		LOGGER.exception("Failed to load session %s", session_id)
		await websocket.send_text(json.dumps(ErrorMessage(error=str(exc)).model_dump()))
		await websocket.close(code=1011, reason="Session unavailable")
		return

	registry: ConnectionRegistry = websocket.app.state.connection_registry
	registry.bind(session_id, websocket)
	handler = RealtimeSessionHandler(store, websocket.app.state.max_frame_bytes)
	open_ = True
	try:
		while open_:
			message = await websocket.receive()
			if message["type"] == "websocket.disconnect":
				break
			# Text and binary frames are both parsed as UTF-8 JSON.
			raw = message.get("text")
			if raw is None:
				raw = message.get("bytes") or b""
			try:
				open_ = await handler.handle(websocket, session_id, raw)
			except WebSocketDisconnect:
				break
	finally:
		registry.unbind(session_id, websocket)
		LOGGER.info("WebSocket disconnected: sessionId=%s", session_id)
