"""Dispatch realtime websocket messages against the bound session."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from fastapi import WebSocket

from models.session_models import Session
from models.wire_messages import (
	AgentNoteMessage,
	CallFinishedMessage,
	ErrorMessage,
	InboundMessage,
	OutboundMessage,
	PingMessage,
	PongMessage,
	TodoConfirmMessage,
	TodoPreviewMessage,
	UIResponseMessage,
)
from services.realtime import approval_log
from services.realtime.brief_merge import merge_brief, updates_for_choice
from services.realtime.errors import ProtocolError
from services.realtime.frame_parser import DEFAULT_MAX_FRAME_BYTES, parse_frame
from services.realtime.session_store import SessionStore

LOGGER = logging.getLogger(__name__)

NORMAL_CLOSURE = 1000
POLICY_VIOLATION = 1008


@dataclass
class CloseDirective:
	code: int
	reason: str


@dataclass
class HandleResult:
	"""Replies for one inbound frame and whether to close afterwards."""

	replies: List[OutboundMessage] = field(default_factory=list)
	close: Optional[CloseDirective] = None


def _error_detail(exc: Exception) -> str:
	if isinstance(exc, KeyError) and exc.args:
		return str(exc.args[0])
	return str(exc) or exc.__class__.__name__


class RealtimeSessionHandler:
	"""Route websocket messages for a single consultation session.

	Frames from one connection are handled one at a time; mutations run
	under the store's per-session lock so concurrent connections sharing a
	session id cannot lose each other's updates.
	"""

	def __init__(self, store: SessionStore, max_frame_bytes: int = DEFAULT_MAX_FRAME_BYTES) -> None:
		self.store = store
		self.max_frame_bytes = max_frame_bytes

	async def handle(self, websocket: WebSocket, session_id: str, raw: Union[str, bytes]) -> bool:
		"""Process one inbound frame; return False once the connection was closed."""
		result = await self.dispatch(session_id, raw)
		for reply in result.replies:
			await self._send(websocket, reply)
		if result.close is not None:
			await websocket.close(code=result.close.code, reason=result.close.reason)
			return False
		return True

	async def dispatch(self, session_id: str, raw: Union[str, bytes]) -> HandleResult:
		"""Apply one frame to the session and compute the replies.

		Failures never propagate: they are logged and turned into an ERROR
		reply, and the stored session is left as it was before the frame.
		"""
		try:
			message = parse_frame(raw, self.max_frame_bytes)
			LOGGER.info("Received WS message: %s", json.dumps(message.model_dump())[:200])
			if isinstance(message, PingMessage):
				return HandleResult(replies=[PongMessage(ts=message.ts)])
			async with self.store.lock(session_id):
				session = await self.store.get(session_id)
				result, changed = self._apply(session, message)
				if changed:
					await self.store.save(session)
			return result
		except ProtocolError as exc:
			LOGGER.warning("Rejected WS frame for session %s: %s", session_id, exc)
			return HandleResult(replies=[ErrorMessage(error=_error_detail(exc))])
		except Exception as exc:
			LOGGER.exception("Error handling WebSocket message for session %s", session_id)
			return HandleResult(replies=[ErrorMessage(error=_error_detail(exc))])

	def _apply(self, session: Session, message: InboundMessage) -> Tuple[HandleResult, bool]:
		if isinstance(message, UIResponseMessage):
			return self._on_ui_response(session, message), True
		if isinstance(message, TodoConfirmMessage):
			return self._on_todo_confirm(session, message), True
		if isinstance(message, AgentNoteMessage):
			return self._on_agent_note(session, message)
		raise ProtocolError(f"Unsupported message type: {message.type!r}")

	def _on_ui_response(self, session: Session, message: UIResponseMessage) -> HandleResult:
		approval_log.record(session, approval_log.ui_response_text(message.promptId, message.selectedOptionId))
		updates = updates_for_choice(message.promptId, message.selectedOptionId)
		session.brief = merge_brief(session.brief, updates)
		LOGGER.info("Updated brief for %s: %s", session.id, updates)
		return HandleResult()

	def _on_todo_confirm(self, session: Session, message: TodoConfirmMessage) -> HandleResult:
		approval_log.record(session, approval_log.todo_confirm_text(message.ok))
		if message.ok:
			LOGGER.info("Client accepted todos, finishing call: %s", session.id)
			return HandleResult(
				replies=[CallFinishedMessage(sessionId=session.id)],
				close=CloseDirective(code=NORMAL_CLOSURE, reason="Call finished"),
			)
		LOGGER.info("Client rejected todos, sending revised preview: %s", session.id)
		return HandleResult(replies=[TodoPreviewMessage(items=list(approval_log.FALLBACK_TODO_ITEMS))])

	def _on_agent_note(self, session: Session, message: AgentNoteMessage) -> Tuple[HandleResult, bool]:
		note = message.message.strip()
		if not note:
			LOGGER.debug("Ignoring empty agent note for %s", session.id)
			return HandleResult(), False
		approval_log.record(session, approval_log.agent_note_text(note))
		LOGGER.info("Agent note recorded: %s", note[:100])
		return HandleResult(), True

	async def _send(self, websocket: WebSocket, payload: OutboundMessage) -> None:
		await websocket.send_text(json.dumps(payload.model_dump()))
