"""Track open websocket connections per session for server push."""

from __future__ import annotations

import json
import logging
from typing import Dict, List

from fastapi import WebSocket

from models.wire_messages import OutboundMessage

LOGGER = logging.getLogger(__name__)


class ConnectionRegistry:
	"""Map each session id to the websockets currently bound to it.

	Several connections may share one session id; the registry does not
	order or deduplicate them.
	"""

	def __init__(self) -> None:
		self._connections: Dict[str, List[WebSocket]] = {}

	def bind(self, session_id: str, websocket: WebSocket) -> None:
		self._connections.setdefault(session_id, []).append(websocket)

	def unbind(self, session_id: str, websocket: WebSocket) -> None:
		bound = self._connections.get(session_id)
		if not bound:
			return
		if websocket in bound:
			bound.remove(websocket)
		if not bound:
			del self._connections[session_id]

	def connections_for(self, session_id: str) -> List[WebSocket]:
		return list(self._connections.get(session_id, ()))

	async def push(self, session_id: str, message: OutboundMessage) -> int:
		"""Send `message` to every connection bound to `session_id`.

		Returns:
			The number of connections the frame was delivered to. Connections
			that fail to accept the frame are unbound.
		"""
		text = json.dumps(message.model_dump())
		delivered = 0
		for websocket in self.connections_for(session_id):
			try:
				await websocket.send_text(text)
			except Exception as exc:
				LOGGER.warning("Dropping dead connection for session %s: %s", session_id, exc)
				self.unbind(session_id, websocket)
				continue
			delivered += 1
		return delivered
