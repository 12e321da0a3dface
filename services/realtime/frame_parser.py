"""Turn raw websocket frames into validated inbound messages."""

from __future__ import annotations

import json
from typing import Any, Union

from pydantic import ValidationError

from models.wire_messages import INBOUND_ADAPTER, INBOUND_TYPES, InboundMessage
from services.realtime.errors import MessageParseError, UnknownMessageType

DEFAULT_MAX_FRAME_BYTES = 64 * 1024


def _describe_validation_error(exc: ValidationError) -> str:
	"""Return a short human-readable summary of the first few schema errors."""
	parts = []
	for err in exc.errors()[:3]:
		location = ".".join(str(loc) for loc in err.get("loc", ()) if loc not in INBOUND_TYPES)
		parts.append(f"{location or 'message'}: {err.get('msg', 'invalid value')}")
	return "; ".join(parts)


def parse_frame(raw: Union[str, bytes], max_bytes: int = DEFAULT_MAX_FRAME_BYTES) -> InboundMessage:
	"""Parse one frame into a typed inbound message.

	Args:
		raw: Text or binary payload as received from the socket.
		max_bytes: Upper bound on the UTF-8 encoded payload size.

	Returns:
		One of the inbound message models, selected by its `type` field.

	Raises:
		MessageParseError: The frame is oversized, not JSON, not an object,
			or does not match the schema for its type.
		UnknownMessageType: The `type` discriminator is missing or unknown.
	"""
	data = raw.encode("utf-8") if isinstance(raw, str) else bytes(raw)
	if len(data) > max_bytes:
		raise MessageParseError(f"Frame exceeds {max_bytes} bytes")
	try:
		payload: Any = json.loads(data.decode("utf-8"))
	except (UnicodeDecodeError, json.JSONDecodeError) as exc:
		raise MessageParseError(f"Payload must be JSON: {exc}") from exc
	if not isinstance(payload, dict):
		raise MessageParseError("Payload must be a JSON object")

	message_type = payload.get("type")
	if not isinstance(message_type, str) or message_type not in INBOUND_TYPES:
		raise UnknownMessageType(f"Unsupported message type: {message_type!r}")
	try:
		return INBOUND_ADAPTER.validate_python(payload)
	except ValidationError as exc:
		raise MessageParseError(f"Invalid {message_type} message: {_describe_validation_error(exc)}") from exc
