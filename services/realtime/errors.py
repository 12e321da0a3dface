"""Exceptions raised while handling realtime session traffic."""


class ProtocolError(ValueError):
	"""An inbound frame could not be turned into a known message."""


class MessageParseError(ProtocolError):
	"""The frame is not valid JSON or does not match its message schema."""


class UnknownMessageType(ProtocolError):
	"""The frame parsed but carries a `type` the protocol does not define."""


class SessionStoreError(RuntimeError):
	"""The backing session store failed to read or write a record."""
