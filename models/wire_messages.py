"""Message models exchanged over the session websocket."""

from __future__ import annotations

from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, Field, StrictBool, StrictFloat, StrictInt, TypeAdapter


# Client -> server


class UIResponseMessage(BaseModel):
	"""The client picked an option from a rendered prompt."""

	type: Literal["UI_RESPONSE"]
	promptId: str
	selectedOptionId: str


class TodoConfirmMessage(BaseModel):
	"""The client accepted or rejected the proposed to-do list."""

	type: Literal["TODO_CONFIRM"]
	ok: StrictBool


class AgentNoteMessage(BaseModel):
	"""Free-text note from the voice agent for the audit trail."""

	type: Literal["AGENT_NOTE"]
	message: str = ""


class PingMessage(BaseModel):
	type: Literal["PING"]
	ts: Union[StrictInt, StrictFloat]


InboundMessage = Annotated[
	Union[UIResponseMessage, TodoConfirmMessage, AgentNoteMessage, PingMessage],
	Field(discriminator="type"),
]

INBOUND_ADAPTER: TypeAdapter = TypeAdapter(InboundMessage)

INBOUND_TYPES = frozenset({"UI_RESPONSE", "TODO_CONFIRM", "AGENT_NOTE", "PING"})


# Server -> client


class UIPromptOption(BaseModel):
	id: str
	label: str
	image: str = ""


class UIPromptMessage(BaseModel):
	"""Structured choice for the browser UI to render."""

	type: Literal["UI_PROMPT"] = "UI_PROMPT"
	promptId: str
	title: str
	options: List[UIPromptOption] = []


class TodoPreviewMessage(BaseModel):
	type: Literal["TODO_PREVIEW"] = "TODO_PREVIEW"
	items: List[str]


class CallFinishedMessage(BaseModel):
	type: Literal["CALL_FINISHED"] = "CALL_FINISHED"
	sessionId: str


class PongMessage(BaseModel):
	type: Literal["PONG"] = "PONG"
	ts: Union[int, float]


class ErrorMessage(BaseModel):
	type: Literal["ERROR"] = "ERROR"
	error: str


OutboundMessage = Union[
	UIPromptMessage,
	TodoPreviewMessage,
	CallFinishedMessage,
	PongMessage,
	ErrorMessage,
]
