"""Session domain models for the painting consultation."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

ROLES = ("client", "agent")
TODO_STATUSES = ("todo", "done")


def now_ms() -> int:
	"""Return the current time in milliseconds since the epoch."""
	return int(time.time() * 1000)


@dataclass
class SessionMessage:
	"""One conversation turn supplied by the transcript source."""

	role: str
	text: str
	ts: int = field(default_factory=now_ms)

	def __post_init__(self) -> None:
		if self.role not in ROLES:
			raise ValueError(f"Unknown message role: {self.role!r}")

	def to_dict(self) -> Dict[str, Any]:
		return {"role": self.role, "text": self.text, "ts": self.ts}

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "SessionMessage":
		return cls(role=data["role"], text=data["text"], ts=int(data["ts"]))


@dataclass
class TodoItem:
	"""A follow-up task produced once the brief is complete."""

	id: str
	text: str
	status: str = "todo"

	def __post_init__(self) -> None:
		if self.status not in TODO_STATUSES:
			raise ValueError(f"Unknown to-do status: {self.status!r}")

	def to_dict(self) -> Dict[str, Any]:
		return {"id": self.id, "text": self.text, "status": self.status}

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "TodoItem":
		return cls(id=data["id"], text=data["text"], status=data.get("status", "todo"))


@dataclass(frozen=True)
class Approval:
	"""Immutable audit entry recording a state-changing decision."""

	ts: int
	text: str

	def to_dict(self) -> Dict[str, Any]:
		return {"ts": self.ts, "text": self.text}

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "Approval":
		return cls(ts=int(data["ts"]), text=data["text"])


@dataclass
class PaintingBrief:
	"""Structured description of the desired artwork.

	Scalar fields are replaced on update, list fields are replaced wholesale,
	and `constraints` is merged key by key (see `services.realtime.brief_merge`).
	"""

	style: Optional[str] = None
	palette: Optional[str] = None
	finish: Optional[str] = None
	vibe: List[str] = field(default_factory=list)
	rooms: List[str] = field(default_factory=list)
	constraints: Dict[str, Any] = field(default_factory=dict)
	timeline: Optional[str] = None
	budget: Optional[str] = None
	open_questions: List[str] = field(default_factory=list)

	def to_dict(self) -> Dict[str, Any]:
		return {
			"style": self.style,
			"palette": self.palette,
			"finish": self.finish,
			"vibe": list(self.vibe),
			"rooms": list(self.rooms),
			"constraints": dict(self.constraints),
			"timeline": self.timeline,
			"budget": self.budget,
			"openQuestions": list(self.open_questions),
		}

	@classmethod
	def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PaintingBrief":
		data = data or {}
		return cls(
			style=data.get("style"),
			palette=data.get("palette"),
			finish=data.get("finish"),
			vibe=list(data.get("vibe") or []),
			rooms=list(data.get("rooms") or []),
			constraints=dict(data.get("constraints") or {}),
			timeline=data.get("timeline"),
			budget=data.get("budget"),
			open_questions=list(data.get("openQuestions") or []),
		)


@dataclass
class Session:
	"""Root record for one consultation: brief, to-dos, and approval log."""

	id: str
	created_at: int = field(default_factory=now_ms)
	messages: List[SessionMessage] = field(default_factory=list)
	brief: PaintingBrief = field(default_factory=PaintingBrief)
	todos: List[TodoItem] = field(default_factory=list)
	approvals: List[Approval] = field(default_factory=list)

	def to_dict(self) -> Dict[str, Any]:
		"""Return the camelCase JSON shape served to the UI and dashboard."""
		return {
			"id": self.id,
			"createdAt": self.created_at,
			"messages": [msg.to_dict() for msg in self.messages],
			"brief": self.brief.to_dict(),
			"todos": [todo.to_dict() for todo in self.todos],
			"approvals": [approval.to_dict() for approval in self.approvals],
		}

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "Session":
		return cls(
			id=data["id"],
			created_at=int(data["createdAt"]),
			messages=[SessionMessage.from_dict(m) for m in data.get("messages") or []],
			brief=PaintingBrief.from_dict(data.get("brief")),
			todos=[TodoItem.from_dict(t) for t in data.get("todos") or []],
			approvals=[Approval.from_dict(a) for a in data.get("approvals") or []],
		)
