"""Append-only audit trail of decisions taken during a consultation."""

from __future__ import annotations

from typing import Iterable, List, Optional

from models.session_models import Approval, Session, now_ms

# Re-offered to the client when it rejects the proposed to-do list.
FALLBACK_TODO_ITEMS: List[str] = [
	"Review and finalize painting style preferences",
	"Confirm color palette selections",
	"Schedule initial consultation call",
	"Review project timeline and milestones",
	"Prepare room measurements and photos",
]


def record(session: Session, text: str, ts: Optional[int] = None) -> Approval:
	"""Append a new approval to `session` and return it."""
	approval = Approval(ts=now_ms() if ts is None else ts, text=text)
	session.approvals.append(approval)
	return approval


def ui_response_text(prompt_id: str, selected_option_id: str) -> str:
	return f"UI_RESPONSE {prompt_id} -> {selected_option_id}"


def todo_confirm_text(ok: bool) -> str:
	return f"TODO_CONFIRM ok={'true' if ok else 'false'}"


def agent_note_text(message: str) -> str:
	return f"AGENT_NOTE: {message}"


def brief_update_text(keys: Iterable[str]) -> str:
	return f"BRIEF_UPDATE {', '.join(sorted(keys))}"


def todos_proposed_text(count: int) -> str:
	return f"TODOS_PROPOSED {count} item{'s' if count != 1 else ''}"
