"""Apply partial updates to a painting brief."""

from __future__ import annotations

import copy
from typing import Any, Dict, Mapping, Optional

from models.session_models import PaintingBrief

# Wire key -> attribute name.
SCALAR_FIELDS = {
	"style": "style",
	"palette": "palette",
	"finish": "finish",
	"timeline": "timeline",
	"budget": "budget",
}
LIST_FIELDS = {
	"vibe": "vibe",
	"rooms": "rooms",
	"openQuestions": "open_questions",
}
CONSTRAINTS_FIELD = "constraints"

# Prompt id prefixes that target a scalar field directly; checked in order.
PROMPT_FIELD_PREFIXES = ("style", "palette", "finish")


def merge_brief(current: PaintingBrief, updates: Mapping[str, Any]) -> PaintingBrief:
	"""Return a new brief with `updates` applied to `current`.

	`constraints` is merged key-wise into the existing mapping; every other
	known key replaces the current value wholesale, lists included. Unknown
	keys and malformed values are ignored so the merge never fails. Neither
	argument is modified.
	"""
	merged = copy.deepcopy(current)
	for key, value in updates.items():
		if key == CONSTRAINTS_FIELD:
			if isinstance(value, Mapping):
				merged.constraints.update(copy.deepcopy(dict(value)))
		elif key in SCALAR_FIELDS:
			if value is None or isinstance(value, str):
				setattr(merged, SCALAR_FIELDS[key], value)
		elif key in LIST_FIELDS:
			if isinstance(value, (list, tuple)):
				setattr(merged, LIST_FIELDS[key], [str(item) for item in value])
	return merged


def field_for_prompt(prompt_id: str) -> Optional[str]:
	"""Return the scalar brief field a prompt targets, or None for constraints."""
	lowered = prompt_id.lower()
	for prefix in PROMPT_FIELD_PREFIXES:
		if lowered.startswith(prefix):
			return prefix
	return None


def updates_for_choice(prompt_id: str, selected_option_id: str) -> Dict[str, Any]:
	"""Build the partial brief implied by picking `selected_option_id` on `prompt_id`."""
	field = field_for_prompt(prompt_id)
	if field is not None:
		return {field: selected_option_id}
	return {CONSTRAINTS_FIELD: {prompt_id: selected_option_id}}
