"""FastAPI routes for consultation sessions."""

from typing import Any, Dict, List, Literal

from fastapi import APIRouter, Body, HTTPException, Query, Request
from pydantic import BaseModel

from controllers.session_controller import (
	append_message,
	get_session,
	list_sessions,
	propose_todos,
	push_prompt,
	start_session,
	update_brief,
)
from models.wire_messages import UIPromptOption, UIPromptMessage

router = APIRouter(prefix="/api")


class MessagePayload(BaseModel):
	text: str
	role: Literal["client", "agent"] = "client"


class PromptPayload(BaseModel):
	promptId: str
	title: str
	options: List[UIPromptOption] = []


class TodosPayload(BaseModel):
	items: List[str]


@router.post("/session", status_code=201)
async def start_session_route(request: Request):
	try:
		return await start_session(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/sessions")
async def list_sessions_route(request: Request, limit: int = Query(100, ge=1, le=1000)):
	try:
		return await list_sessions(request, limit)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/session/{session_id}")
async def get_session_route(request: Request, session_id: str):
	try:
		return await get_session(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/session/{session_id}/messages")
async def post_message_route(request: Request, session_id: str, payload: MessagePayload):
	try:
		return await append_message(request, session_id, payload.role, payload.text)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.patch("/session/{session_id}/brief")
async def patch_brief_route(request: Request, session_id: str, updates: Dict[str, Any] = Body(...)):
	try:
		return await update_brief(request, session_id, updates)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/session/{session_id}/prompts")
async def post_prompt_route(request: Request, session_id: str, payload: PromptPayload):
	try:
		prompt = UIPromptMessage(promptId=payload.promptId, title=payload.title, options=payload.options)
		return await push_prompt(request, session_id, prompt)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/session/{session_id}/todos")
async def post_todos_route(request: Request, session_id: str, payload: TodosPayload):
	try:
		return await propose_todos(request, session_id, payload.items)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))
