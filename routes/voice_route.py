"""Pass-through route for the voice agent signed URL."""

import os
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request

from services.voice_agent import VoiceAgentClient, VoiceAgentError

router = APIRouter(prefix="/api")


@router.get("/elevenlabs/signed-url")
async def get_signed_url(request: Request, agent_id: Optional[str] = Query(None)):
	"""Return a signed conversation URL for the requested (or default) agent."""
	client = VoiceAgentClient(
		request.app.state.http_client,
		api_key=os.getenv("ELEVENLABS_API_KEY"),
		default_agent_id=os.getenv("ELEVENLABS_AGENT_ID"),
	)
	try:
		return await client.signed_url(agent_id)
	except VoiceAgentError as exc:
		raise HTTPException(status_code=500, detail=str(exc))
	except Exception as exc:
		raise HTTPException(status_code=500, detail="Failed to get signed URL") from exc
