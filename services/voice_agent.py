"""Client for the voice agent's signed-URL exchange."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

LOGGER = logging.getLogger(__name__)

SIGNED_URL_ENDPOINT = "https://api.elevenlabs.io/v1/convai/conversation/get-signed-url"


class VoiceAgentError(RuntimeError):
	"""The signed URL could not be obtained."""


class VoiceAgentClient:
	"""Fetch short-lived conversation URLs for the browser voice widget."""

	def __init__(
		self,
		http_client: httpx.AsyncClient,
		api_key: Optional[str],
		default_agent_id: Optional[str] = None,
		endpoint: str = SIGNED_URL_ENDPOINT,
	) -> None:
		if http_client is None:
			raise ValueError("httpx.AsyncClient is required.")
		self.http_client = http_client
		self.api_key = api_key
		self.default_agent_id = default_agent_id
		self.endpoint = endpoint

	async def signed_url(self, agent_id: Optional[str] = None) -> Dict[str, Any]:
		"""Return the upstream JSON body carrying the signed URL.

		Raises:
			VoiceAgentError: Agent id or API key is not configured, the
				request failed, or the upstream answered with a non-2xx status.
		"""
		agent = agent_id or self.default_agent_id
		if not agent:
			raise VoiceAgentError("ElevenLabs agent ID not configured")
		if not self.api_key:
			raise VoiceAgentError("ElevenLabs API key not configured")

		try:
			response = await self.http_client.get(
				self.endpoint,
				params={"agent_id": agent},
				headers={"xi-api-key": self.api_key},
			)
		except httpx.HTTPError as exc:
			raise VoiceAgentError(f"ElevenLabs request failed: {exc}") from exc

		if response.is_error:
			LOGGER.error("ElevenLabs API error: %s - %s", response.status_code, response.text[:500])
			raise VoiceAgentError(f"ElevenLabs API returned {response.status_code}")

		LOGGER.info("Retrieved signed URL for agent: %s", agent)
		return response.json()
