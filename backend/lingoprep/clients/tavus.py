from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from ..errors import ConfigurationError
from ..settings import settings
from .base import ProviderClient

DEFAULT_VOICE_SETTINGS: Dict[str, Any] = {
	"stability": 0.5,
	"similarity_boost": 0.75,
	"style": 0.0,
	"use_speaker_boost": True,
}


class TavusClient(ProviderClient):
	"""Replica, video and conversation lookups against the Tavus v2 API.

	Every call accepts an ``api_key`` so a user's own Tavus key can replace the
	server key for that request.
	"""

	service = "tavus"

	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.api_key = api_key or settings.tavus_api_key
		super().__init__(base_url or settings.tavus_base_url, transport=transport)

	def _headers(self, api_key: Optional[str] = None) -> Dict[str, str]:
		key = api_key or self.api_key
		if not key:
			raise ConfigurationError("TAVUS_API_KEY")
		return {"x-api-key": key}

	async def check_replicas(self) -> None:
		"""HEAD the replica listing; raises unless the provider answers 2xx."""
		await self._request("HEAD", "/replicas", headers=self._headers())

	async def list_replicas(self, api_key: Optional[str] = None) -> Dict[str, Any]:
		return await self._json("GET", "/replicas", headers=self._headers(api_key))

	async def get_video(self, video_id: str, api_key: Optional[str] = None) -> Dict[str, Any]:
		return await self._json("GET", f"/videos/{video_id}", headers=self._headers(api_key))

	async def create_video(
		self,
		replica_id: str,
		script: str,
		*,
		background_url: Optional[str] = None,
		voice_settings: Optional[Dict[str, Any]] = None,
		api_key: Optional[str] = None,
	) -> Dict[str, Any]:
		body: Dict[str, Any] = {
			"replica_id": replica_id,
			"script": script.strip(),
			"voice_settings": {**DEFAULT_VOICE_SETTINGS, **(voice_settings or {})},
		}
		if background_url:
			body["background_url"] = background_url
		return await self._json("POST", "/videos", headers=self._headers(api_key), json=body)

	async def get_conversation(self, conversation_id: str) -> Dict[str, Any]:
		return await self._json(
			"GET",
			f"/conversations/{conversation_id}",
			headers={**self._headers(), "Content-Type": "application/json"},
		)
