from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from ..errors import ConfigurationError
from ..settings import settings
from .base import ProviderClient


class ElevenLabsClient(ProviderClient):
	service = "elevenlabs"

	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.api_key = api_key or settings.elevenlabs_api_key
		super().__init__(base_url or settings.elevenlabs_base_url, transport=transport)

	def _headers(self) -> Dict[str, str]:
		if not self.api_key:
			raise ConfigurationError("ELEVENLABS_API_KEY")
		return {"xi-api-key": self.api_key}

	async def get_user(self) -> None:
		# Any 2xx counts; the body is not read
		await self._request("GET", "/user", headers=self._headers())

	async def list_voices(self) -> Dict[str, Any]:
		return await self._json("GET", "/voices", headers={**self._headers(), "Accept": "application/json"})

	async def text_to_speech(self, text: str, voice_id: str, model_id: str) -> bytes:
		"""Synthesize ``text`` and return the MP3 bytes."""
		r = await self._request(
			"POST",
			f"/text-to-speech/{voice_id}",
			headers={**self._headers(), "Accept": "audio/mpeg"},
			json={
				"text": text,
				"model_id": model_id,
				"voice_settings": {"stability": 0.5, "similarity_boost": 0.5},
			},
		)
		return r.content
