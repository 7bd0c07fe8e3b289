from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from ..errors import ConfigurationError
from ..settings import settings
from .base import ProviderClient


class AppwriteClient(ProviderClient):
	"""Account operations against the Appwrite REST API.

	Calls made on behalf of a user carry the session secret in
	``X-Appwrite-Session``. Session creation additionally sends the server key
	so the response includes the secret we store in the session cookie.
	"""

	service = "appwrite"

	def __init__(
		self,
		endpoint: Optional[str] = None,
		project_id: Optional[str] = None,
		api_key: Optional[str] = None,
		*,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.endpoint = endpoint or settings.appwrite_endpoint
		self.project_id = project_id or settings.appwrite_project_id
		self.api_key = api_key or settings.appwrite_api_key
		headers = {"Content-Type": "application/json"}
		if self.project_id:
			headers["X-Appwrite-Project"] = self.project_id
		super().__init__(self.endpoint or "", headers=headers, transport=transport)

	def ensure_configured(self) -> None:
		if not self.endpoint:
			raise ConfigurationError("APPWRITE_ENDPOINT")
		if not self.project_id:
			raise ConfigurationError("APPWRITE_PROJECT_ID")

	async def get_account(self, session_secret: str) -> Dict[str, Any]:
		"""Return the user owning ``session_secret`` (Appwrite ``account.get``)."""
		self.ensure_configured()
		return await self._json("GET", "/account", headers={"X-Appwrite-Session": session_secret})

	async def delete_current_session(self, session_secret: str) -> None:
		self.ensure_configured()
		await self._request("DELETE", "/account/sessions/current", headers={"X-Appwrite-Session": session_secret})

	async def create_email_session(self, email: str, password: str) -> Dict[str, Any]:
		self.ensure_configured()
		# Without the server key Appwrite leaves the session secret empty
		if not self.api_key:
			raise ConfigurationError("APPWRITE_API_KEY")
		return await self._json(
			"POST",
			"/account/sessions/email",
			headers={"X-Appwrite-Key": self.api_key},
			json={"email": email, "password": password},
		)
