"""
Pytest config.

Every upstream (Appwrite, Tavus, ElevenLabs, Gemini) is replaced by one
``httpx.MockTransport`` routed through ``FakeUpstream``. The provider clients are
swapped in through FastAPI ``dependency_overrides`` so the real client code
(headers, URL building, error mapping) still runs.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient

from lingoprep.clients import (
	AppwriteClient,
	ElevenLabsClient,
	TavusClient,
	get_elevenlabs_client,
	get_identity_client,
	get_tavus_client,
)
from lingoprep.gemini_client import GeminiClient, get_gemini_factory
from lingoprep.main import app
from lingoprep.settings import settings

IDENTITY_URL = "https://identity.test/v1"
TAVUS_URL = "https://tavus.test/v2"
ELEVENLABS_URL = "https://voice.test/v1"
GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/gemini-test:generateContent"

VALID_SESSION = "good-secret"
ACCOUNT = {
	"$id": "user-1",
	"email": "ada@example.com",
	"name": "Ada",
	"emailVerification": True,
	"prefs": {"language": "es"},
	"registration": "2024-01-01T00:00:00.000+00:00",
}

Handler = Callable[[httpx.Request], httpx.Response]


class FakeUpstream:
	"""Routes mocked requests by (method, host, path) and records them."""

	def __init__(self) -> None:
		self.handlers: Dict[Tuple[str, str, str], Handler] = {}
		self.requests: List[httpx.Request] = []

	def on(
		self,
		method: str,
		url: str,
		*,
		status: int = 200,
		json: Any = None,
		content: Optional[bytes] = None,
		headers: Optional[Dict[str, str]] = None,
		raises: Optional[Exception] = None,
		handler: Optional[Handler] = None,
	) -> None:
		def _respond(request: httpx.Request) -> httpx.Response:
			if raises is not None:
				raise raises
			if handler is not None:
				return handler(request)
			if content is not None:
				return httpx.Response(status, content=content, headers=headers)
			if json is not None:
				return httpx.Response(status, json=json, headers=headers)
			return httpx.Response(status, headers=headers)

		u = httpx.URL(url)
		self.handlers[(method, u.host, u.path)] = _respond

	def calls(self, method: str, url: str) -> List[httpx.Request]:
		u = httpx.URL(url)
		return [r for r in self.requests if r.method == method and r.url.host == u.host and r.url.path == u.path]

	def __call__(self, request: httpx.Request) -> httpx.Response:
		self.requests.append(request)
		handler = self.handlers.get((request.method, request.url.host, request.url.path))
		if handler is None:
			return httpx.Response(404, json={"message": f"no fake route for {request.method} {request.url}"})
		return handler(request)


def _account_handler(request: httpx.Request) -> httpx.Response:
	if request.headers.get("X-Appwrite-Session") == VALID_SESSION:
		return httpx.Response(200, json=ACCOUNT)
	return httpx.Response(
		401,
		json={"message": "User (role: guests) missing scope (account)", "code": 401, "type": "general_unauthorized_scope"},
	)


@pytest.fixture(autouse=True)
def configured_settings(monkeypatch: pytest.MonkeyPatch) -> None:
	monkeypatch.setattr(settings, "appwrite_endpoint", IDENTITY_URL)
	monkeypatch.setattr(settings, "appwrite_project_id", "project-1")
	monkeypatch.setattr(settings, "appwrite_api_key", "appwrite-server-key")
	monkeypatch.setattr(settings, "tavus_api_key", "tavus-server-key")
	monkeypatch.setattr(settings, "tavus_base_url", TAVUS_URL)
	monkeypatch.setattr(settings, "tavus_default_replica_id", "r-default")
	monkeypatch.setattr(settings, "elevenlabs_api_key", "eleven-server-key")
	monkeypatch.setattr(settings, "elevenlabs_base_url", ELEVENLABS_URL)
	monkeypatch.setattr(settings, "gemini_api_key", "gemini-platform-key")
	monkeypatch.setattr(settings, "gemini_provider", "ai_studio")
	monkeypatch.setattr(settings, "gemini_model", "gemini-test")
	monkeypatch.setattr(settings, "openrouter_api_key", None)
	monkeypatch.setattr(settings, "cookie_secure", False)


@pytest.fixture
def upstream() -> FakeUpstream:
	fake = FakeUpstream()
	fake.on("GET", f"{IDENTITY_URL}/account", handler=_account_handler)
	return fake


@pytest.fixture
def client(upstream: FakeUpstream):
	transport = httpx.MockTransport(upstream)

	async def _identity():
		c = AppwriteClient(transport=transport)
		try:
			yield c
		finally:
			await c.aclose()

	async def _tavus():
		c = TavusClient(transport=transport)
		try:
			yield c
		finally:
			await c.aclose()

	async def _elevenlabs():
		c = ElevenLabsClient(transport=transport)
		try:
			yield c
		finally:
			await c.aclose()

	def _gemini_factory():
		return lambda api_key=None: GeminiClient(api_key, transport=transport)

	app.dependency_overrides[get_identity_client] = _identity
	app.dependency_overrides[get_tavus_client] = _tavus
	app.dependency_overrides[get_elevenlabs_client] = _elevenlabs
	app.dependency_overrides[get_gemini_factory] = _gemini_factory
	try:
		with TestClient(app) as c:
			yield c
	finally:
		app.dependency_overrides.clear()


@pytest.fixture
def authed(client: TestClient) -> TestClient:
	client.cookies.set(settings.session_cookie_name, VALID_SESSION)
	return client


def cleared_cookies(response: httpx.Response) -> List[str]:
	"""Names of cookies the response deletes."""
	names = []
	for header in response.headers.get_list("set-cookie"):
		name = header.split("=", 1)[0]
		if "max-age=0" in header.lower():
			names.append(name)
	return names
