from __future__ import annotations
import logging
import httpx
from typing import Any, Callable, Dict, List, Optional
from .errors import ConfigurationError
from .settings import settings

logger = logging.getLogger(__name__)

# Upstream statuses that mean "this key cannot be used", not "this request is bad"
KEY_ERROR_STATUSES = (401, 403, 429)


class GenerationError(RuntimeError):
	def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
		super().__init__(message)
		self.status_code = status_code


def is_key_error(err: Exception) -> bool:
	"""True when ``err`` says the API key was refused, exhausted or unbilled."""
	if isinstance(err, GenerationError) and err.status_code in KEY_ERROR_STATUSES:
		return True
	text = str(err).lower()
	return any(marker in text for marker in ("api key", "permission denied", "quota exceeded", "billing"))


class GeminiClient:
	"""Configured handle to the Gemini generateContent endpoint.

	Content flows (lectures, interviews, quizzes) build their own prompts and
	call ``generate``; this class only owns credentials, endpoint selection and
	the optional OpenRouter text fallback.
	"""

	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.api_key = api_key or settings.gemini_api_key
		if not self.api_key:
			raise ConfigurationError("GEMINI_API_KEY")
		self.model = model or settings.gemini_model
		if settings.gemini_provider == "vertex":
			region = settings.vertex_region
			if not settings.vertex_project:
				raise ConfigurationError("GEMINI_VERTEX_PROJECT")
			# Vertex AI Express takes the key as a header
			self.base_url = base_url or (
				f"https://{region}-aiplatform.googleapis.com/v1/projects/{settings.vertex_project}"
				f"/locations/{region}/publishers/google/models/{self.model}:generateContent"
			)
			self._auth = {"headers": {"x-goog-api-key": self.api_key}}
		else:
			self.base_url = base_url or f"https://generativelanguage.googleapis.com/v1beta/models/{self.model}:generateContent"
			self._auth = {"params": {"key": self.api_key}}
		self._client = httpx.AsyncClient(timeout=settings.upstream_timeout_seconds, transport=transport)
		self._openrouter_key = settings.openrouter_api_key
		self._fallback_client: Optional[httpx.AsyncClient] = None
		if self._openrouter_key:
			self._fallback_client = httpx.AsyncClient(
				timeout=settings.upstream_timeout_seconds,
				transport=transport,
				headers={
					"Authorization": f"Bearer {self._openrouter_key}",
					"HTTP-Referer": settings.openrouter_referer,
					"X-Title": settings.openrouter_title,
				},
			)

	async def generate(self, prompt: str, *, allow_fallback: bool = True) -> str:
		payload = {"contents": [{"parts": [{"text": prompt}]}]}
		try:
			return await self._generate_content(payload)
		except GenerationError as err:
			if not allow_fallback or self._fallback_client is None:
				raise
			logger.warning("gemini failed (%s); falling back to OpenRouter", err)
			return await self._openrouter(prompt, err)

	async def generate_multimodal(self, parts: List[Dict[str, Any]], *, role: str = "user") -> str:
		# No text-only fallback can stand in for image or audio parts
		return await self._generate_content({"contents": [{"role": role, "parts": parts}]})

	async def _generate_content(self, payload: Dict[str, Any]) -> str:
		try:
			r = await self._client.post(self.base_url, json=payload, **self._auth)
		except httpx.RequestError as err:
			raise GenerationError(f"Gemini unreachable: {err}") from err
		if not r.is_success:
			raise GenerationError(f"Gemini responded {r.status_code}: {r.text[:300]}", status_code=r.status_code)
		try:
			return r.json()["candidates"][0]["content"]["parts"][0]["text"]
		except (ValueError, KeyError, IndexError, TypeError):
			raise GenerationError(f"Unexpected Gemini response: {r.text[:300]}")

	async def _openrouter(self, prompt: str, primary_error: GenerationError) -> str:
		if self._fallback_client is None:
			raise primary_error
		try:
			r = await self._fallback_client.post(
				settings.openrouter_base_url,
				json={"model": settings.openrouter_model, "messages": [{"role": "user", "content": prompt}]},
			)
			r.raise_for_status()
			return r.json()["choices"][0]["message"]["content"]
		except Exception as fallback_err:
			raise GenerationError(
				f"Gemini primary call failed ({primary_error}); fallback via OpenRouter also failed",
				status_code=primary_error.status_code,
			) from fallback_err

	async def aclose(self) -> None:
		await self._client.aclose()
		if self._fallback_client is not None:
			await self._fallback_client.aclose()


def get_gemini_factory() -> Callable[..., GeminiClient]:
	"""Dependency returning the client constructor, so callers can pick the key per request."""
	return GeminiClient
