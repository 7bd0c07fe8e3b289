from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ..errors import ProviderHTTPError
from ..settings import settings

logger = logging.getLogger(__name__)


class ProviderClient:
	"""Shared plumbing for the third-party REST clients.

	Subclasses set ``service`` and pass their base URL and static headers.
	Non-2xx answers are raised as ``ProviderHTTPError``; transport failures
	surface as ``httpx.RequestError`` so handlers can tell the two apart.
	"""

	service = "provider"

	def __init__(
		self,
		base_url: str,
		*,
		headers: Optional[Dict[str, str]] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
		timeout: Optional[float] = None,
	) -> None:
		self.base_url = base_url
		self._client = httpx.AsyncClient(
			base_url=base_url,
			headers=headers or {},
			timeout=timeout if timeout is not None else settings.upstream_timeout_seconds,
			transport=transport,
		)

	async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
		r = await self._client.request(method, path, **kwargs)
		if not r.is_success:
			text = "" if method == "HEAD" else r.text
			payload: Dict[str, Any] = {}
			try:
				parsed = r.json() if text else None
				if isinstance(parsed, dict):
					payload = parsed
			except ValueError:
				pass
			logger.warning("%s %s %s -> %s %s", self.service, method, path, r.status_code, text[:500])
			raise ProviderHTTPError(self.service, r.status_code, text, reason=r.reason_phrase, payload=payload)
		return r

	async def _json(self, method: str, path: str, **kwargs: Any) -> Any:
		r = await self._request(method, path, **kwargs)
		return r.json()

	async def aclose(self) -> None:
		await self._client.aclose()
