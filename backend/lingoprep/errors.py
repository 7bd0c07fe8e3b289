"""Error taxonomy shared by the route handlers.

Every failure a handler reports is an ``ApiError`` carrying the HTTP status and
the JSON body. ``install_error_handlers`` renders them as ``{"error": ...}``
bodies, which is the only error shape the front-end understands.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
	status_code: int = 500
	default_message: str = "Internal server error"

	def __init__(self, message: Optional[str] = None, *, status_code: Optional[int] = None, **extra: Any) -> None:
		self.message = message or self.default_message
		if status_code is not None:
			self.status_code = status_code
		self.extra = {k: v for k, v in extra.items() if v is not None}
		super().__init__(self.message)

	def body(self) -> Dict[str, Any]:
		return {"error": self.message, **self.extra}


class BadRequest(ApiError):
	status_code = 400
	default_message = "Bad request"


class AuthRequired(ApiError):
	status_code = 401
	default_message = "Authentication required"


class NotFound(ApiError):
	status_code = 404
	default_message = "Not found"


class UpstreamFailure(ApiError):
	"""A provider answered with a non-2xx status; the status is forwarded."""

	def __init__(self, status_code: int, message: str, **extra: Any) -> None:
		super().__init__(message, status_code=status_code, **extra)


class InternalError(ApiError):
	status_code = 500


class ConfigurationError(ApiError):
	"""A required setting (endpoint, project or API key) is missing."""

	status_code = 500
	default_message = "Server configuration error"

	def __init__(self, setting: str) -> None:
		super().__init__()
		self.setting = setting

	def __str__(self) -> str:
		return f"{self.setting} is not configured"


class ProviderHTTPError(Exception):
	"""Raised by provider clients when the upstream returns a non-2xx status."""

	def __init__(self, service: str, status_code: int, text: str = "", *, reason: str = "", payload: Optional[Dict[str, Any]] = None) -> None:
		self.service = service
		self.status_code = status_code
		self.text = text
		self.reason = reason
		self.payload = payload or {}
		super().__init__(f"{service} responded {status_code}: {text[:200]}")

	@property
	def type(self) -> Optional[str]:
		return self.payload.get("type")

	@property
	def message(self) -> str:
		return str(self.payload.get("message") or self.text or self.reason)


def install_error_handlers(app: FastAPI) -> None:
	@app.exception_handler(ApiError)
	async def _api_error(request: Request, exc: ApiError):
		if exc.status_code >= 500:
			logger.error("%s %s failed: %s", request.method, request.url.path, exc)
		return JSONResponse(exc.body(), status_code=exc.status_code)

	@app.exception_handler(RequestValidationError)
	async def _validation_error(request: Request, exc: RequestValidationError):
		errors = exc.errors()
		first = errors[0] if errors else {}
		field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
		message = f"{field}: {first.get('msg')}" if field else str(first.get("msg", "Invalid request"))
		return JSONResponse({"error": message}, status_code=400)
