from __future__ import annotations

import logging
from typing import Any, Dict

import httpx
from fastapi import Depends, Request

from .clients import AppwriteClient, get_identity_client
from .errors import AuthRequired, ConfigurationError, ProviderHTTPError
from .settings import settings

logger = logging.getLogger(__name__)


def session_secret(request: Request) -> str | None:
	return request.cookies.get(settings.session_cookie_name) or None


async def require_session(request: Request, identity: AppwriteClient = Depends(get_identity_client)) -> Dict[str, Any]:
	"""Dependency guarding every protected route.

	Returns the identity provider's account record for the session cookie.
	A missing cookie and a cookie the provider rejects are both 401s.
	"""
	secret = session_secret(request)
	if not secret:
		raise AuthRequired("Authentication required")
	try:
		return await identity.get_account(secret)
	except ConfigurationError:
		raise
	except (ProviderHTTPError, httpx.HTTPError, ValueError) as err:
		logger.info("session rejected on %s: %s", request.url.path, err)
		raise AuthRequired("Invalid session")
