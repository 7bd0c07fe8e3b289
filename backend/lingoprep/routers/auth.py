import json
import logging
from typing import Any, Dict

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..clients import AppwriteClient, get_identity_client
from ..errors import ConfigurationError, ProviderHTTPError
from ..session import session_secret
from ..settings import settings

router = APIRouter(prefix="/api/auth", tags=["auth"])

logger = logging.getLogger(__name__)


class LoginRequest(BaseModel):
	email: str
	password: str


def _public_user(account: Dict[str, Any], *, with_prefs: bool = True) -> Dict[str, Any]:
	user = {
		"$id": account.get("$id"),
		"email": account.get("email"),
		"name": account.get("name"),
		"emailVerification": account.get("emailVerification"),
	}
	if with_prefs:
		user["prefs"] = account.get("prefs")
	return user


def _set_auth_cookies(response: JSONResponse, secret: str, account: Dict[str, Any]) -> None:
	response.set_cookie(
		settings.session_cookie_name,
		secret,
		max_age=settings.cookie_max_age_seconds,
		path="/",
		secure=settings.cookie_secure,
		httponly=True,
		samesite="strict",
	)
	# Readable by the browser so the UI can render the user without a round-trip
	response.set_cookie(
		settings.user_cookie_name,
		json.dumps(_public_user(account, with_prefs=False)),
		max_age=settings.cookie_max_age_seconds,
		path="/",
		secure=settings.cookie_secure,
		httponly=False,
		samesite="strict",
	)


def clear_auth_cookies(response: JSONResponse) -> None:
	response.delete_cookie(settings.session_cookie_name, path="/")
	response.delete_cookie(settings.user_cookie_name, path="/")


def _login_failure(err: Exception) -> JSONResponse:
	if isinstance(err, ConfigurationError):
		return JSONResponse(
			{"success": False, "error": "Server configuration error - missing Appwrite settings", "code": "config_error"},
			status_code=500,
		)
	if isinstance(err, httpx.RequestError):
		return JSONResponse(
			{"success": False, "error": "Network error - could not connect to authentication server", "code": "network_error"},
			status_code=503,
		)
	if err.status_code == 401 or err.type == "user_invalid_credentials":
		message, code, status = "Invalid email or password", "invalid_credentials", 401
	elif err.type == "user_not_found":
		message, code, status = "No account found with this email address", "user_not_found", 404
	elif err.status_code == 429:
		message, code, status = "Too many login attempts. Please wait before trying again.", "rate_limited", 429
	else:
		message, code, status = err.message or "Login failed", err.type or "unknown_error", 400
	return JSONResponse({"success": False, "error": message, "code": code, "type": err.type}, status_code=status)


@router.post("/login")
async def login(req: LoginRequest, identity: AppwriteClient = Depends(get_identity_client)):
	try:
		session = await identity.create_email_session(req.email, req.password)
		secret = session.get("secret") or ""
		if not secret:
			raise ConfigurationError("APPWRITE_API_KEY")
		account = await identity.get_account(secret)
	except (ConfigurationError, ProviderHTTPError, httpx.RequestError) as err:
		logger.warning("login failed: %s", err)
		return _login_failure(err)
	logger.info("login succeeded for session %s", session.get("$id"))
	response = JSONResponse({
		"success": True,
		"user": _public_user(account),
		"session": {
			"$id": session.get("$id"),
			"userId": session.get("userId"),
			"expire": session.get("expire"),
			"providerType": session.get("provider"),
			"secret": secret,
		},
	})
	_set_auth_cookies(response, secret, account)
	return response


@router.get("/session")
async def current_session(request: Request, identity: AppwriteClient = Depends(get_identity_client)):
	secret = session_secret(request)
	if not secret:
		return JSONResponse({"success": False, "error": "No session found", "code": "no_session"}, status_code=401)
	try:
		account = await identity.get_account(secret)
	except (ConfigurationError, ProviderHTTPError, httpx.HTTPError, ValueError) as err:
		logger.info("session check failed: %s", err)
		response = JSONResponse({"success": False, "error": "Invalid session", "code": "invalid_session"}, status_code=401)
		clear_auth_cookies(response)
		return response
	return {"success": True, "user": _public_user(account)}


@router.post("/logout")
async def logout(request: Request, identity: AppwriteClient = Depends(get_identity_client)):
	secret = session_secret(request)
	if secret:
		try:
			await identity.delete_current_session(secret)
		except Exception as err:
			# The local session is dropped regardless of what the provider says
			logger.warning("upstream session deletion failed: %s", err)
	response = JSONResponse({"success": True, "message": "Logged out successfully"})
	clear_auth_cookies(response)
	return response
