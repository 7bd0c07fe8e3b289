import logging
from typing import Any, Awaitable, Callable

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ..errors import ConfigurationError, ProviderHTTPError
from ..settings import settings

router = APIRouter(tags=["health"])

logger = logging.getLogger(__name__)


async def health_response(service: str, check: Callable[[], Awaitable[Any]]) -> JSONResponse:
	"""Run ``check`` against a provider and report it in the health-check shape.

	Any 2xx is healthy. A non-2xx answer, a transport failure or a missing key
	is a 503 with ``available: false``.
	"""
	try:
		await check()
	except ProviderHTTPError as err:
		logger.warning("%s health check answered %s", service, err.status_code)
		return JSONResponse({"status": "unhealthy", "service": service, "available": False}, status_code=503)
	except ConfigurationError as err:
		logger.warning("%s health check skipped: %s", service, err)
		return JSONResponse(
			{"status": "unhealthy", "service": service, "available": False, "error": "Not configured"},
			status_code=503,
		)
	except Exception as err:
		logger.warning("%s health check failed: %s", service, err)
		return JSONResponse(
			{"status": "unhealthy", "service": service, "available": False, "error": "Connection failed"},
			status_code=503,
		)
	return JSONResponse({"status": "healthy", "service": service, "available": True})


@router.get("/info")
def info():
	missing = settings.missing_configuration()
	return {
		"status": "ok",
		"configured": {service: service not in missing for service in ("appwrite", "tavus", "elevenlabs", "gemini")},
	}
