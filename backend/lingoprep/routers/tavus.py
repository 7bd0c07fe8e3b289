import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Header
from pydantic import BaseModel

from ..clients import TavusClient, get_tavus_client
from ..errors import ApiError, BadRequest, InternalError, ProviderHTTPError, UpstreamFailure
from ..session import require_session
from ..settings import settings
from .health import health_response

router = APIRouter(prefix="/api/tavus", tags=["tavus"])

logger = logging.getLogger(__name__)

MAX_SCRIPT_LENGTH = 2000


class CreateVideoRequest(BaseModel):
	script: Any = None
	replica_id: Optional[str] = None
	# Caller's own Tavus key, used instead of the server key when present
	api_key: Optional[str] = None
	background_url: Optional[str] = None
	voice_settings: Optional[Dict[str, Any]] = None


@router.get("/health")
async def health(client: TavusClient = Depends(get_tavus_client)):
	# Public: no session required
	return await health_response("tavus", client.check_replicas)


@router.get("/replicas", dependencies=[Depends(require_session)])
async def list_replicas(api_key: Optional[str] = None, client: TavusClient = Depends(get_tavus_client)):
	try:
		data = await client.list_replicas(api_key=api_key)
		return {"replicas": data.get("replicas") or []}
	except ProviderHTTPError as err:
		raise UpstreamFailure(err.status_code, "Failed to fetch replicas")
	except ApiError:
		raise
	except Exception as err:
		logger.exception("replica listing failed")
		raise InternalError("Internal server error") from err


@router.post("/videos", dependencies=[Depends(require_session)])
async def create_video(req: CreateVideoRequest, client: TavusClient = Depends(get_tavus_client)):
	if not req.script or not isinstance(req.script, str) or not req.script.strip():
		raise BadRequest("Script is required and must be a string")
	if len(req.script) > MAX_SCRIPT_LENGTH:
		raise BadRequest(f"Script too long. Maximum {MAX_SCRIPT_LENGTH} characters allowed.")
	replica_id = req.replica_id or settings.tavus_default_replica_id
	if not replica_id:
		raise BadRequest("replica_id is required")
	logger.info("creating tavus video replica=%s chars=%d custom_key=%s", replica_id, len(req.script), bool(req.api_key))
	try:
		data = await client.create_video(
			replica_id,
			req.script,
			background_url=req.background_url,
			voice_settings=req.voice_settings,
			api_key=req.api_key,
		)
	except ProviderHTTPError as err:
		raise UpstreamFailure(err.status_code, f"Tavus API error: {err.reason}", details=err.text)
	except ApiError:
		raise
	except Exception as err:
		logger.exception("video creation failed")
		raise InternalError("Internal server error") from err
	return {
		"video_id": data.get("video_id"),
		"video_url": data.get("video_url"),
		"status": data.get("status"),
	}


@router.get("/videos", dependencies=[Depends(require_session)])
async def video_status_by_query(
	video_id: Optional[str] = None,
	api_key: Optional[str] = None,
	client: TavusClient = Depends(get_tavus_client),
):
	if not video_id:
		raise BadRequest("Video ID is required")
	try:
		data = await client.get_video(video_id, api_key=api_key)
	except ProviderHTTPError as err:
		raise UpstreamFailure(err.status_code, "Failed to get video status")
	except ApiError:
		raise
	except Exception as err:
		logger.exception("video status lookup failed for %s", video_id)
		raise InternalError("Internal server error") from err
	return {
		"video_id": data.get("video_id"),
		"video_url": data.get("video_url"),
		"status": data.get("status"),
	}


@router.get("/videos/{video_id}", dependencies=[Depends(require_session)])
async def video_status(
	video_id: str,
	x_tavus_api_key: Optional[str] = Header(default=None),
	client: TavusClient = Depends(get_tavus_client),
):
	try:
		return await client.get_video(video_id, api_key=x_tavus_api_key)
	except ProviderHTTPError as err:
		raise UpstreamFailure(err.status_code, "Failed to check video status")
	except ApiError:
		raise
	except Exception as err:
		logger.exception("video status lookup failed for %s", video_id)
		raise InternalError("Internal server error", details=str(err)) from err
