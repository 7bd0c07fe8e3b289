import logging
from typing import Any, Dict, Optional

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from ..clients import ElevenLabsClient, get_elevenlabs_client
from ..errors import ApiError, BadRequest, InternalError, ProviderHTTPError, UpstreamFailure
from ..session import require_session
from ..settings import settings
from .health import health_response

router = APIRouter(prefix="/api/elevenlabs", tags=["elevenlabs"])

logger = logging.getLogger(__name__)

MAX_TEXT_LENGTH = 5000

# Fields the front-end reads from each voice; everything else is dropped
VOICE_FIELDS = (
	"voice_id",
	"name",
	"category",
	"description",
	"preview_url",
	"available_for_tiers",
	"settings",
)


class TextToSpeechRequest(BaseModel):
	text: Any = None
	voice_id: Optional[str] = None
	model_id: Optional[str] = None


def format_voice(voice: Dict[str, Any]) -> Dict[str, Any]:
	return {field: voice.get(field) for field in VOICE_FIELDS}


@router.get("/health")
async def health(client: ElevenLabsClient = Depends(get_elevenlabs_client)) -> JSONResponse:
	# Public: no session required
	return await health_response("elevenlabs", client.get_user)


@router.get("/voices", dependencies=[Depends(require_session)])
async def list_voices(client: ElevenLabsClient = Depends(get_elevenlabs_client)):
	try:
		data = await client.list_voices()
		voices = [format_voice(v) for v in (data.get("voices") or [])]
	except ProviderHTTPError as err:
		raise UpstreamFailure(err.status_code, "Failed to fetch voices")
	except ApiError:
		raise
	except Exception as err:
		logger.exception("voices request failed")
		raise InternalError("Internal server error") from err
	return {"voices": voices, "total": len(voices)}


@router.post("/text-to-speech", dependencies=[Depends(require_session)])
async def text_to_speech(req: TextToSpeechRequest, client: ElevenLabsClient = Depends(get_elevenlabs_client)):
	if not req.text or not isinstance(req.text, str):
		raise BadRequest("Text is required and must be a string")
	if len(req.text) > MAX_TEXT_LENGTH:
		raise BadRequest(f"Text too long. Maximum {MAX_TEXT_LENGTH} characters allowed.")
	voice_id = req.voice_id or settings.elevenlabs_default_voice_id
	model_id = req.model_id or settings.elevenlabs_model_id
	logger.info("text-to-speech voice=%s model=%s chars=%d", voice_id, model_id, len(req.text))
	try:
		audio = await client.text_to_speech(req.text, voice_id, model_id)
	except ProviderHTTPError as err:
		raise UpstreamFailure(err.status_code, "Failed to generate speech")
	except ApiError:
		raise
	except httpx.HTTPError as err:
		logger.exception("text-to-speech request failed")
		raise InternalError("Internal server error") from err
	return Response(
		content=audio,
		media_type="audio/mpeg",
		headers={
			"Cache-Control": "no-cache, no-store, must-revalidate",
			"Pragma": "no-cache",
			"Expires": "0",
		},
	)
