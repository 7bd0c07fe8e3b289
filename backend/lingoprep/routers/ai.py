import logging
from typing import Callable, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..errors import BadRequest, ConfigurationError, InternalError, UpstreamFailure
from ..gemini_client import GeminiClient, GenerationError, get_gemini_factory, is_key_error
from ..session import require_session

router = APIRouter(prefix="/api/ai", tags=["ai"])

logger = logging.getLogger(__name__)


class GenerateRequest(BaseModel):
	prompt: str
	# User's own Gemini key from the API-keys settings page
	api_key: Optional[str] = None


async def _generate_once(
	make_client: Callable[..., GeminiClient],
	prompt: str,
	api_key: Optional[str],
	*,
	allow_fallback: bool = True,
) -> str:
	client = make_client(api_key)
	try:
		return await client.generate(prompt, allow_fallback=allow_fallback)
	finally:
		await client.aclose()


@router.post("/generate", dependencies=[Depends(require_session)])
async def generate(req: GenerateRequest, make_client: Callable[..., GeminiClient] = Depends(get_gemini_factory)):
	if not req.prompt.strip():
		raise BadRequest("prompt must not be empty")
	try:
		if req.api_key:
			try:
				# Platform key goes before OpenRouter
				text = await _generate_once(make_client, req.prompt, req.api_key, allow_fallback=False)
				return {"text": text}
			except GenerationError as err:
				if not is_key_error(err):
					raise
				logger.info("user Gemini key rejected (%s); using the platform key", err.status_code)
		text = await _generate_once(make_client, req.prompt, None)
	except ConfigurationError:
		raise
	except GenerationError as err:
		if err.status_code is not None:
			raise UpstreamFailure(err.status_code, "Content generation failed")
		raise InternalError("Content generation failed", details=str(err)) from err
	return {"text": text}
