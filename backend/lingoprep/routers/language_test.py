import logging

from fastapi import APIRouter, Depends

from ..clients import TavusClient, get_tavus_client
from ..errors import ApiError, BadRequest, InternalError, NotFound, ProviderHTTPError, UpstreamFailure
from ..session import require_session

router = APIRouter(prefix="/api/language-test", tags=["language-test"])

logger = logging.getLogger(__name__)


@router.get("/conversation/{conversation_id}", dependencies=[Depends(require_session)])
async def conversation_details(conversation_id: str, client: TavusClient = Depends(get_tavus_client)):
	"""Look up a finished speaking-test conversation on the avatar provider."""
	if not conversation_id.strip():
		raise BadRequest("Conversation ID is required")
	try:
		conversation = await client.get_conversation(conversation_id)
	except ProviderHTTPError as err:
		if err.status_code == 404:
			raise NotFound("Conversation not found")
		raise UpstreamFailure(err.status_code, "Failed to fetch conversation details from Tavus")
	except ApiError:
		raise
	except Exception as err:
		logger.exception("conversation lookup failed for %s", conversation_id)
		raise InternalError("Failed to fetch conversation details", details=str(err) or "Unknown error") from err
	return {"success": True, "conversation": conversation}
