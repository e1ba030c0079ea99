from fastapi import APIRouter, Header, HTTPException
import logging

from maxfit.errors import AppError, to_http_exception
from maxfit.schemas.auth import IncrementAiCallsRequest
from maxfit.services import sessions
from maxfit.services.ai_calls import check_call_allowance, record_ai_call

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/increment-ai-calls")
async def increment_ai_calls(request: IncrementAiCallsRequest, authorization: str = Header(None)):
    try:
        account = sessions.resolve_bearer(authorization)
        if not request.email:
            raise HTTPException(status_code=400, detail="Email is required")
        if request.email != account["email"]:
            raise HTTPException(status_code=403, detail="Cannot update another user's AI calls")
        ai_calls_used = record_ai_call(request.email)
    except AppError as e:
        raise to_http_exception(e)

    return {"success": True, "aiCallsUsed": ai_calls_used}


@router.get("/call-allowance")
async def call_allowance(authorization: str = Header(None)):
    try:
        account = sessions.resolve_bearer(authorization)
    except AppError as e:
        raise to_http_exception(e)
    return check_call_allowance(account).model_dump()
