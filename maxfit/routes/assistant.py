from fastapi import APIRouter, Header, HTTPException, Request
import hmac
import logging

from maxfit import config
from maxfit.errors import AppError, NotFoundError, to_http_exception
from maxfit.services import sessions
from maxfit.services.ai_calls import check_call_allowance, record_ai_call
from maxfit.services.voice_events import CallEnded, VoiceEvent, VoiceEventBus, translate_server_message

logger = logging.getLogger(__name__)

router = APIRouter()

# Vapi-hosted voices
MALE_VOICE_ID = "Elliot"
FEMALE_VOICE_ID = "Paige"


def select_voice_id(gender) -> str:
    return FEMALE_VOICE_ID if (gender or "").lower() == "female" else MALE_VOICE_ID


def build_variable_values(account: dict) -> dict:
    first_name = account.get("firstName") or ""
    last_name = account.get("lastName") or ""
    name = f"{first_name} {last_name}".strip() if first_name else "Guest"
    return {
        "name": name,
        "email": account.get("email") or "anonymous",
        "firstName": first_name or "Guest",
        "lastName": last_name,
        "gender": account.get("gender") or "male",
    }


def count_finished_call(payload: CallEnded):
    if not payload.user_email:
        logger.warning("Call %s ended without a requester email", payload.call_id)
        return
    try:
        record_ai_call(payload.user_email)
    except NotFoundError:
        logger.warning("Call %s ended for unknown user %s", payload.call_id, payload.user_email)


voice_bus = VoiceEventBus()
voice_bus.on(VoiceEvent.CALL_END, count_finished_call)


@router.get("/session-config")
async def session_config(authorization: str = Header(None)):
    try:
        account = sessions.resolve_bearer(authorization)
    except AppError as e:
        raise to_http_exception(e)

    allowance = check_call_allowance(account)
    return {
        "workflowId": config.VAPI_WORKFLOW_ID,
        "voice": {"provider": "vapi", "voiceId": select_voice_id(account.get("gender"))},
        "variableValues": build_variable_values(account),
        "canMakeCall": allowance.canMakeCall,
        "callLimitMessage": allowance.message,
    }


@router.post("/webhook")
async def vapi_webhook(request: Request, x_vapi_secret: str = Header(None)):
    if config.VAPI_WEBHOOK_SECRET and not hmac.compare_digest(x_vapi_secret or "", config.VAPI_WEBHOOK_SECRET):
        raise HTTPException(status_code=401, detail="Invalid webhook secret")

    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid JSON body")
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Invalid JSON body")

    translated = translate_server_message(body)
    if translated is None:
        return {"received": True, "event": None}

    event, payload = translated
    voice_bus.emit(event, payload)
    logger.info("📞 Vapi event %s", event.value)
    return {"received": True, "event": event.value}
