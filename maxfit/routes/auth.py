from fastapi import APIRouter, BackgroundTasks, Header, HTTPException
import logging

from maxfit.errors import AppError, to_http_exception
from maxfit.models.user import public_profile
from maxfit.schemas.auth import SendOtpRequest, UserLoginRequest, VerifyOtpRequest
from maxfit.services import otp_verification, sessions
from maxfit.services.ai_calls import check_call_allowance
from maxfit.utils.email import send_otp_email

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/send-otp")
async def send_otp(request: SendOtpRequest, background_tasks: BackgroundTasks):
    try:
        otp = otp_verification.issue_verification_code(request.email)
    except AppError as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception("Send OTP error")
        raise HTTPException(status_code=500, detail="Internal server error")

    background_tasks.add_task(send_otp_email, request.email, otp)
    return {"success": True, "message": "OTP has been sent to your email."}


@router.post("/verify-otp")
async def verify_otp(request: VerifyOtpRequest):
    logger.info("🔍 Verify OTP request for %s", request.email)
    try:
        return otp_verification.verify_otp_and_provision(request.email, request.otp, request.userData)
    except AppError as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception("Verify OTP error")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/login")
async def login(credentials: UserLoginRequest):
    try:
        account, token = sessions.login(credentials.email, credentials.password)
    except AppError as e:
        raise to_http_exception(e)
    return {"success": True, "token": token, "user": public_profile(account)}


@router.get("/me")
async def me(authorization: str = Header(None)):
    try:
        account = sessions.resolve_bearer(authorization)
    except AppError as e:
        raise to_http_exception(e)

    allowance = check_call_allowance(account)
    return {
        **public_profile(account),
        "plan": account.get("plan"),
        "emailVerified": account.get("emailVerified", False),
        "aiCallsUsed": allowance.aiCallsUsed,
        "maxAiCalls": allowance.maxAiCalls,
    }


@router.post("/refresh-token")
async def refresh_token(authorization: str = Header(None)):
    try:
        account = sessions.resolve_bearer(authorization)
    except AppError as e:
        raise to_http_exception(e)
    return {"success": True, "token": sessions.issue_token(account)}
