"""Email one-time-code issuance and the verify-and-provision flow."""

import logging
import secrets
from datetime import datetime, timezone

from maxfit import config
from maxfit.errors import AccountExistsError, InvalidCodeError, ValidationError
from maxfit.models.user import (
    AccountInDB,
    DEFAULT_GENDER,
    DEFAULT_MAX_AI_CALLS,
    DEFAULT_PLAN,
    UserData,
    public_profile,
)
from maxfit.services import sessions
from maxfit.stores import accounts, verification_codes
from maxfit.utils.security import get_password_hash

logger = logging.getLogger(__name__)

OTP_LENGTH = 6


def generate_otp() -> str:
    return "".join(secrets.choice("0123456789") for _ in range(OTP_LENGTH))


def issue_verification_code(email: str) -> str:
    """Store a fresh code for ``email`` and return it for delivery.

    Older unverified codes are left alone, so several can be valid at once.
    """
    if not email:
        raise ValidationError("Email is required")
    if accounts.find_by_email(email):
        raise AccountExistsError()

    otp = generate_otp()
    verification_codes.issue_code(email, otp, config.OTP_EXPIRE_MINUTES)
    logger.info("Issued verification code for %s", email)
    return otp


def build_account(email: str, user_data: UserData) -> AccountInDB:
    return AccountInDB(
        email=email,
        firstName=user_data.firstName or "",
        lastName=user_data.lastName or "",
        gender=user_data.gender or DEFAULT_GENDER,
        passwordHash=get_password_hash(user_data.password),
        language=user_data.language,
        plan=DEFAULT_PLAN,
        aiCallsUsed=0,
        maxAiCalls=DEFAULT_MAX_AI_CALLS,
        emailVerified=True,
        createdAt=datetime.now(timezone.utc),
    )


def verify_otp_and_provision(email, otp, user_data) -> dict:
    """Consume a code and create the account it was issued for.

    Steps run strictly in order and any failure stops the flow: a code is
    only marked verified once its account exists.

    Returns:
        dict: ``{"success", "user", "token"}``.

    Raises:
        ValidationError: a required field is missing.
        InvalidCodeError: no unused, unexpired code matches.
        AccountExistsError: the email already has an account.
    """
    if not email or not otp or user_data is None or not user_data.password:
        raise ValidationError("Missing required fields")

    code = verification_codes.find_valid_code(email, otp)
    if not code:
        logger.info("No valid verification code for %s", email)
        raise InvalidCodeError()

    account = accounts.create_account(build_account(email, user_data))
    logger.info("✅ Account created: %s", account["_id"])

    if not verification_codes.mark_verified(code["_id"]):
        # Another request consumed the same code between our read and write
        logger.warning("Verification code %s was already consumed", code["_id"])

    account, token = sessions.login(email, user_data.password)
    return {
        "success": True,
        "user": public_profile(account),
        "token": token,
    }
