"""Verification store: the ``otp_verifications`` collection."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from maxfit import db
from maxfit.models.verification import VerificationCode


def issue_code(email: str, otp: str, ttl_minutes: int) -> dict:
    now = datetime.now(timezone.utc)
    record = VerificationCode(
        email=email,
        otp=otp,
        expiresAt=now + timedelta(minutes=ttl_minutes),
        verified=False,
        createdAt=now,
    ).model_dump()
    result = db.otp_verifications_collection.insert_one(record)
    record["_id"] = result.inserted_id
    return record


def find_valid_code(email: str, otp: str, now: Optional[datetime] = None) -> Optional[dict]:
    """Return an unused, unexpired code for this email, or None.

    Wrong, used and expired codes are indistinguishable here.
    """
    now = now or datetime.now(timezone.utc)
    return db.otp_verifications_collection.find_one({
        "email": email,
        "otp": otp,
        "verified": False,
        "expiresAt": {"$gt": now},
    })


def mark_verified(code_id) -> bool:
    result = db.otp_verifications_collection.update_one(
        {"_id": code_id, "verified": False},
        {"$set": {"verified": True, "verifiedAt": datetime.now(timezone.utc)}},
    )
    return result.modified_count == 1
