# maxfit/models/user.py

from pydantic import BaseModel
from typing import Optional
from datetime import datetime

DEFAULT_PLAN = "free"
DEFAULT_MAX_AI_CALLS = 5
DEFAULT_GENDER = "prefer-not-to-say"


class UserData(BaseModel):
    """Profile fields collected at signup and submitted with the OTP."""
    password: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    gender: Optional[str] = None
    language: Optional[str] = None


class AccountInDB(BaseModel):
    email: str
    firstName: str = ""
    lastName: str = ""
    gender: str = DEFAULT_GENDER
    passwordHash: str
    language: Optional[str] = None
    plan: str = DEFAULT_PLAN
    aiCallsUsed: int = 0
    maxAiCalls: int = DEFAULT_MAX_AI_CALLS
    emailVerified: bool = True
    createdAt: datetime


class PublicUser(BaseModel):
    id: str
    email: str
    firstName: str = ""
    lastName: str = ""
    gender: Optional[str] = None
    language: Optional[str] = None


def public_profile(account: dict) -> dict:
    return PublicUser(
        id=str(account["_id"]),
        email=account["email"],
        firstName=account.get("firstName", ""),
        lastName=account.get("lastName", ""),
        gender=account.get("gender"),
        language=account.get("language"),
    ).model_dump()
