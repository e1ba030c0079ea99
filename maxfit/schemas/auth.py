from pydantic import BaseModel
from typing import Optional

from maxfit.models.user import UserData


# Fields are optional so missing input is reported as a 400, not a 422
class SendOtpRequest(BaseModel):
    email: Optional[str] = None


class VerifyOtpRequest(BaseModel):
    email: Optional[str] = None
    otp: Optional[str] = None
    userData: Optional[UserData] = None


class UserLoginRequest(BaseModel):
    email: str
    password: str


class IncrementAiCallsRequest(BaseModel):
    email: Optional[str] = None
