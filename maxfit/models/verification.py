from pydantic import BaseModel
from datetime import datetime


class VerificationCode(BaseModel):
    email: str
    otp: str
    expiresAt: datetime
    verified: bool = False
    createdAt: datetime
