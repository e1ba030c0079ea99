"""Bearer session credentials: password login and token resolution."""

import logging
from typing import Optional

from jose import JWTError

from maxfit.errors import AuthorizationError
from maxfit.stores import accounts
from maxfit.utils.security import create_access_token, decode_access_token, verify_password

logger = logging.getLogger(__name__)


def issue_token(account: dict) -> str:
    return create_access_token({"sub": str(account["_id"]), "email": account["email"]})


def login(email: str, password: str) -> tuple:
    """Check credentials and return ``(account, token)``."""
    account = accounts.find_by_email(email)
    if not account or not verify_password(password, account.get("passwordHash")):
        raise AuthorizationError("Incorrect email or password")
    return account, issue_token(account)


def extract_bearer(authorization: Optional[str]) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthorizationError("Authorization header required")
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise AuthorizationError("Authorization header required")
    return token


def resolve_bearer(authorization: Optional[str]) -> dict:
    """Turn an ``Authorization`` header into the account it was issued for."""
    token = extract_bearer(authorization)
    try:
        payload = decode_access_token(token)
    except JWTError as e:
        logger.info("Rejected bearer token: %s", e)
        raise AuthorizationError("Invalid token")

    account = accounts.find_by_id(payload.get("sub"))
    if not account:
        raise AuthorizationError("User not authenticated")
    return account
