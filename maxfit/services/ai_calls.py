"""AI assistant call allowance per plan."""

import logging

from pydantic import BaseModel

from maxfit import config
from maxfit.errors import NotFoundError
from maxfit.stores import accounts

logger = logging.getLogger(__name__)

UNLIMITED = -1  # maxAiCalls value for unlimited plans


class CallAllowance(BaseModel):
    canMakeCall: bool
    message: str = ""
    aiCallsUsed: int = 0
    maxAiCalls: int = 0


def check_call_allowance(account: dict, limits_enabled: bool = None) -> CallAllowance:
    if limits_enabled is None:
        limits_enabled = config.AI_CALL_LIMITS_ENABLED

    used = account.get("aiCallsUsed") or 0
    max_calls = account.get("maxAiCalls") or 1

    if not limits_enabled or max_calls == UNLIMITED:
        return CallAllowance(canMakeCall=True, aiCallsUsed=used, maxAiCalls=max_calls)

    if used >= max_calls:
        return CallAllowance(
            canMakeCall=False,
            message=f"You've used {used} of {max_calls} AI calls. Please upgrade your plan to get more calls.",
            aiCallsUsed=used,
            maxAiCalls=max_calls,
        )
    return CallAllowance(canMakeCall=True, aiCallsUsed=used, maxAiCalls=max_calls)


def record_ai_call(email: str, limits_enabled: bool = None) -> int:
    """Count one finished assistant call against ``email``. Returns the new total.

    A no-op while limits are switched off.
    """
    if limits_enabled is None:
        limits_enabled = config.AI_CALL_LIMITS_ENABLED

    if not limits_enabled:
        account = accounts.find_by_email(email)
        if not account:
            raise NotFoundError("User not found")
        return account.get("aiCallsUsed", 0)

    account = accounts.increment_ai_calls(email)
    if not account:
        raise NotFoundError("User not found")
    logger.info("AI calls used by %s: %s", email, account["aiCallsUsed"])
    return account["aiCallsUsed"]
