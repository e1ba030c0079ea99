"""Per-user view over the org-wide Vapi call log."""

import logging
import math
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from maxfit.errors import ValidationError
from maxfit.models.call import CallLogView, DEFAULT_ASSISTANT_NAME, Pagination, VapiCallLog
from maxfit.services.vapi import VapiClient

logger = logging.getLogger(__name__)


def _parse_timestamp(value: str) -> datetime:
    # Vapi sends ISO-8601 with a trailing Z
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def call_duration_seconds(started_at: Optional[str], ended_at: Optional[str]) -> int:
    if not started_at or not ended_at:
        return 0
    try:
        delta = _parse_timestamp(ended_at) - _parse_timestamp(started_at)
    except (ValueError, TypeError):
        logger.warning("Unparseable call timestamps %r / %r", started_at, ended_at)
        return 0
    return math.floor(delta.total_seconds())


def requester_email(raw: Any) -> Optional[str]:
    """``assistantOverrides.variableValues.email`` of a raw provider record."""
    if not isinstance(raw, dict):
        return None
    overrides = raw.get("assistantOverrides")
    variables = overrides.get("variableValues") if isinstance(overrides, dict) else None
    return variables.get("email") if isinstance(variables, dict) else None


def filter_calls_for_email(raw_calls: List[Any], email: str) -> List[VapiCallLog]:
    """Keep the calls whose requester email is exactly ``email``.

    Matching runs on the raw records; a matching record that fails
    validation is logged and skipped. No case folding: a call tagged
    ``A@x.com`` does not belong to ``a@x.com``.
    """
    matched = []
    for raw in raw_calls:
        if requester_email(raw) != email:
            continue
        try:
            matched.append(VapiCallLog.model_validate(raw))
        except PydanticValidationError as e:
            logger.warning("Skipping malformed Vapi call record %r: %s", raw.get("id"), e)
    logger.info("User calls after filtering: %d out of %d total calls", len(matched), len(raw_calls))
    return matched


def parse_paging(value: Optional[str], default: int) -> int:
    if value is None or value == "":
        return default
    try:
        number = int(value)
    except ValueError:
        raise ValidationError("page and limit must be positive integers")
    if number < 1:
        raise ValidationError("page and limit must be positive integers")
    return number


def paginate(items: list, page: int, limit: int) -> tuple:
    if page < 1 or limit < 1:
        raise ValidationError("page and limit must be positive integers")
    start = (page - 1) * limit
    total = len(items)
    pagination = Pagination(page=page, limit=limit, total=total, totalPages=math.ceil(total / limit))
    return items[start:start + limit], pagination


def format_call(call: VapiCallLog) -> Dict[str, Any]:
    return CallLogView(
        id=call.id,
        assistantName=(call.assistant.name if call.assistant and call.assistant.name else DEFAULT_ASSISTANT_NAME),
        createdAt=call.createdAt,
        startedAt=call.startedAt,
        endedAt=call.endedAt,
        duration=call_duration_seconds(call.startedAt, call.endedAt),
        status=call.status,
        type=call.type,
        cost=call.cost or 0,
        costBreakdown=call.costBreakdown.model_dump(exclude_none=True) if call.costBreakdown else None,
        transcript=(call.artifact.transcript if call.artifact and call.artifact.transcript else ""),
        summary=(call.analysis.summary if call.analysis and call.analysis.summary else ""),
        orgId=call.orgId,
        assistantId=call.assistantId,
    ).model_dump()


async def fetch_call_history(client: VapiClient, user_email: str, page: int = 1, limit: int = 100) -> Dict[str, Any]:
    raw_calls = await client.list_calls()
    logger.info("✅ Vapi data received, total count: %d", len(raw_calls))

    user_calls = filter_calls_for_email(raw_calls, user_email)
    page_items, pagination = paginate(user_calls, page, limit)

    return {
        "success": True,
        "data": [format_call(call) for call in page_items],
        "pagination": pagination.model_dump(),
        "debug": {
            "userEmail": user_email,
            "totalCallsFromVapi": len(raw_calls),
            "userCallsAfterFilter": len(user_calls),
            "endpoint": client.calls_endpoint,
        },
    }
