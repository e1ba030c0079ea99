from fastapi import APIRouter, Depends, Header, HTTPException, Query
from typing import Optional
import logging

from maxfit.errors import AppError, to_http_exception
from maxfit.services import sessions
from maxfit.services.call_history import fetch_call_history, parse_paging
from maxfit.services.vapi import vapi_client_factory

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/call-history")
async def get_call_history(
    authorization: str = Header(None),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    make_client=Depends(vapi_client_factory),
):
    try:
        account = sessions.resolve_bearer(authorization)
        logger.info("✅ User authenticated for call history: %s", account["email"])
        # paging is checked only once the caller is known
        page_number = parse_paging(page, 1)
        page_size = parse_paging(limit, 100)
        client = make_client()
        return await fetch_call_history(client, account["email"], page=page_number, limit=page_size)
    except AppError as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception("Error fetching call history")
        raise HTTPException(status_code=500, detail="Failed to fetch call history")
