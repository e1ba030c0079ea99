# Thin client for the Vapi REST API
import httpx
from typing import Any, Dict, List, Optional
import logging

from maxfit import config
from maxfit.errors import InternalError, UpstreamError, UpstreamUnavailableError

logger = logging.getLogger(__name__)


class VapiClient:
    def __init__(self, api_key: str, base_url: str = "https://api.vapi.ai",
                 timeout: float = 30.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def calls_endpoint(self) -> str:
        return f"{self.base_url}/call"

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def _get(self, url: str, params: Dict = None) -> Any:
        """Single GET against Vapi. No retries."""
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.get(url, headers=self._headers(), params=params)
            except httpx.RequestError as e:
                logger.error(f"Vapi request failed: {str(e)}")
                raise UpstreamUnavailableError(
                    "Network error calling Vapi API",
                    details={"details": str(e) or e.__class__.__name__, "endpoint": url},
                )

        logger.info(f"Vapi response status: {response.status_code}")
        if not response.is_success:
            logger.error(f"Vapi API error: {response.status_code} - {response.text}")
            raise UpstreamError(
                "Vapi API error",
                status_code=response.status_code,
                details={
                    "details": f"Status: {response.status_code}, Response: {response.text}",
                    "endpoint": url,
                },
            )
        return response.json()

    async def list_calls(self) -> List[Dict[str, Any]]:
        """Every call in the org. The endpoint has no per-user filter."""
        data = await self._get(self.calls_endpoint)
        if not isinstance(data, list):
            raise InternalError("Unexpected response shape from Vapi")
        return data


def get_vapi_client() -> VapiClient:
    """FastAPI dependency. Raises when the server-side key is missing."""
    if not config.VAPI_PRIVATE_API_KEY:
        logger.error("VAPI_PRIVATE_API_KEY not found in environment variables")
        raise InternalError("Vapi API key not configured")
    return VapiClient(
        api_key=config.VAPI_PRIVATE_API_KEY,
        base_url=config.VAPI_BASE_URL,
        timeout=config.VAPI_TIMEOUT_SECONDS,
    )


def vapi_client_factory():
    """Dependency handing routes the client constructor, so the key is only
    checked once the caller is authenticated. Tests override this."""
    return get_vapi_client
