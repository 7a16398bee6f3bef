"""
app/services/verify_service.py

Purpose: Vonage Verify OTP provider

- Starts a verification (provider sends the code by SMS)
- Checks a user-entered code against a request id
"""

import httpx
from typing import Optional

from app.core.config import settings
from app.core.exceptions import ExternalServiceError, OtpSendError
from app.core.logging import get_logger

logger = get_logger(__name__)

STATUS_OK = "0"


class VonageVerifyService:
    """Client for the Vonage Verify v1 REST API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        base_url: Optional[str] = None,
        brand: Optional[str] = None,
    ):
        self.api_key = api_key or settings.VONAGE_API_KEY
        self.api_secret = api_secret or settings.VONAGE_API_SECRET
        self.base_url = (base_url or settings.VONAGE_VERIFY_URL).rstrip("/")
        self.brand = brand or settings.VONAGE_BRAND

    async def _post(self, path: str, params: dict) -> dict:
        data = {"api_key": self.api_key, "api_secret": self.api_secret, **params}
        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    f"{self.base_url}/{path}",
                    data=data,
                    timeout=settings.VONAGE_TIMEOUT
                )
                response.raise_for_status()
                return response.json()
        except httpx.HTTPError as e:
            logger.error(f"Vonage Verify error on {path}: {e}", exc_info=True)
            raise ExternalServiceError("OTP provider request failed") from e

    async def start(self, phone: str) -> str:
        """
        Starts a verification for a phone number.

        Returns:
            Provider request id

        Raises:
            OtpSendError: If the provider refuses the request
            ExternalServiceError: If the provider is unreachable
        """
        result = await self._post("json", {"number": phone.lstrip("+"), "brand": self.brand})
        logger.info(f"Verify start status={result.get('status')}")

        if result.get("status") != STATUS_OK or not result.get("request_id"):
            logger.warning(f"Verify start rejected: {result.get('error_text')}")
            raise OtpSendError()

        return result["request_id"]

    async def check(self, request_id: str, code: str) -> bool:
        """
        Checks a code. Returns True only when the provider accepts it.
        """
        result = await self._post("check/json", {"request_id": request_id, "code": code})
        logger.info(f"Verify check status={result.get('status')}")
        return result.get("status") == STATUS_OK
