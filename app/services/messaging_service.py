"""
app/services/messaging_service.py

Purpose: Vonage WhatsApp message sending

- Sends text replies through the Vonage messages API
- Sandbox endpoint by default, configurable for production
"""

import httpx
from typing import Dict, Any, Optional
from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class VonageMessagingService:
    """Service for sending WhatsApp messages via Vonage"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        whatsapp_number: Optional[str] = None,
        url: Optional[str] = None,
    ):
        self.api_key = api_key or settings.VONAGE_API_KEY
        self.api_secret = api_secret or settings.VONAGE_API_SECRET
        self.whatsapp_number = whatsapp_number or settings.VONAGE_WHATSAPP_NUMBER
        self.url = url or settings.VONAGE_MESSAGES_URL

    async def send_message(self, to_phone: str, message: str) -> Dict[str, Any]:
        """
        Sends a WhatsApp text message.

        Args:
            to_phone: Recipient number as received from the inbound webhook
            message: Message text (WhatsApp markdown)

        Returns:
            {
                "success": True/False,
                "message_uuid": "...",
                "error": "Optional error message"
            }
        """
        payload = {
            "from": {"type": "whatsapp", "number": self.whatsapp_number},
            "to": {"type": "whatsapp", "number": to_phone.lstrip("+")},
            "message": {"content": {"type": "text", "text": message}},
        }

        logger.info(f"📤 Sending WhatsApp message to {to_phone}")

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    self.url,
                    json=payload,
                    auth=(self.api_key or "", self.api_secret or ""),
                    timeout=settings.VONAGE_TIMEOUT
                )

            if response.status_code in [200, 201, 202]:
                result = response.json()
                logger.info(f"✅ Message sent: uuid={result.get('message_uuid')}")
                return {"success": True, "message_uuid": result.get("message_uuid")}

            logger.error(f"❌ Vonage messages error: {response.status_code} - {response.text}")
            return {"success": False, "error": f"Vonage API error: {response.status_code}"}

        except httpx.TimeoutException:
            logger.error("Vonage messages API timeout")
            return {"success": False, "error": "Vonage API timeout"}
        except httpx.HTTPError as e:
            logger.error(f"Error sending WhatsApp message: {e}", exc_info=True)
            return {"success": False, "error": str(e)}

    def is_configured(self) -> bool:
        """Check if Vonage messaging is properly configured"""
        return bool(self.api_key and self.api_secret and self.whatsapp_number)
