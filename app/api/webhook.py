"""
app/api/webhook.py

Purpose: WhatsApp webhook endpoints

- Receives inbound messages from Vonage
- Validates and normalizes the payload
- Passes control to the conversation dispatcher
- Acknowledges delivery status callbacks
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response
from pydantic import ValidationError as PydanticValidationError

from app.core.logging import get_logger
from app.dependencies import get_conversation_router, get_messaging_service
from app.flow.dispatcher import ConversationRouter, dispatch_message
from app.schemas.webhook import InboundMessage

logger = get_logger(__name__)
router = APIRouter()


@router.post("/webhook/whatsapp")
async def whatsapp_webhook(
    request: Request,
    conversation: ConversationRouter = Depends(get_conversation_router),
    messenger=Depends(get_messaging_service),
):
    """
    Inbound WhatsApp message.

    The reply is sent through the messaging API; the HTTP response only
    acknowledges receipt.
    """
    try:
        payload = await request.json()
        message = InboundMessage.model_validate(payload)
    except (ValueError, PydanticValidationError) as e:
        logger.error(f"Failed to parse webhook payload: {e}")
        raise HTTPException(status_code=400, detail="Invalid webhook payload")

    logger.info(f"📱 WhatsApp webhook received from {message.sender}")

    result = await dispatch_message(message, conversation, messenger)
    return result


@router.post("/webhooks/status")
async def message_status():
    """
    Delivery status callbacks from Vonage. Acknowledged and ignored.
    """
    return Response(status_code=200)


@router.get("/webhook/whatsapp")
async def webhook_verification():
    """
    Webhook liveness check for provider dashboards.
    """
    return {"status": "ok", "message": "Webhook endpoint is active"}
