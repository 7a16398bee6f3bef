"""
app/schemas/webhook.py

Purpose: Webhook payload schemas

- Validates inbound WhatsApp messages from Vonage
- Accepts the Messages API v1 shape ({from, text}) and the older
  sandbox v0.1 shape ({from: {number}, message: {content: {text}}})
- Dashboard report request ({from, text})
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Any, Optional


class InboundMessage(BaseModel):
    """
    Normalized inbound message. `sender` is the raw number as delivered
    by the provider (usually without the leading "+").
    """
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "from": "15551230000",
                "text": "Spent 250 on groceries today",
                "channel": "whatsapp",
                "message_uuid": "aaaaaaaa-bbbb-cccc-dddd-0123456789ab"
            }
        },
    )

    sender: str = Field(..., alias="from", min_length=1, description="Sender phone number")
    text: str = Field(default="", description="Message text content")
    message_uuid: Optional[str] = None
    channel: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def flatten_sandbox_payload(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        data = dict(data)
        sender = data.get("from")
        if isinstance(sender, dict):
            data["from"] = sender.get("number", "")

        message = data.get("message")
        if "text" not in data and isinstance(message, dict):
            content = message.get("content") or {}
            data["text"] = content.get("text", "")

        return data


class ReportRequest(BaseModel):
    """Dashboard export request, same shape as a chat message."""
    model_config = ConfigDict(populate_by_name=True)

    sender: str = Field(..., alias="from", min_length=1)
    text: str = "analytics"


class InsightRequest(BaseModel):
    expenses: str = Field(..., description="Rendered expense list")


class InsightResponse(BaseModel):
    insight: str
