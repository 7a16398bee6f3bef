"""
app/models/user.py

Purpose: User document model

- WhatsApp number (E.164, unique)
- Display name and preferred currency
- Created once at signup after OTP success
"""

from typing import Any, Dict

from pydantic import BaseModel, Field


class User(BaseModel):
    id: str
    name: str
    whatsapp_number: str = Field(..., description="E.164 phone number with leading +")
    currency: str = Field(..., description="ISO currency code, e.g. USD")

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "User":
        return cls(
            id=str(doc["_id"]),
            name=doc["name"],
            whatsapp_number=doc["whatsapp_number"],
            currency=doc["currency"],
        )
