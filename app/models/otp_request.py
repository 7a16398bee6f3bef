"""
app/models/otp_request.py

Purpose: Pending OTP challenge

- One document per phone number (upserted)
- Holds the provider's verification request id
- Removed by the TTL index or on successful verification
"""

from datetime import datetime
from typing import Any, Dict

from pydantic import BaseModel


class OtpChallenge(BaseModel):
    phone_number: str
    request_id: str
    created_at: datetime

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "OtpChallenge":
        return cls(
            phone_number=doc["phone_number"],
            request_id=doc["request_id"],
            created_at=doc["created_at"],
        )
