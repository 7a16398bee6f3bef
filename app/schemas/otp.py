"""
app/schemas/otp.py

Purpose: OTP endpoint payloads (camelCase, as sent by the dashboard)
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from app.models.user import User


class OtpSendRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    phone_number: str = Field(..., alias="phoneNumber", min_length=4)


class OtpSendResponse(BaseModel):
    message: str = "OTP sent successfully"
    request_id: str


class OtpVerifyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    phone_number: str = Field(..., alias="phoneNumber", min_length=4)
    code: str = Field(..., min_length=1)
    new_user: bool = Field(default=False, alias="newUser")
    name: Optional[str] = None
    currency: Optional[str] = None


class UserOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    phone_number: str = Field(..., alias="phoneNumber")
    currency: str

    @classmethod
    def from_user(cls, user: User) -> "UserOut":
        return cls(id=user.id, name=user.name, phoneNumber=user.whatsapp_number, currency=user.currency)


class OtpVerifyResponse(BaseModel):
    message: str
    user: UserOut
