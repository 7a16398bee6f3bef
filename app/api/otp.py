"""
app/api/otp.py

Purpose: OTP signup / signin endpoints for the web dashboard

- POST /otp/send starts a verification for a phone number
- POST /otp/verify checks the code and signs the user up or in
- Failures render as {error, code} via the app exception handlers
  (400 invalid, 404 not found, 409 already exists, 500 unexpected)
"""

from fastapi import APIRouter, Depends

from app.core.logging import get_logger
from app.dependencies import get_otp_gate
from app.schemas.otp import (
    OtpSendRequest,
    OtpSendResponse,
    OtpVerifyRequest,
    OtpVerifyResponse,
    UserOut,
)
from app.services.otp_service import OtpGate

logger = get_logger(__name__)
router = APIRouter()


@router.post("/otp/send", response_model=OtpSendResponse)
async def send_otp(body: OtpSendRequest, gate: OtpGate = Depends(get_otp_gate)):
    request_id = await gate.request_code(body.phone_number)
    return OtpSendResponse(request_id=request_id)


@router.post("/otp/verify", response_model=OtpVerifyResponse)
async def verify_otp(body: OtpVerifyRequest, gate: OtpGate = Depends(get_otp_gate)):
    user = await gate.verify(
        body.phone_number,
        body.code,
        new_user=body.new_user,
        name=body.name,
        currency=body.currency,
    )

    message = "User created successfully" if body.new_user else "OTP verified successfully"
    return OtpVerifyResponse(message=message, user=UserOut.from_user(user))
