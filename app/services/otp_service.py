"""
app/services/otp_service.py

Purpose: OTP-gated signup and signin

- Starts a provider verification and records the pending challenge
- Verifies codes and creates the user on signup
- Deletes the challenge once a verification succeeds

Per phone number: no challenge -> pending (request) -> consumed (verify),
or pending -> expired (TTL index). A new request while pending replaces
the stored challenge.
"""

from typing import Optional

from app.core.exceptions import (
    InvalidOtpError,
    NoChallengeFoundError,
    UserAlreadyExistsError,
    UserNotFoundError,
    ValidationError,
)
from app.core.logging import get_logger, LogContext
from app.models.user import User
from utils.validation_utils import normalize_phone_number, sanitize_text, validate_phone_number

logger = get_logger(__name__)


class OtpGate:
    def __init__(self, provider, challenges, store):
        self.provider = provider
        self.challenges = challenges
        self.store = store

    async def request_code(self, phone_number: str) -> str:
        """
        Sends a code to the phone number.

        Returns:
            Provider request id

        Raises:
            OtpSendError: If the provider refuses to send
            ExternalServiceError: If the provider is unreachable
        """
        phone = normalize_phone_number(phone_number)
        if not validate_phone_number(phone):
            raise ValidationError("Invalid phone number")

        with LogContext(phone=phone):
            request_id = await self.provider.start(phone)
            await self.challenges.upsert(phone, request_id)
            logger.info("OTP sent successfully")
            return request_id

    async def verify(
        self,
        phone_number: str,
        code: str,
        new_user: bool,
        name: Optional[str] = None,
        currency: Optional[str] = None,
    ) -> User:
        """
        Verifies a code and resolves the user.

        Args:
            phone_number: Number the code was sent to
            code: Code entered by the user
            new_user: True for signup, False for signin
            name: Display name (signup only)
            currency: Preferred currency code (signup only)

        Raises:
            NoChallengeFoundError: No pending challenge for the number
            InvalidOtpError: Provider rejected the code
            ValidationError: Signup without name or currency
            UserAlreadyExistsError: Signup for a registered number
            UserNotFoundError: Signin for an unregistered number
        """
        phone = normalize_phone_number(phone_number)

        # The provider completes a request on its first correct code, so the form is checked first
        if new_user:
            name = sanitize_text(name, max_length=100)
            currency = sanitize_text(currency, max_length=10).upper()
            if not name or not currency:
                raise ValidationError("Name and currency are required for signup")

        with LogContext(phone=phone):
            challenge = await self.challenges.find(phone)
            if not challenge:
                logger.info("Verify attempted without a pending challenge")
                raise NoChallengeFoundError()

            if not await self.provider.check(challenge.request_id, code):
                logger.info("OTP rejected by provider")
                raise InvalidOtpError()

            user = await self.store.find_user_by_phone(phone)

            if new_user:
                if user:
                    raise UserAlreadyExistsError()
                user = await self.store.create_user(phone, name, currency)
            elif not user:
                raise UserNotFoundError()

            await self.challenges.delete(phone)
            logger.info(f"OTP verified for user {user.id}")
            return user
