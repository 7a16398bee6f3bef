"""
app/services/otp_store.py

Purpose: Pending OTP challenge storage

- Upsert keeps exactly one challenge per phone number
- Expiry is handled by the TTL index on created_at
"""

from datetime import datetime, timedelta
from typing import Optional

from pymongo.errors import PyMongoError

from app.core.exceptions import StoreError
from app.core.logging import get_logger
from app.models.otp_request import OtpChallenge

logger = get_logger(__name__)


class OtpChallengeStore:
    """MongoDB-backed store of pending OTP challenges."""

    def __init__(self, collection, ttl_minutes: int = 10):
        self.collection = collection
        self.ttl_minutes = ttl_minutes

    async def upsert(self, phone: str, request_id: str) -> OtpChallenge:
        """
        Stores the challenge for a phone number, replacing any pending one.
        """
        now = datetime.utcnow()
        try:
            await self.collection.update_one(
                {"phone_number": phone},
                {"$set": {"phone_number": phone, "request_id": request_id, "created_at": now}},
                upsert=True
            )
        except PyMongoError as e:
            logger.error(f"Error saving OTP request: {e}")
            raise StoreError("Error saving OTP request.") from e

        logger.debug("OTP challenge stored")
        return OtpChallenge(phone_number=phone, request_id=request_id, created_at=now)

    async def find(self, phone: str) -> Optional[OtpChallenge]:
        """
        Returns the live challenge for a phone number.

        The TTL monitor runs about once a minute, so documents past their
        expiry are filtered out here as well.
        """
        cutoff = datetime.utcnow() - timedelta(minutes=self.ttl_minutes)
        try:
            doc = await self.collection.find_one(
                {"phone_number": phone, "created_at": {"$gt": cutoff}}
            )
        except PyMongoError as e:
            logger.error(f"Error loading OTP request: {e}")
            raise StoreError("Error loading OTP request.") from e

        return OtpChallenge.from_document(doc) if doc else None

    async def delete(self, phone: str) -> bool:
        try:
            result = await self.collection.delete_one({"phone_number": phone})
        except PyMongoError as e:
            logger.error(f"Error deleting OTP request: {e}")
            raise StoreError("Error deleting OTP request.") from e

        return result.deleted_count > 0

    async def count(self, phone: str) -> int:
        """Number of stored challenges for a phone number (0 or 1)."""
        try:
            return await self.collection.count_documents({"phone_number": phone})
        except PyMongoError as e:
            logger.error(f"Error counting OTP requests: {e}")
            raise StoreError("Error loading OTP request.") from e
