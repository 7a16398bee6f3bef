"""
app/db/indexes.py

Purpose: Database index management

- Unique phone number per user
- Newest-first expense listing per user
- TTL index that expires pending OTP challenges
"""

from pymongo import ASCENDING, DESCENDING

from app.core.config import settings
from app.db.mongo import (
    get_users_collection,
    get_expenses_collection,
    get_otp_requests_collection
)
from app.core.logging import get_logger

logger = get_logger(__name__)


async def create_indexes():
    """
    Creates all necessary database indexes.
    This function is idempotent - safe to run multiple times.
    """
    try:
        users = get_users_collection()
        expenses = get_expenses_collection()
        otp_requests = get_otp_requests_collection()

        logger.info("Creating database indexes...")

        # ==============================================
        # USERS COLLECTION INDEXES
        # ==============================================

        await users.create_index(
            [("whatsapp_number", ASCENDING)],
            unique=True,
            name="whatsapp_number_unique"
        )
        logger.debug("Created unique index on users.whatsapp_number")

        # ==============================================
        # EXPENSES COLLECTION INDEXES
        # ==============================================

        await expenses.create_index(
            [("user_id", ASCENDING), ("date", DESCENDING)],
            name="user_expenses_idx"
        )
        logger.debug("Created compound index on expenses.user_id + date")

        # ==============================================
        # OTP REQUESTS COLLECTION INDEXES
        # ==============================================

        await otp_requests.create_index(
            [("phone_number", ASCENDING)],
            unique=True,
            name="otp_phone_unique"
        )
        logger.debug("Created unique index on otp_requests.phone_number")

        await otp_requests.create_index(
            [("created_at", ASCENDING)],
            expireAfterSeconds=settings.OTP_TTL_MINUTES * 60,
            name="otp_ttl_idx"
        )
        logger.debug("Created TTL index on otp_requests.created_at")

        logger.info("✅ All database indexes created successfully")

        user_indexes = await users.index_information()
        expense_indexes = await expenses.index_information()
        otp_indexes = await otp_requests.index_information()

        logger.info(
            f"Index summary: Users={len(user_indexes)}, "
            f"Expenses={len(expense_indexes)}, "
            f"OtpRequests={len(otp_indexes)}"
        )

    except Exception as e:
        logger.error(f"Failed to create indexes: {str(e)}", exc_info=True)
        raise


if __name__ == "__main__":
    """
    Run this script directly to create indexes manually.
    """
    import asyncio
    from app.db.mongo import connect_to_mongo, close_mongo_connection

    async def main():
        await connect_to_mongo()
        await create_indexes()
        await close_mongo_connection()

    asyncio.run(main())
