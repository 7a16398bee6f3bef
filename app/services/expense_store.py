"""
app/services/expense_store.py

Purpose: User and expense persistence

- Find users by WhatsApp number or id
- Create users (unique phone number)
- Create expenses for existing users only
- List a user's expenses newest first
"""

from datetime import datetime
from typing import List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from app.core.exceptions import StoreError, UserAlreadyExistsError, UserNotRegisteredError
from app.core.logging import get_logger, LogContext
from app.models.expense import Expense, ExpenseDraft
from app.models.user import User
from utils.constants import USER_NOT_SIGNED_UP_MESSAGE, EXPENSE_CREATE_FAILED_MESSAGE

logger = get_logger(__name__)


def _object_id(value: str) -> Optional[ObjectId]:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


class ExpenseStore:
    """MongoDB-backed store for users and their expenses."""

    def __init__(self, users, expenses):
        self.users = users
        self.expenses = expenses

    async def find_user_by_phone(self, phone: str) -> Optional[User]:
        """
        Looks a user up by canonical WhatsApp number.

        Raises:
            StoreError: If the database query fails
        """
        try:
            doc = await self.users.find_one({"whatsapp_number": phone})
        except PyMongoError as e:
            logger.error(f"Error finding user: {e}")
            raise StoreError("Error finding user. Please try again.") from e

        return User.from_document(doc) if doc else None

    async def get_user(self, user_id: str) -> Optional[User]:
        oid = _object_id(user_id)
        if oid is None:
            return None

        try:
            doc = await self.users.find_one({"_id": oid})
        except PyMongoError as e:
            logger.error(f"Error loading user: {e}")
            raise StoreError("Error finding user. Please try again.") from e

        return User.from_document(doc) if doc else None

    async def create_user(self, phone: str, name: str, currency: str) -> User:
        """
        Creates a user record.

        Raises:
            UserAlreadyExistsError: If the phone number is already registered
            StoreError: On any other database failure
        """
        with LogContext(phone=phone):
            doc = {
                "name": name,
                "whatsapp_number": phone,
                "currency": currency,
                "created_at": datetime.utcnow(),
            }

            try:
                result = await self.users.insert_one(doc)
            except DuplicateKeyError as e:
                logger.warning("Signup raced with an existing user")
                raise UserAlreadyExistsError() from e
            except PyMongoError as e:
                logger.error(f"Error creating user: {e}", exc_info=True)
                raise StoreError("Error creating user. Please try again.") from e

            doc["_id"] = result.inserted_id
            logger.info("New user created successfully")
            return User.from_document(doc)

    async def create_expense(self, draft: ExpenseDraft) -> Expense:
        """
        Persists an expense for an existing user.

        Raises:
            UserNotRegisteredError: If the owning user does not exist
            StoreError: If the insert fails
        """
        with LogContext(user_id=draft.user_id):
            user = await self.get_user(draft.user_id)
            if not user:
                logger.warning("Expense rejected, user does not exist")
                raise UserNotRegisteredError(USER_NOT_SIGNED_UP_MESSAGE)

            doc = draft.to_document()
            doc["created_at"] = datetime.utcnow()

            try:
                result = await self.expenses.insert_one(doc)
            except PyMongoError as e:
                logger.error(f"Error creating expense: {e}", exc_info=True)
                raise StoreError(EXPENSE_CREATE_FAILED_MESSAGE) from e

            logger.info(f"Expense created: {draft.category}/{draft.sub_category}")
            return Expense(id=str(result.inserted_id), **draft.model_dump())

    async def list_expenses(self, user_id: str, limit: int = 100) -> List[Expense]:
        """
        Returns up to `limit` expenses for the user, newest first.
        """
        oid = _object_id(user_id)
        if oid is None:
            return []

        try:
            cursor = (
                self.expenses.find({"user_id": oid})
                .sort("date", DESCENDING)
                .limit(limit)
            )
            docs = await cursor.to_list(length=limit)
        except PyMongoError as e:
            logger.error(f"Error listing expenses: {e}")
            raise StoreError("Error fetching expenses.") from e

        try:
            return [Expense.from_document(doc) for doc in docs]
        except (KeyError, TypeError, ValueError, ArithmeticError) as e:
            logger.error(f"Malformed expense document for user {user_id}: {e!r}")
            raise StoreError("Error reading expenses.") from e
