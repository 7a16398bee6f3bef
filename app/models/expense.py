"""
app/models/expense.py

Purpose: Expense document model

- Owned by exactly one user
- Positive decimal amount, currency taken from the owner
- Category from the fixed taxonomy, free-text sub category
- Never mutated after creation
"""

from datetime import date as calendar_date
from decimal import Decimal
from typing import Any, Dict, Optional

from bson import Decimal128, ObjectId
from pydantic import BaseModel, Field

from utils.time_utils import to_date, to_datetime


class ExpenseDraft(BaseModel):
    """Expense fields before they are persisted."""

    user_id: str
    description: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    category: str = Field(..., min_length=1)
    sub_category: str = Field(..., min_length=1)
    date: calendar_date

    def to_document(self) -> Dict[str, Any]:
        return {
            "user_id": ObjectId(self.user_id),
            "description": self.description,
            "amount": Decimal128(str(self.amount)),
            "category": self.category,
            "sub_category": self.sub_category,
            "date": to_datetime(self.date),
        }


class Expense(ExpenseDraft):
    id: str

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Expense":
        amount = doc["amount"]
        if isinstance(amount, Decimal128):
            amount = amount.to_decimal()

        return cls(
            id=str(doc["_id"]),
            user_id=str(doc["user_id"]),
            description=doc["description"],
            amount=Decimal(str(amount)),
            category=doc["category"],
            sub_category=doc["sub_category"],
            date=to_date(doc["date"]),
        )
