"""
app/schemas/intent.py

Purpose: Tagged classifier results

- SpendIntent carries validated expense fields
- AnalyticsIntent / OtherIntent carry nothing
- UnparseableIntent records why the model output was rejected
"""

from datetime import date as calendar_date
from decimal import Decimal
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from utils.validation_utils import match_category, parse_amount


class SpendIntent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    kind: Literal["spend"] = "spend"
    description: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    category: str
    sub_category: str = Field(..., alias="subCategory", min_length=1)
    date: calendar_date

    @field_validator("description", "sub_category", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v):
        amount = parse_amount(v)
        if amount is None:
            raise ValueError("amount must be a positive number")
        return amount

    @field_validator("category", mode="before")
    @classmethod
    def known_category(cls, v):
        category = match_category(v) if isinstance(v, str) else None
        if category is None:
            raise ValueError(f"unknown category: {v!r}")
        return category


class AnalyticsIntent(BaseModel):
    kind: Literal["analytics"] = "analytics"


class OtherIntent(BaseModel):
    kind: Literal["other"] = "other"


class UnparseableIntent(BaseModel):
    kind: Literal["unparseable"] = "unparseable"
    reason: str
    raw: str = ""


IntentResult = Union[SpendIntent, AnalyticsIntent, OtherIntent, UnparseableIntent]
