"""
utils/validation_utils.py

Purpose: Input validation

- Phone number normalization to E.164
- Amount parsing and display formatting
- Category lookup against the fixed taxonomy
- Input sanitization
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from utils.constants import CATEGORIES


def normalize_phone_number(phone: str) -> str:
    """
    Normalizes a sender number to canonical E.164 form.

    WhatsApp providers deliver the number without the leading "+"
    (e.g. "15551230000") or with a "whatsapp:" channel prefix.

    Args:
        phone: Raw phone number

    Returns:
        Phone number with a single leading "+"
    """
    if not phone:
        return ""

    phone = phone.strip().replace("whatsapp:", "")
    phone = re.sub(r"[\s\-()]", "", phone)

    if not phone.startswith("+"):
        phone = f"+{phone}"

    return phone


def validate_phone_number(phone: str) -> bool:
    """
    Validates E.164 format: "+" followed by 8 to 15 digits.
    """
    if not phone:
        return False

    return bool(re.match(r"^\+[1-9]\d{7,14}$", phone))


def parse_amount(value) -> Optional[Decimal]:
    """
    Parses a positive monetary amount.

    Accepts numbers and numeric strings ("250", "12.50", "1,200").

    Returns:
        Decimal amount, or None if the value is not a positive number
    """
    if value is None or isinstance(value, bool):
        return None

    try:
        amount = Decimal(str(value).replace(",", "").strip())
    except InvalidOperation:
        return None

    if not amount.is_finite() or amount <= 0:
        return None

    return amount


def format_amount(amount) -> str:
    """
    Formats an amount for display without trailing zeros.

    Example:
        Decimal("250.00") -> "250", Decimal("12.50") -> "12.5"
    """
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))

    return format(amount.normalize(), "f")


def format_money(currency: str, amount) -> str:
    """Currency-prefixed amount, e.g. "USD 12.5"."""
    return f"{currency} {format_amount(amount)}"


def match_category(category: Optional[str]) -> Optional[str]:
    """
    Maps a category name onto the fixed taxonomy, case-insensitively.

    Returns:
        Canonical category name, or None if it is not in the taxonomy
    """
    if not category:
        return None

    wanted = category.strip().lower()
    for name in CATEGORIES:
        if name.lower() == wanted:
            return name

    return None


def sanitize_text(text: Optional[str], max_length: int = 500) -> str:
    """
    Trims whitespace and caps length of free-text fields.
    """
    if not text:
        return ""

    return text.strip()[:max_length]
