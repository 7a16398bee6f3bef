"""
app/services/intent_classifier.py

Purpose: Message intent detection and expense extraction

- Prompts Gemini for one of: spend, analytics, other
- Requests JSON output with the expense fields for spends
- Validates the payload into a tagged IntentResult
- Fails closed: anything malformed becomes UnparseableIntent
"""

import json
from datetime import date
from typing import Any, Dict

from pydantic import ValidationError as PydanticValidationError

from app.core.logging import get_logger, LogContext
from app.schemas.intent import (
    AnalyticsIntent,
    IntentResult,
    OtherIntent,
    SpendIntent,
    UnparseableIntent,
)
from app.services.ai_service import JSON_MIME_TYPE
from utils.constants import CATEGORY_TAXONOMY, INTENT_ANALYTICS, INTENT_SPEND

logger = get_logger(__name__)


def _taxonomy_lines() -> str:
    return "\n".join(
        f"{number}. {name} - {', '.join(subcategories)}"
        for number, (name, subcategories) in CATEGORY_TAXONOMY.items()
    )


def build_system_prompt(today: date) -> str:
    """
    System instruction for intent detection. `today` is the default date
    the model should use when the message does not mention one.
    """
    return f"""Detect intent in one word out of these:

spend, analytics, other

spend - related to logging a new expense/spend and nothing else.
analytics - related to the past spends/expenses or their analysis
other - any other apart from two

If it is a spend,

then it should contain the following stuff - what was the expense (i.e. description), amount, date, then you will detect the category and subcategory from below
{_taxonomy_lines()}

the date is in YYYY-MM-DD format. default value - today - {today.isoformat()}

Always include the intent. give output as

{{
  "intent": "spend | analytics | other",
  "description": "description of the expense",
  "amount": 100,
  "category": "main category of the expense",
  "subCategory": "subcategory of the expense",
  "date": "date of the purchase in format YYYY-MM-DD"
}}

For analytics and other, only "intent" is required."""


def parse_classification(raw: str, today: date) -> IntentResult:
    """
    Turns raw model output into a tagged result.

    A missing "intent" with a category present is treated as a spend,
    matching how the model behaved before the intent field was required.
    """
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        return UnparseableIntent(reason=f"invalid JSON: {e}", raw=str(raw)[:500])

    if not isinstance(payload, dict):
        return UnparseableIntent(reason="payload is not an object", raw=raw[:500])

    intent = payload.get("intent")
    intent = intent.strip().lower() if isinstance(intent, str) else None

    if intent == INTENT_ANALYTICS:
        return AnalyticsIntent()

    if intent == INTENT_SPEND or (intent is None and payload.get("category") is not None):
        return _parse_spend(payload, today, raw)

    return OtherIntent()


def _parse_spend(payload: Dict[str, Any], today: date, raw: str) -> IntentResult:
    fields = {
        "description": payload.get("description"),
        "amount": payload.get("amount"),
        "category": payload.get("category"),
        "subCategory": payload.get("subCategory", payload.get("sub_category")),
        "date": payload.get("date") or today,
    }

    # Models sometimes return full ISO timestamps
    if isinstance(fields["date"], str) and len(fields["date"]) > 10:
        fields["date"] = fields["date"][:10]

    try:
        return SpendIntent.model_validate(fields)
    except PydanticValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        return UnparseableIntent(reason=f"invalid spend fields: {problems}", raw=raw[:500])


class IntentClassifier:
    """Classifies chat messages with a language model."""

    def __init__(self, ai):
        self.ai = ai

    async def classify(self, text: str, today: date) -> IntentResult:
        """
        Classifies a message.

        Raises:
            ExternalServiceError: If the model call itself fails
        """
        raw = await self.ai.generate(
            text,
            system_instruction=build_system_prompt(today),
            response_mime_type=JSON_MIME_TYPE,
        )

        result = parse_classification(raw, today)

        with LogContext(intent=result.kind):
            if isinstance(result, UnparseableIntent):
                logger.warning(f"Classifier output rejected: {result.reason}")
            else:
                logger.info("Message classified")

        return result
