import json
from datetime import date
from decimal import Decimal

import pytest

from app.core.exceptions import ExternalServiceError
from app.flow.dispatcher import ConversationRouter, dispatch_message
from app.schemas.webhook import InboundMessage
from app.services.insight_service import InsightGenerator
from app.services.intent_classifier import IntentClassifier
from app.services.report_service import ReportBuilder
from utils.constants import (
    ANALYTICS_FALLBACK_MESSAGE,
    GENERIC_FAILURE_MESSAGE,
    NOT_REGISTERED_MESSAGE,
)
from conftest import FakeAI, FakeMessenger

TODAY = date(2024, 5, 15)


def build_router(store, classifier_ai, insight_ai=None):
    return ConversationRouter(
        store=store,
        classifier=IntentClassifier(classifier_ai),
        reports=ReportBuilder(store),
        insights=InsightGenerator(insight_ai or FakeAI()),
        today=lambda: TODAY,
        join_keyword="Join couch plow",
    )


def spend_json(**overrides):
    payload = {
        "intent": "spend",
        "description": "Groceries at market",
        "amount": 250,
        "category": "Food",
        "subCategory": "Groceries",
        "date": "2024-05-14",
    }
    payload.update(overrides)
    return json.dumps(payload)


@pytest.mark.parametrize("sender", ["15559990000", "+15559990000", "whatsapp:+15559990000"])
async def test_unregistered_sender_gets_registration_prompt(store, expenses_collection, sender):
    ai = FakeAI(spend_json())
    router = build_router(store, ai)

    reply = await router.handle_message(sender, "Spent 250 on groceries")

    assert reply == NOT_REGISTERED_MESSAGE
    assert ai.calls == []
    assert expenses_collection.docs == []


async def test_sender_without_plus_resolves_registered_user(store, user):
    router = build_router(store, FakeAI(json.dumps({"intent": "other"})))

    reply = await router.handle_message("15551230000", "hello there")

    assert reply == GENERIC_FAILURE_MESSAGE


async def test_join_keyword_greets_without_classifying(store, user):
    ai = FakeAI()
    router = build_router(store, ai)

    reply = await router.handle_message("15551230000", "Join couch plow")

    assert reply.startswith("Hey Ann,")
    assert ai.calls == []


async def test_join_keyword_is_exact_match(store, user):
    ai = FakeAI(json.dumps({"intent": "other"}))
    router = build_router(store, ai)

    reply = await router.handle_message("15551230000", "join couch plow")

    assert reply == GENERIC_FAILURE_MESSAGE
    assert len(ai.calls) == 1


async def test_spend_creates_one_expense_and_confirms(store, user, expenses_collection):
    router = build_router(store, FakeAI(spend_json()))

    reply = await router.handle_message("15551230000", "Spent 250 on groceries yesterday")

    assert len(expenses_collection.docs) == 1
    doc = expenses_collection.docs[0]
    assert doc["description"] == "Groceries at market"
    assert doc["amount"].to_decimal() == Decimal("250")
    assert doc["category"] == "Food"
    assert doc["sub_category"] == "Groceries"

    assert reply.startswith("Your expense is logged successfully as below:")
    assert "*📝 Description:* Groceries at market" in reply
    assert "*✨ Category:* Food" in reply
    assert "*🎫 Sub Category:* Groceries" in reply
    assert "*💲 Amount:* USD 250" in reply
    assert "*📅 Date:* 2024-05-14" in reply


async def test_spend_without_date_uses_today(store, user, expenses_collection):
    payload = json.loads(spend_json())
    del payload["date"]
    router = build_router(store, FakeAI(json.dumps(payload)))

    reply = await router.handle_message("15551230000", "Coffee 4.5")

    assert "*📅 Date:* 2024-05-15" in reply
    assert expenses_collection.docs[0]["date"].date() == TODAY


async def test_classifier_prompt_carries_today(store, user):
    ai = FakeAI(spend_json())
    router = build_router(store, ai)

    await router.handle_message("15551230000", "Coffee 4.5")

    assert "2024-05-15" in ai.calls[0]["system_instruction"]
    assert ai.calls[0]["mime"] == "application/json"


async def test_spend_store_failure_relays_store_message(store, user, expenses_collection):
    async def broken_insert(doc):
        from pymongo.errors import PyMongoError
        raise PyMongoError("disk full")

    expenses_collection.insert_one = broken_insert
    router = build_router(store, FakeAI(spend_json()))

    reply = await router.handle_message("15551230000", "Spent 250 on groceries")

    assert reply == "Error creating expense. Please try again."


async def test_analytics_without_expenses_falls_back(store, user):
    insight_ai = FakeAI()
    router = build_router(store, FakeAI(json.dumps({"intent": "analytics"})), insight_ai)

    reply = await router.handle_message("15551230000", "How much did I spend?")

    assert reply == ANALYTICS_FALLBACK_MESSAGE
    assert insight_ai.calls == []


async def test_analytics_answer_is_model_text_verbatim(store, user, expenses_collection, expense_doc):
    expenses_collection.docs.append(expense_doc(user.id, "Lunch", 12, TODAY, "Food", "Dining"))
    insight_ai = FakeAI("You spent *USD 12* on food 🍔")
    router = build_router(store, FakeAI(json.dumps({"intent": "analytics"})), insight_ai)

    reply = await router.handle_message("15551230000", "How much on food?")

    assert reply == "You spent *USD 12* on food 🍔"
    call = insight_ai.calls[0]
    assert call["prompt"] == "How much on food?"
    assert "Lunch,USD 12,Food,Dining,2024-05-15" in call["system_instruction"]


async def test_analytics_model_failure_falls_back(store, user, expenses_collection, expense_doc):
    expenses_collection.docs.append(expense_doc(user.id, "Lunch", 12, TODAY))
    insight_ai = FakeAI(ExternalServiceError("boom"))
    router = build_router(store, FakeAI(json.dumps({"intent": "analytics"})), insight_ai)

    reply = await router.handle_message("15551230000", "Summary please")

    assert reply == ANALYTICS_FALLBACK_MESSAGE


async def test_analytics_with_malformed_stored_expense_falls_back(store, user, expenses_collection, expense_doc):
    doc = expense_doc(user.id, "Lunch", 12, TODAY)
    del doc["sub_category"]
    expenses_collection.docs.append(doc)
    insight_ai = FakeAI("should not be used")
    router = build_router(store, FakeAI(json.dumps({"intent": "analytics"})), insight_ai)

    reply = await router.handle_message("15551230000", "Summary please")

    assert reply == ANALYTICS_FALLBACK_MESSAGE
    assert insight_ai.calls == []


@pytest.mark.parametrize("raw", [
    "not json at all",
    "[1, 2, 3]",
    json.dumps({"intent": "other"}),
    json.dumps({"intent": "spend", "description": "x", "amount": -5, "category": "Food", "subCategory": "Snacks"}),
    json.dumps({"intent": "spend", "description": "x", "amount": 5, "category": "Crypto", "subCategory": "Coins"}),
])
async def test_other_and_unparseable_get_generic_reply(store, user, expenses_collection, raw):
    router = build_router(store, FakeAI(raw))

    reply = await router.handle_message("15551230000", "???")

    assert reply == GENERIC_FAILURE_MESSAGE
    assert expenses_collection.docs == []


async def test_classifier_service_failure_gets_generic_reply(store, user):
    router = build_router(store, FakeAI(ExternalServiceError("timeout")))

    reply = await router.handle_message("15551230000", "Spent 10 on snacks")

    assert reply == GENERIC_FAILURE_MESSAGE


async def test_unexpected_error_never_escapes(store, user):
    router = build_router(store, FakeAI(RuntimeError("unexpected")))

    reply = await router.handle_message("15551230000", "Spent 10 on snacks")

    assert reply == GENERIC_FAILURE_MESSAGE


async def test_dispatch_message_sends_reply_to_sender(store):
    messenger = FakeMessenger()
    router = build_router(store, FakeAI())
    message = InboundMessage.model_validate({"from": "15550001111", "text": "hi"})

    result = await dispatch_message(message, router, messenger)

    assert result == {"status": "success"}
    assert messenger.sent == [("15550001111", NOT_REGISTERED_MESSAGE)]


async def test_dispatch_message_reports_delivery_failure(store):
    messenger = FakeMessenger(success=False)
    router = build_router(store, FakeAI())
    message = InboundMessage.model_validate({"from": "15550001111", "text": "hi"})

    result = await dispatch_message(message, router, messenger)

    assert result["status"] == "error"
