"""
app/dependencies.py

Purpose: Service wiring for FastAPI routes

- Builds stores over the Motor collections
- Lazily creates provider clients (Gemini, Vonage) once per process
- Routes depend on these functions; tests override them
"""

from functools import lru_cache

from fastapi import Depends

from app.core.config import settings
from app.db.mongo import (
    get_expenses_collection,
    get_otp_requests_collection,
    get_users_collection,
)
from app.flow.dispatcher import ConversationRouter
from app.services.ai_service import GeminiService
from app.services.expense_store import ExpenseStore
from app.services.insight_service import InsightGenerator
from app.services.intent_classifier import IntentClassifier
from app.services.messaging_service import VonageMessagingService
from app.services.otp_service import OtpGate
from app.services.otp_store import OtpChallengeStore
from app.services.report_service import ReportBuilder
from app.services.verify_service import VonageVerifyService


@lru_cache
def get_ai_service() -> GeminiService:
    return GeminiService()


@lru_cache
def get_messaging_service() -> VonageMessagingService:
    return VonageMessagingService()


@lru_cache
def get_verify_service() -> VonageVerifyService:
    return VonageVerifyService()


def get_expense_store() -> ExpenseStore:
    return ExpenseStore(get_users_collection(), get_expenses_collection())


def get_otp_store() -> OtpChallengeStore:
    return OtpChallengeStore(get_otp_requests_collection(), ttl_minutes=settings.OTP_TTL_MINUTES)


def get_report_builder(store: ExpenseStore = Depends(get_expense_store)) -> ReportBuilder:
    return ReportBuilder(store)


def get_insight_generator(ai: GeminiService = Depends(get_ai_service)) -> InsightGenerator:
    return InsightGenerator(ai)


def get_conversation_router(
    store: ExpenseStore = Depends(get_expense_store),
    ai: GeminiService = Depends(get_ai_service),
    reports: ReportBuilder = Depends(get_report_builder),
    insights: InsightGenerator = Depends(get_insight_generator),
) -> ConversationRouter:
    return ConversationRouter(
        store=store,
        classifier=IntentClassifier(ai),
        reports=reports,
        insights=insights,
    )


def get_otp_gate(
    provider: VonageVerifyService = Depends(get_verify_service),
    challenges: OtpChallengeStore = Depends(get_otp_store),
    store: ExpenseStore = Depends(get_expense_store),
) -> OtpGate:
    return OtpGate(provider, challenges, store)
