"""
app/flow/dispatcher.py

Purpose: Central message dispatcher

- Resolves the sender to a registered user
- Classifies the message and branches on the intent
- Logs expenses or answers analytics questions
- Always produces exactly one reply; never raises
"""

from datetime import date
from typing import Callable, Dict, Any, Optional

from app.core.config import settings
from app.core.exceptions import SpendWiseError
from app.core.logging import get_logger, LogContext
from app.models.expense import ExpenseDraft
from app.models.user import User
from app.schemas.intent import AnalyticsIntent, SpendIntent
from app.schemas.webhook import InboundMessage
from utils.constants import (
    ANALYTICS_FALLBACK_MESSAGE,
    EXPENSE_LOGGED_TEMPLATE,
    GENERIC_FAILURE_MESSAGE,
    JOIN_GREETING_TEMPLATE,
    NOT_REGISTERED_MESSAGE,
)
from utils.time_utils import format_date, today as utc_today
from utils.validation_utils import format_money, normalize_phone_number

logger = get_logger(__name__)


class ConversationRouter:
    """
    Turns one inbound chat message into one reply.

    Collaborators are injected so tests can swap in doubles:
    store (users/expenses), classifier, reports, insights.
    """

    def __init__(
        self,
        store,
        classifier,
        reports,
        insights,
        today: Callable[[], date] = utc_today,
        join_keyword: Optional[str] = None,
    ):
        self.store = store
        self.classifier = classifier
        self.reports = reports
        self.insights = insights
        self.today = today
        self.join_keyword = join_keyword if join_keyword is not None else settings.JOIN_KEYWORD

    async def handle_message(self, sender: str, text: str) -> str:
        phone = normalize_phone_number(sender)
        text = text or ""

        with LogContext(phone=phone):
            logger.info(f"📨 Handling message: {text[:50]}")

            try:
                user = await self.store.find_user_by_phone(phone)
            except SpendWiseError as e:
                logger.error(f"User lookup failed: {e.message}")
                return GENERIC_FAILURE_MESSAGE

            if not user:
                logger.info("Returning un-registered user response")
                return NOT_REGISTERED_MESSAGE

            # Sandbox onboarding phrase, matched exactly
            if text == self.join_keyword:
                return JOIN_GREETING_TEMPLATE.format(name=user.name)

            try:
                return await self._route(user, text)
            except Exception as e:
                logger.error(f"❌ Dispatcher error: {e}", exc_info=True)
                return GENERIC_FAILURE_MESSAGE

    async def _route(self, user: User, text: str) -> str:
        try:
            intent = await self.classifier.classify(text, self.today())
        except SpendWiseError as e:
            logger.error(f"Classification failed: {e.message}")
            return GENERIC_FAILURE_MESSAGE

        with LogContext(user_id=user.id, intent=intent.kind):
            logger.info("🚦 Routing message")

            if isinstance(intent, AnalyticsIntent):
                return await self._answer_analytics(user, text)

            if isinstance(intent, SpendIntent):
                return await self._log_expense(user, intent)

            return GENERIC_FAILURE_MESSAGE

    async def _answer_analytics(self, user: User, question: str) -> str:
        try:
            report = await self.reports.build_report(user.id)
            if report.is_empty:
                logger.info("No expenses to analyse")
                return ANALYTICS_FALLBACK_MESSAGE

            return await self.insights.answer(report, question)
        except SpendWiseError as e:
            logger.error(f"Analytics failed: {e.message}")
            return ANALYTICS_FALLBACK_MESSAGE

    async def _log_expense(self, user: User, intent: SpendIntent) -> str:
        draft = ExpenseDraft(
            user_id=user.id,
            description=intent.description,
            amount=intent.amount,
            category=intent.category,
            sub_category=intent.sub_category,
            date=intent.date,
        )

        try:
            expense = await self.store.create_expense(draft)
        except SpendWiseError as e:
            logger.warning(f"Expense not stored: {e.message}")
            return e.message

        logger.info("✅ Expense logged")
        return EXPENSE_LOGGED_TEMPLATE.format(
            description=expense.description,
            category=expense.category,
            sub_category=expense.sub_category,
            amount=format_money(user.currency, expense.amount),
            date=format_date(expense.date),
        )


async def dispatch_message(
    message: InboundMessage,
    router: ConversationRouter,
    messenger,
) -> Dict[str, Any]:
    """
    Handles an inbound message and sends the reply to the sender.

    Returns:
        Status dict for the webhook response
    """
    reply = await router.handle_message(message.sender, message.text)

    result = await messenger.send_message(to_phone=message.sender, message=reply)
    if not result.get("success"):
        logger.error(f"❌ Failed to deliver reply: {result.get('error')}")
        return {"status": "error", "error": "delivery_failed"}

    return {"status": "success"}
