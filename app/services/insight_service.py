"""
app/services/insight_service.py

Purpose: Natural-language answers about expenses

- Answers analytics questions from the chat using the CSV report
- One-line insight for the dashboard
"""

from app.core.logging import get_logger
from app.services.ai_service import TEXT_MIME_TYPE
from app.services.report_service import Report

logger = get_logger(__name__)

ANALYTICS_INSTRUCTION = (
    "Based on below expenses done by user give answer to user. "
    "Optimize as WhatsApp message reply and add emojis.\n\n"
    "Expense History:\n"
)

INSIGHT_PROMPT = (
    "Based on the following expenses done by the user for the current month, "
    "provide a short and crisp one-line insight:\n\n"
)


class InsightGenerator:
    def __init__(self, ai):
        self.ai = ai

    async def answer(self, report: Report, question: str) -> str:
        """
        Answers the user's question from their expense history.
        The model output is returned verbatim as the chat reply.
        """
        logger.info(f"Answering analytics question over {len(report.rows)} expenses")
        return await self.ai.generate(
            question,
            system_instruction=ANALYTICS_INSTRUCTION + report.to_csv(),
            response_mime_type=TEXT_MIME_TYPE,
        )

    async def one_line_insight(self, expenses: str) -> str:
        """Dashboard insight for an already rendered expense list."""
        insight = await self.ai.generate(INSIGHT_PROMPT + expenses)
        return insight.strip()
