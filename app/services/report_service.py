"""
app/services/report_service.py

Purpose: Expense reports

- Builds the newest-first tabular view of a user's expenses
- Amounts prefixed with the user's currency, dates as YYYY-MM-DD
- CSV export for the dashboard and the analytics prompt
"""

import csv
import io
from typing import List, Optional

from pydantic import BaseModel

from app.core.config import settings
from app.core.logging import get_logger, LogContext
from app.models.expense import Expense
from utils.constants import REPORT_HEADER
from utils.time_utils import format_date
from utils.validation_utils import format_money

logger = get_logger(__name__)


class ReportRow(BaseModel):
    description: str
    amount: str
    category: str
    sub_category: str
    date: str

    def as_list(self) -> List[str]:
        return [self.description, self.amount, self.category, self.sub_category, self.date]


class Report(BaseModel):
    rows: List[ReportRow] = []

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def to_csv(self) -> str:
        """
        Renders the report as CSV. An empty report renders as "".
        """
        if self.is_empty:
            return ""

        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(REPORT_HEADER)
        for row in self.rows:
            writer.writerow(row.as_list())
        return buffer.getvalue()


def build_row(expense: Expense, currency: str) -> ReportRow:
    return ReportRow(
        description=expense.description,
        amount=format_money(currency, expense.amount),
        category=expense.category,
        sub_category=expense.sub_category,
        date=format_date(expense.date),
    )


class ReportBuilder:
    """Builds expense reports from the store."""

    def __init__(self, store, limit: Optional[int] = None):
        self.store = store
        self.limit = limit or settings.REPORT_LIMIT

    async def build_report(self, user_id: str) -> Report:
        """
        Builds the report for a user.

        Unknown users and users without expenses get an empty report.

        Raises:
            StoreError: If the store cannot be read
        """
        with LogContext(user_id=user_id):
            user = await self.store.get_user(user_id)
            if not user:
                logger.warning("Report requested for unknown user")
                return Report()

            expenses = await self.store.list_expenses(user_id, limit=self.limit)
            # Store returns newest first; keep it stable for equal dates
            expenses = sorted(expenses, key=lambda e: e.date, reverse=True)

            report = Report(rows=[build_row(e, user.currency) for e in expenses])
            logger.info(f"Report built with {len(report.rows)} rows")
            return report
