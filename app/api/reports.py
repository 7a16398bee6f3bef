"""
app/api/reports.py

Purpose: Dashboard report endpoints

- POST /webhook/ui exports the user's expenses as CSV
- POST /getInsight returns a one-line insight for an expense list

The export never fails with a 5xx: internal errors return an empty CSV.
An unknown phone number is a 404.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from app.core.exceptions import ExternalServiceError, SpendWiseError, UserNotFoundError
from app.core.logging import get_logger
from app.dependencies import get_expense_store, get_insight_generator, get_report_builder
from app.schemas.webhook import InsightRequest, InsightResponse, ReportRequest
from app.services.expense_store import ExpenseStore
from app.services.insight_service import InsightGenerator
from app.services.report_service import ReportBuilder
from utils.constants import REPORT_FILENAME
from utils.validation_utils import normalize_phone_number

logger = get_logger(__name__)
router = APIRouter()


def _csv_response(content: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={REPORT_FILENAME}"},
    )


@router.post("/webhook/ui")
async def export_report(
    body: ReportRequest,
    store: ExpenseStore = Depends(get_expense_store),
    reports: ReportBuilder = Depends(get_report_builder),
):
    phone = normalize_phone_number(body.sender)
    logger.info(f"Report export requested for {phone}")

    try:
        user = await store.find_user_by_phone(phone)
    except SpendWiseError as e:
        logger.error(f"User lookup failed during export: {e.message}")
        return _csv_response("")

    if not user:
        raise UserNotFoundError()

    try:
        report = await reports.build_report(user.id)
    except SpendWiseError as e:
        logger.error(f"Report export failed: {e.message}")
        return _csv_response("")

    return _csv_response(report.to_csv())


@router.post("/getInsight", response_model=InsightResponse)
async def get_insight(
    body: InsightRequest,
    insights: InsightGenerator = Depends(get_insight_generator),
):
    try:
        insight = await insights.one_line_insight(body.expenses)
    except ExternalServiceError as e:
        logger.error(f"Error generating insight: {e.message}")
        raise SpendWiseError("Failed to generate insight", code="INSIGHT_FAILED") from e

    return InsightResponse(insight=insight)
