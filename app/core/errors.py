"""
app/core/errors.py

Purpose: HTTP error rendering

- Maps SpendWiseError subclasses to their status codes
- Every error body carries an "error" field for the dashboard
- Hides internal exception text in production
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import SpendWiseError
from app.core.logging import get_logger
from app.schemas.response import ErrorResponse
from app.core.config import settings

logger = get_logger(__name__)


def _error_response(status_code: int, error: str, code: str, details=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, code=code, details=details).model_dump()
    )


def add_exception_handlers(app: FastAPI):
    """
    Registers exception handlers with the FastAPI app.
    """
    @app.exception_handler(SpendWiseError)
    async def spendwise_exception_handler(request: Request, exc: SpendWiseError):
        log = logger.error if exc.status_code >= 500 else logger.info
        log(
            f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
            extra={"status_code": exc.status_code}
        )

        # 5xx app errors may carry provider or database text
        message = exc.message
        if exc.status_code >= 500 and settings.is_production:
            message = "An internal error occurred. Please try again later."

        return _error_response(exc.status_code, message, exc.code, exc.details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """
        Handles standard HTTP exceptions (404, 405, etc.)
        """
        return _error_response(exc.status_code, str(exc.detail), "HTTP_ERROR")

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Handles Pydantic request body validation errors.
        """
        details = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
            for err in exc.errors()
        ]
        return _error_response(422, "Input validation failed", "VALIDATION_ERROR", details)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all for unhandled exceptions.
        """
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={
                "method": request.method,
                "url": str(request.url),
                "client": request.client.host if request.client else "unknown"
            },
            exc_info=True
        )

        message = "An internal error occurred. Please try again later." if settings.is_production else str(exc)
        return _error_response(500, message, "INTERNAL_ERROR")
