"""Error Handlers — map every failure to the fundraising error envelope.

Invariants:
    - FundraisingError → its own to_response() envelope and http_status
    - RequestValidationError → 400 VALIDATION_ERROR; details name the field
      the same way core ValidationError does ("amount", not "body.amount")
    - Exception (catch-all) → 500 INTERNAL_ERROR, never leaks internal details
    - Rejected operations logged at WARNING, 5xx at ERROR, with the
      project/milestone/wallet identifiers from ErrorContext

Design Decisions:
    - Three layers registered from main.py: domain, request validation, catch-all
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.errors import ErrorCategory, ErrorSeverity, FundraisingError

logger = logging.getLogger(__name__)

# Leading loc entries that name where a field came from rather than the field
_REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(FundraisingError, handle_fundraising_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


async def handle_fundraising_error(request: Request, exc: FundraisingError):
    ctx = exc.context
    logger.log(
        logging.ERROR if exc.http_status >= 500 else logging.WARNING,
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "project_id": ctx.project_id,
            "milestone_number": ctx.milestone_number,
            "wallet": ctx.wallet,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError,
):
    details = [_describe(e) for e in exc.errors()]
    logger.warning(
        f"Malformed request on {request.url.path}: "
        + "; ".join(f"{d['field']}: {d['message']}" for d in details),
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request data",
                "category": ErrorCategory.VALIDATION.value,
                "severity": ErrorSeverity.WARNING.value,
                "details": details,
            },
        },
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    """Catch-all — never leaks internal details."""
    logger.error(
        f"Unhandled exception on {request.url.path}: {exc}",
        exc_info=True,
        extra={"path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "category": ErrorCategory.INTERNAL.value,
                "severity": ErrorSeverity.CRITICAL.value,
            },
        },
    )


def _describe(error: dict) -> dict:
    loc = [str(part) for part in error["loc"]]
    location = loc[0] if loc and loc[0] in _REQUEST_LOCATIONS else None
    field = ".".join(loc[1:] if location else loc)
    return {
        "field": field or (location or ""),
        "location": location,
        "message": error["msg"],
        "type": error["type"],
    }
