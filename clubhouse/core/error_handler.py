"""
Exception handlers turning errors into structured JSON responses.

Every error response has the shape:

    {"error": {"category", "message", "timestamp", "path", ...details}}
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from clubhouse.core.exceptions import ClubError, ErrorCategory

logger = logging.getLogger(__name__)


def _error_body(category: str, message: str, request: Request, **details) -> dict:
    return {
        "error": {
            "category": category,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "path": request.url.path,
            **details,
        }
    }


async def handle_club_error(request: Request, error: ClubError) -> JSONResponse:
    """Handle structured application errors"""
    log = logger.error if error.status_code >= 500 else logger.warning
    log(
        f"{error.category} on {request.method} {request.url.path}: {error.message}",
        extra={
            "category": error.category,
            "status_code": error.status_code,
            "path": request.url.path,
            "details": error.details,
        },
    )
    return JSONResponse(
        status_code=error.status_code,
        content=_error_body(error.category, error.message, request, **error.details),
    )


async def handle_validation_error(
    request: Request, error: RequestValidationError
) -> JSONResponse:
    """Handle FastAPI request validation errors"""
    errors = []
    for err in error.errors():
        errors.append(
            {
                "field": ".".join(str(loc) for loc in err["loc"]),
                "message": err["msg"],
                "type": err["type"],
            }
        )

    logger.warning(
        f"Validation error on {request.url.path}",
        extra={"errors": errors, "method": request.method},
    )
    return JSONResponse(
        status_code=400,
        content=_error_body(
            ErrorCategory.VALIDATION,
            "Request validation failed",
            request,
            errors=errors,
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ClubError, handle_club_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
