"""Error translation for the lease API.

Every failure leaves the API as ``{"detail": ..., "code": ...}``, plus a
field-level ``errors`` list when the request itself was malformed.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ifrs16_lite.domain.errors import DomainError

logger = logging.getLogger(__name__)

# Starlette renamed the constant to HTTP_422_UNPROCESSABLE_CONTENT
UNPROCESSABLE = 422

# Calculation errors mean the contract cannot be measured as submitted
STATUS_CODE_MAP: dict[str, int] = {
    "VALIDATION_ERROR": UNPROCESSABLE,
    "INVALID_TERM": UNPROCESSABLE,
    "INVALID_SCHEDULE": UNPROCESSABLE,
    "INVALID_MODIFICATION": UNPROCESSABLE,
}

IGNORED_LOCATIONS = ("body", "query")


def _error_body(
    detail: str, code: str, errors: list[dict[str, str]] | None = None
) -> dict[str, Any]:
    body: dict[str, Any] = {"detail": detail, "code": code}
    if errors is not None:
        body["errors"] = errors
    return body


def _request_fields(request: Request) -> dict[str, str]:
    return {"path": request.url.path, "method": request.method}


async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    """
    Answer a lease calculation error with its code.

    Codes listed in STATUS_CODE_MAP map to 422; any other DomainError is a
    400.
    """
    payload = exc.to_dict()
    status_code = STATUS_CODE_MAP.get(exc.error_code, status.HTTP_400_BAD_REQUEST)

    logger.info(
        "Lease request rejected",
        extra={
            "error_code": exc.error_code,
            "error_message": exc.message,
            "status_code": status_code,
            **_request_fields(request),
        },
    )

    return JSONResponse(
        status_code=status_code,
        content=_error_body(
            payload.get("message", str(exc)),
            payload.get("code", exc.error_code),
            payload.get("errors"),
        ),
    )


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Answer a request the DTOs refused to parse.

    Field paths are dotted and relative to the body, so a bad variable
    payment amount is reported as ``variable_payments.0.amount``.
    """
    errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"] if loc not in IGNORED_LOCATIONS),
            "message": error["msg"],
            "code": error["type"],
        }
        for error in exc.errors()
    ]

    logger.info(
        "Malformed lease request",
        extra={"errors": errors, **_request_fields(request)},
    )

    return JSONResponse(
        status_code=UNPROCESSABLE,
        content=_error_body("Invalid request parameters", "VALIDATION_ERROR", errors),
    )


async def handle_value_error(request: Request, exc: ValueError) -> JSONResponse:
    # Enum parsing of frequency and timing strings
    logger.info(
        "Unparseable lease value",
        extra={"error_message": str(exc), **_request_fields(request)},
    )

    return JSONResponse(
        status_code=UNPROCESSABLE,
        content=_error_body(str(exc), "INVALID_VALUE"),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error in lease API",
        exc_info=exc,
        extra={
            "error_type": type(exc).__name__,
            "error_message": str(exc),
            **_request_fields(request),
        },
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("An unexpected error occurred", "INTERNAL_ERROR"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the lease API error handlers on ``app``."""
    app.add_exception_handler(DomainError, handle_domain_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(ValueError, handle_value_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, handle_unexpected_error)

    logger.debug("Lease API error handlers installed")
