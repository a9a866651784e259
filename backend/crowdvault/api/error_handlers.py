"""Error Handlers — map every failure to the CrowdVault error envelope.

Invariants:
    - CrowdVaultError → its own to_response() envelope and http_status
    - HTTPException (e.g. blank caller header) and RequestValidationError use the
      same {"error": {...}} shape, so clients parse one format
    - Unhandled exceptions → 500 with no internal details

Design Decisions:
    - Rejected business calls log at WARNING; only 5xx-class errors log at ERROR
    - Kept out of main.py so the app module only wires things together
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from crowdvault.core.errors import CrowdVaultError, ErrorCategory, ErrorSeverity

logger = logging.getLogger(__name__)


def _envelope(
    code: str, message: str, category: str, severity: ErrorSeverity, **fields,
) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category,
            "severity": severity.value,
            **fields,
        },
    }


def _http_category(status_code: int) -> str:
    if status_code == status.HTTP_404_NOT_FOUND:
        return ErrorCategory.RESOURCE_NOT_FOUND.value
    return ErrorCategory.VALIDATION.value


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(CrowdVaultError)
    async def crowdvault_error_handler(request: Request, exc: CrowdVaultError):
        level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
        logger.log(
            level,
            f"{exc.code}: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "caller": exc.context.caller,
                "request_index": exc.context.request_index,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )

    @app.exception_handler(HTTPException)
    async def http_error_handler(request: Request, exc: HTTPException):
        logger.warning(
            f"HTTP {exc.status_code} on {request.url.path}: {exc.detail}",
            extra={"path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=_envelope(
                "HTTP_ERROR", str(exc.detail), _http_category(exc.status_code),
                ErrorSeverity.WARNING,
            ),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"path": request.url.path},
        )
        details = [
            {
                "field": ".".join(str(loc) for loc in e["loc"]),
                "message": e["msg"],
                "type": e["type"],
            }
            for e in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_envelope(
                "VALIDATION_ERROR", "Invalid request data",
                ErrorCategory.VALIDATION.value, ErrorSeverity.ERROR,
                details=details,
            ),
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_envelope(
                "INTERNAL_ERROR", "An unexpected error occurred", "internal",
                ErrorSeverity.CRITICAL,
            ),
        )
