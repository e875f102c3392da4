"""Error Handlers — global exception handlers for the membership API.

Invariants:
    - NetgroupError → structured envelope {success: false, error, meta} with its http_status
    - RequestValidationError → 400 VALIDATION_ERROR with field-level details
    - Exception (catch-all) → 500 INTERNAL_ERROR, never leaks internal details

Design Decisions:
    - Three-layer handler: domain (NetgroupError), validation (Pydantic), catch-all (Exception)
    - Client errors (4xx) logged at WARNING, server errors at ERROR
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from netgroup.core.domain_types import utc_now
from netgroup.core.errors import NetgroupError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:

    @app.exception_handler(NetgroupError)
    async def netgroup_error_handler(request: Request, exc: NetgroupError):
        log = logger.warning if exc.http_status < 500 else logger.error
        log(
            f"{exc.code}: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_envelope({
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "category": "internal",
            }),
        )


def _envelope(error: dict[str, Any]) -> dict:
    return {
        "success": False,
        "error": error,
        "meta": {"timestamp": utc_now().isoformat()},
    }


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    return _envelope({
        "code": "VALIDATION_ERROR",
        "message": "Invalid request data",
        "category": "validation",
        "details": [
            {
                "field": ".".join(str(loc) for loc in e["loc"]),
                "message": e["msg"],
                "type": e["type"],
            }
            for e in exc.errors()
        ],
    })
