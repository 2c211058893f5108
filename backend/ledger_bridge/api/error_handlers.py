"""Error Handlers — FastAPI-level backstop behind the Dispatcher.

Invariants:
    - Responses use the same {success, error} envelope and CORS headers as the
      Dispatcher's own output
    - LedgerBridgeError -> its status and message
    - Starlette HTTP errors (e.g. malformed request line) -> their status code
    - Exception (catch-all) -> 500 with the exception message

Design Decisions:
    - Handlers only fire for failures outside Dispatcher.dispatch (body read,
      app wiring); request handling errors never reach them
    - Extracted from main.py to keep the application module small
"""

import logging

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException

from ledger_bridge.config import get_settings
from ledger_bridge.core.envelope import failure, from_error, from_unhandled
from ledger_bridge.core.errors import LedgerBridgeError
from ledger_bridge.api.responses import render

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:

    @app.exception_handler(LedgerBridgeError)
    async def domain_error_handler(request: Request, exc: LedgerBridgeError):
        logger.error(
            f"LedgerBridgeError: {exc.message}",
            extra={
                "error_code": exc.code, "error_category": exc.category.value,
                "path": request.url.path,
            },
        )
        return render(from_error(exc), get_settings().cors_allow_origin)


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(
            f"HTTP error on {request.url.path}: {exc.status_code} {exc.detail}",
        )
        return render(
            failure(str(exc.detail), exc.status_code), get_settings().cors_allow_origin,
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: 500 with the exception message passed through."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return render(from_unhandled(exc), get_settings().cors_allow_origin)
