"""Ledger Bridge API — FastAPI application entry point.

Invariants:
    - One catch-all endpoint forwards every request to the Dispatcher; routing
      lives in the Route Table, not in FastAPI decorators
    - The engine session is created on startup and closed on shutdown via lifespan
    - Every response (including errors raised outside the Dispatcher) carries CORS headers
    - Built-in docs routes are disabled; /api/swagger.json is served from the Route Table

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - The raw (percent-encoded) path is handed to the Dispatcher so encoded
      slashes never split a captured segment
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import Response

from ledger_bridge.api.dispatcher import Dispatcher
from ledger_bridge.api.error_handlers import register_error_handlers
from ledger_bridge.api.responses import render
from ledger_bridge.api.route_table import ROUTE_TABLE
from ledger_bridge.config import API_VERSION, get_settings
from ledger_bridge.core.references import ReferenceGenerator
from ledger_bridge.infrastructure.engine_session import EngineSession, build_engine
from ledger_bridge.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)

HTTP_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    engine = EngineSession(
        build_engine(settings), call_timeout_seconds=settings.engine_call_timeout_seconds,
    )
    app.state.dispatcher = Dispatcher(ROUTE_TABLE, engine, ReferenceGenerator(), settings)
    logger.info(
        f"Ledger Bridge API started ({settings.engine_backend} engine, "
        f"{len(ROUTE_TABLE)} routes)",
    )
    yield
    logger.info("Ledger Bridge API shutting down")
    await engine.close()


app = FastAPI(
    title="Ledger Bridge API",
    version=API_VERSION,
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)

register_error_handlers(app)


def _raw_path(request: Request) -> str:
    raw = request.scope.get("raw_path")
    if not raw:
        return request.url.path
    return raw.decode("latin-1").split("?", 1)[0]


@app.api_route("/{full_path:path}", methods=HTTP_METHODS, include_in_schema=False)
async def dispatch_request(request: Request, full_path: str) -> Response:
    dispatcher: Dispatcher = request.app.state.dispatcher
    body = await request.body()
    outcome = await dispatcher.dispatch(
        request.method,
        _raw_path(request),
        dict(request.query_params),
        body,
    )
    return render(outcome, dispatcher.settings.cors_allow_origin)
