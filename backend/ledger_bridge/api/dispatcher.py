"""Dispatcher — (method, path, query, body) -> Outcome through the Route Table.

Invariants:
    - OPTIONS on any path short-circuits to 204 without touching the route table
    - No matching route (path or method) -> 404 "Endpoint not found: {METHOD} {path}"
    - LedgerBridgeError -> its own status and message
    - Any other exception -> 500 with the exception message verbatim
    - This is the single catch-all boundary; nothing is retried here
"""

import logging
from collections.abc import Mapping
from urllib.parse import unquote

from ledger_bridge.api.context import RequestContext
from ledger_bridge.config import Settings
from ledger_bridge.core.envelope import Outcome, from_error, from_unhandled, no_content
from ledger_bridge.core.errors import (
    DownstreamError, EndpointNotFoundError, ErrorSeverity, LedgerBridgeError,
)
from ledger_bridge.core.references import ReferenceGenerator
from ledger_bridge.core.routing import RouteTable
from ledger_bridge.infrastructure.engine_session import EngineSession

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


class Dispatcher:
    """Routes requests to handlers and converts every result into an Outcome."""

    def __init__(
        self,
        routes: RouteTable,
        engine: EngineSession,
        references: ReferenceGenerator,
        settings: Settings,
    ):
        self.routes = routes
        self.engine = engine
        self.references = references
        self.settings = settings

    async def dispatch(
        self,
        method: str,
        raw_path: str,
        query: Mapping[str, str] | None = None,
        body: bytes = b"",
    ) -> Outcome:
        method = method.upper()
        if method == "OPTIONS":
            return no_content()

        path = unquote(raw_path)
        try:
            outcome = await self._invoke(method, raw_path, path, query or {}, body)
        except LedgerBridgeError as e:
            self._log_handled(method, path, e)
            outcome = from_error(e)
        except Exception as e:
            logger.error(
                f"Unhandled exception: {e}", exc_info=True,
                extra={"method": method, "path": path},
            )
            outcome = from_unhandled(e)

        logger.info(
            f"{method} {path} -> {outcome.status_code}",
            extra={"method": method, "path": path, "status_code": outcome.status_code},
        )
        return outcome

    async def _invoke(
        self, method: str, raw_path: str, path: str,
        query: Mapping[str, str], body: bytes,
    ) -> Outcome:
        match = self.routes.match(method, raw_path)
        if match is None:
            raise EndpointNotFoundError(method, path)
        ctx = RequestContext(
            method=method,
            path=path,
            params=match.params,
            query=query,
            body=body,
            engine=self.engine,
            references=self.references,
            routes=self.routes,
            settings=self.settings,
        )
        return await match.route.handler(ctx)

    @staticmethod
    def _log_handled(method: str, path: str, exc: LedgerBridgeError) -> None:
        extra = {
            "method": method, "path": path,
            "error_code": exc.code, "error_category": exc.category.value,
        }
        message = exc.message
        if isinstance(exc, DownstreamError) and exc.detail:
            message = f"{exc.message} ({exc.detail})"
        logger.log(_LOG_LEVELS[exc.severity], message, extra=extra)
