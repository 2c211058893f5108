"""Request Context — everything a route handler may touch for one request.

Invariants:
    - The engine session and reference generator are shared, process-wide objects;
      the context only borrows them
    - Query helpers never raise (see core/decoding.py)
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, TypeVar

from pydantic import BaseModel

from ledger_bridge.config import Settings
from ledger_bridge.core.decoding import decode_body, parse_date, parse_limit, require_body
from ledger_bridge.core.engine_protocol import EngineResult
from ledger_bridge.core.errors import DownstreamError
from ledger_bridge.core.references import ReferenceGenerator
from ledger_bridge.core.routing import RouteTable
from ledger_bridge.infrastructure.engine_session import EngineSession

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass
class RequestContext:
    method: str
    path: str
    params: dict[str, str]
    query: Mapping[str, str]
    body: bytes
    engine: EngineSession
    references: ReferenceGenerator
    routes: RouteTable
    settings: Settings

    def query_text(self, name: str, default: str = "") -> str:
        return self.query.get(name) or default

    def query_limit(self, default: int) -> int:
        return parse_limit(self.query.get("limit"), default)

    def query_date(self, name: str) -> datetime | None:
        return parse_date(self.query.get(name))

    def decode(self, model: type[ModelT]) -> ModelT | None:
        return decode_body(model, self.body)

    def require(self, model: type[ModelT]) -> ModelT:
        return require_body(model, self.body)


def expect(result: EngineResult, message: str) -> Any:
    """Unwrap an engine result or raise DownstreamError(message)."""
    if not result.ok:
        raise DownstreamError(message, result.error)
    return result.value


def expect_posted(result: EngineResult, message: str) -> None:
    """Postings report success as a bool; anything falsy is a failure."""
    if not result.posted:
        raise DownstreamError(message, result.error)
