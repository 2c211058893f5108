"""Response Envelope — uniform {success, data, error} wrapper and status selection.

Invariants:
    - Success envelopes carry "data", failure envelopes carry "error" and never "data"
    - Payloads are reduced to JSON-compatible values with camelCase keys
    - A 204 outcome has no body at all
"""

from dataclasses import dataclass
from typing import Any

from fastapi.encoders import jsonable_encoder

from ledger_bridge.core.errors import LedgerBridgeError


@dataclass(frozen=True)
class Outcome:
    """Status code plus envelope, ready for the HTTP shell to serialize."""
    status_code: int
    body: dict | None

    @property
    def success(self) -> bool:
        return bool(self.body and self.body.get("success"))


def ok(data: Any, status_code: int = 200) -> Outcome:
    return Outcome(
        status_code,
        {"success": True, "data": jsonable_encoder(data, by_alias=True)},
    )


def created(data: Any) -> Outcome:
    return ok(data, status_code=201)


def no_content() -> Outcome:
    return Outcome(204, None)


def failure(message: str, status_code: int) -> Outcome:
    return Outcome(status_code, {"success": False, "error": message})


def from_error(exc: LedgerBridgeError) -> Outcome:
    return Outcome(exc.http_status, exc.to_response())


def from_unhandled(exc: Exception) -> Outcome:
    """Catch-all mapping: 500 with the exception message passed through."""
    return failure(str(exc) or exc.__class__.__name__, 500)


def transaction_result(reference: str | None, message: str, success: bool = True) -> dict:
    """Per-operation result payload shared by postings and batch items."""
    return {"success": success, "reference": reference, "message": message}
