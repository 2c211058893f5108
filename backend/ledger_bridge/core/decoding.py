"""Request Decoding — raw body to typed request model, plus shared field checks.

Invariants:
    - Empty body decodes to None; each handler decides whether that is an error
    - Malformed JSON and shape mismatches raise InvalidRequestError("Invalid request body")
      with no field diagnostics
    - Account references are stripped, uppercased and at most 8 characters;
      oversized references are rejected, never truncated
    - Query helpers never raise: bad limits fall back, bad dates are ignored
"""

from datetime import datetime
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from ledger_bridge.core.domain_types import AccountRef, MAX_ACCOUNT_REF_LENGTH
from ledger_bridge.core.errors import InvalidRequestError

INVALID_BODY_MESSAGE = "Invalid request body"

ModelT = TypeVar("ModelT", bound=BaseModel)

# Accepted in addition to ISO 8601 (the engine's locale is en-GB)
_FALLBACK_DATE_FORMATS = ("%d/%m/%Y", "%d/%m/%Y %H:%M:%S", "%Y%m%d")


def decode_body(model: type[ModelT], raw: bytes | None) -> ModelT | None:
    """Parse a JSON object body into model. Empty body -> None."""
    if raw is None or not raw.strip():
        return None
    try:
        return model.model_validate_json(raw)
    except ValidationError as e:
        raise InvalidRequestError(INVALID_BODY_MESSAGE) from e


def require_body(model: type[ModelT], raw: bytes | None) -> ModelT:
    body = decode_body(model, raw)
    if body is None:
        raise InvalidRequestError(INVALID_BODY_MESSAGE)
    return body


def require_text(value: str | None, field: str) -> str:
    """Reject None, empty and whitespace-only values with a field-named message."""
    if value is None or not value.strip():
        raise InvalidRequestError(f"{field} is required", field=field)
    return value


def require_all(message: str, *values: str | None) -> None:
    """Combined presence check for fields that are only meaningful together."""
    if any(v is None or not v.strip() for v in values):
        raise InvalidRequestError(message)


def normalize_account_ref(value: str | None, field: str = "accountRef") -> AccountRef:
    ref = require_text(value, field).strip()
    if len(ref) > MAX_ACCOUNT_REF_LENGTH:
        raise InvalidRequestError(
            f"{field} must be max {MAX_ACCOUNT_REF_LENGTH} characters", field=field,
        )
    return AccountRef(ref.upper())


# ─── Query Parameters ───────────────────────────────────────────

def parse_limit(raw: str | None, default: int) -> int:
    """Positive integer or the endpoint default."""
    try:
        limit = int(raw) if raw is not None else default
    except ValueError:
        return default
    return limit if limit > 0 else default


def parse_date(raw: str | None) -> datetime | None:
    """Best-effort date parse; unparsable input is ignored (None)."""
    if not raw or not raw.strip():
        return None
    text = raw.strip()
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in _FALLBACK_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None
