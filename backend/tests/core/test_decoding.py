"""Request Decoding — tests for body decoding, field checks and query parsing."""

from datetime import datetime

import pytest

from ledger_bridge.core.decoding import (
    decode_body, normalize_account_ref, parse_date, parse_limit,
    require_all, require_body, require_text,
)
from ledger_bridge.core.errors import InvalidRequestError
from ledger_bridge.schemas.requests import PostSalesInvoiceRequest, PostTransactionBatchRequest


# ─── Bodies ─────────────────────────────────────────────────────

@pytest.mark.parametrize("raw", [b"", b"   ", None])
def test_empty_body_decodes_to_none(raw):
    assert decode_body(PostSalesInvoiceRequest, raw) is None


@pytest.mark.parametrize("raw", [b"{not json", b"[1, 2]", b'"text"', b'{"netAmount": "lots"}'])
def test_malformed_body_is_invalid_request(raw):
    with pytest.raises(InvalidRequestError) as exc_info:
        decode_body(PostSalesInvoiceRequest, raw)
    assert exc_info.value.message == "Invalid request body"
    assert exc_info.value.http_status == 400


def test_camel_case_body_populates_snake_case_fields():
    body = decode_body(
        PostSalesInvoiceRequest,
        b'{"customerAccount": "acme01", "netAmount": 100, "autoCreateCustomer": true}',
    )
    assert body.customer_account == "acme01"
    assert body.net_amount == 100
    assert body.auto_create_customer is True
    assert body.nominal_code is None


def test_unknown_fields_are_ignored():
    body = decode_body(PostTransactionBatchRequest, b'{"transactions": [], "extra": 1}')
    assert body.transactions == []


def test_require_body_rejects_empty():
    with pytest.raises(InvalidRequestError, match="Invalid request body"):
        require_body(PostSalesInvoiceRequest, b"")


# ─── Field checks ───────────────────────────────────────────────

@pytest.mark.parametrize("value", [None, "", "   "])
def test_require_text_names_the_field(value):
    with pytest.raises(InvalidRequestError) as exc_info:
        require_text(value, "stockCode")
    assert exc_info.value.message == "stockCode is required"
    assert exc_info.value.field == "stockCode"


def test_require_all_uses_combined_message():
    with pytest.raises(InvalidRequestError, match="code and name are required"):
        require_all("code and name are required", "4001", " ")
    require_all("code and name are required", "4001", "Sales B")


def test_account_ref_is_stripped_and_uppercased():
    assert normalize_account_ref("  abc123 ") == "ABC123"


def test_account_ref_of_exactly_eight_is_accepted():
    assert normalize_account_ref("abcdefgh") == "ABCDEFGH"


def test_account_ref_over_eight_is_rejected_not_truncated():
    with pytest.raises(InvalidRequestError) as exc_info:
        normalize_account_ref("ABCDEFGHI", "customerAccount")
    assert exc_info.value.message == "customerAccount must be max 8 characters"


def test_missing_account_ref_is_required():
    with pytest.raises(InvalidRequestError, match="accountRef is required"):
        normalize_account_ref(None)


# ─── Query parameters ───────────────────────────────────────────

@pytest.mark.parametrize("raw,expected", [
    (None, 50), ("", 50), ("abc", 50), ("-5", 50), ("0", 50), ("25", 25), ("1.5", 50),
])
def test_parse_limit_falls_back_to_default(raw, expected):
    assert parse_limit(raw, 50) == expected


@pytest.mark.parametrize("raw,expected", [
    ("2026-10-01", datetime(2026, 10, 1)),
    ("2026-10-01T08:15:00", datetime(2026, 10, 1, 8, 15)),
    ("01/10/2026", datetime(2026, 10, 1)),
    ("20261001", datetime(2026, 10, 1)),
])
def test_parse_date_accepts_known_formats(raw, expected):
    assert parse_date(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "yesterday", "31/31/2026"])
def test_unparsable_date_is_ignored(raw):
    assert parse_date(raw) is None
