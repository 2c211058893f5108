"""Response Envelope — tests for envelope shape and status selection."""

from ledger_bridge.core.envelope import (
    created, failure, from_error, from_unhandled, no_content, ok, transaction_result,
)
from ledger_bridge.core.errors import (
    EndpointNotFoundError, EngineTimeoutError, ProvisioningError, ResourceNotFoundError,
)
from ledger_bridge.schemas.records import AccountRecord


def test_ok_wraps_data_with_camel_case_keys():
    outcome = ok(AccountRecord(account_ref="ACME01", name="Acme", credit_limit=500))
    assert outcome.status_code == 200
    assert outcome.success
    assert outcome.body["data"]["accountRef"] == "ACME01"
    assert outcome.body["data"]["creditLimit"] == 500
    assert "error" not in outcome.body


def test_created_is_201():
    assert created({"id": 1}).status_code == 201


def test_failure_envelope_never_has_data():
    outcome = failure("nope", 400)
    assert outcome.body == {"success": False, "error": "nope"}
    assert not outcome.success


def test_no_content_has_no_body():
    outcome = no_content()
    assert outcome.status_code == 204
    assert outcome.body is None


def test_not_found_with_hint():
    outcome = from_error(ResourceNotFoundError(
        "Customer", "NOPE", hint="Set autoCreateCustomer=true to create.",
    ))
    assert outcome.status_code == 404
    assert outcome.body["error"] == (
        "Customer not found: NOPE. Set autoCreateCustomer=true to create."
    )


def test_endpoint_not_found_message():
    outcome = from_error(EndpointNotFoundError("GET", "/api/nope"))
    assert outcome.body["error"] == "Endpoint not found: GET /api/nope"


def test_provisioning_failure_is_400():
    outcome = from_error(ProvisioningError("supplier", "NEWSUP"))
    assert outcome.status_code == 400
    assert outcome.body["error"] == "Failed to auto-create supplier: NEWSUP"


def test_engine_timeout_is_504():
    outcome = from_error(EngineTimeoutError("post_sales_invoice", 60))
    assert outcome.status_code == 504
    assert outcome.body["error"] == "Accounting engine call timed out: post_sales_invoice"


def test_unhandled_message_passes_through_verbatim():
    outcome = from_unhandled(RuntimeError("COM object disconnected"))
    assert outcome.status_code == 500
    assert outcome.body == {"success": False, "error": "COM object disconnected"}


def test_transaction_result_shape():
    assert transaction_result("SI-1", "Sales invoice posted") == {
        "success": True, "reference": "SI-1", "message": "Sales invoice posted",
    }
