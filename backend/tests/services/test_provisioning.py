"""Provisioning Policy — tests for the check/auto-create state machine.

Tests cover:
    - Existing account proceeds without a create call
    - Missing account + auto_create=False -> 404 with flag hint, no create call
    - Missing account + auto_create=True -> placeholder created, CREATED outcome
    - Rejected or failing auto-create -> ProvisioningError (400)
    - require_account -> plain not-found message
    - Invalid references are rejected before the engine is touched
"""

from unittest.mock import MagicMock

import pytest

from ledger_bridge.core.domain_types import AccountKind, ProvisioningOutcome
from ledger_bridge.core.errors import (
    DownstreamError, InvalidRequestError, ProvisioningError, ResourceNotFoundError,
)
from ledger_bridge.services.provisioning import (
    PLACEHOLDER_ADDRESS, ensure_account, require_account,
)


@pytest.mark.asyncio
async def test_existing_customer_proceeds(engine_session, memory_engine, customer):
    memory_engine.create_customer = MagicMock(wraps=memory_engine.create_customer)
    ref, outcome = await ensure_account(
        engine_session, AccountKind.CUSTOMER, "acme01", auto_create=True,
    )
    assert ref == "ACME01"
    assert outcome == ProvisioningOutcome.EXISTING
    memory_engine.create_customer.assert_not_called()


@pytest.mark.asyncio
async def test_missing_without_auto_create_is_not_found(engine_session, memory_engine):
    memory_engine.create_customer = MagicMock(wraps=memory_engine.create_customer)
    with pytest.raises(ResourceNotFoundError) as exc_info:
        await ensure_account(engine_session, AccountKind.CUSTOMER, "nope", auto_create=False)
    assert exc_info.value.http_status == 404
    assert "NOPE" in exc_info.value.message
    assert "autoCreateCustomer" in exc_info.value.message
    memory_engine.create_customer.assert_not_called()


@pytest.mark.asyncio
async def test_missing_with_auto_create_creates_placeholder(engine_session, memory_engine):
    ref, outcome = await ensure_account(
        engine_session, AccountKind.SUPPLIER, "newsup", auto_create=True,
    )
    assert outcome == ProvisioningOutcome.CREATED
    supplier = memory_engine.get_supplier(ref)
    assert supplier.name == "Auto-created NEWSUP"
    assert supplier.address1 == PLACEHOLDER_ADDRESS


@pytest.mark.asyncio
async def test_rejected_auto_create_is_provisioning_error(engine_session, memory_engine):
    memory_engine.create_customer = MagicMock(return_value=False)
    with pytest.raises(ProvisioningError) as exc_info:
        await ensure_account(engine_session, AccountKind.CUSTOMER, "NOPE", auto_create=True)
    assert exc_info.value.http_status == 400
    assert exc_info.value.message == "Failed to auto-create customer: NOPE"


@pytest.mark.asyncio
async def test_failing_auto_create_keeps_engine_detail(engine_session, memory_engine):
    memory_engine.create_supplier = MagicMock(side_effect=RuntimeError("ledger locked"))
    with pytest.raises(ProvisioningError) as exc_info:
        await ensure_account(engine_session, AccountKind.SUPPLIER, "NOPE", auto_create=True)
    assert exc_info.value.detail == "ledger locked"


@pytest.mark.asyncio
async def test_failing_existence_check_is_downstream_error(engine_session, memory_engine):
    memory_engine.customer_exists = MagicMock(side_effect=RuntimeError("not logged in"))
    with pytest.raises(DownstreamError):
        await ensure_account(engine_session, AccountKind.CUSTOMER, "ACME01", auto_create=True)


@pytest.mark.asyncio
async def test_oversized_reference_rejected_before_engine(engine_session, memory_engine):
    memory_engine.customer_exists = MagicMock(return_value=True)
    with pytest.raises(InvalidRequestError, match="customerAccount must be max 8 characters"):
        await ensure_account(
            engine_session, AccountKind.CUSTOMER, "TOOLONGREF", True, field="customerAccount",
        )
    memory_engine.customer_exists.assert_not_called()


@pytest.mark.asyncio
async def test_require_account_has_no_flag_hint(engine_session):
    with pytest.raises(ResourceNotFoundError) as exc_info:
        await require_account(engine_session, AccountKind.SUPPLIER, "ghost")
    assert exc_info.value.message == "Supplier not found: GHOST"


@pytest.mark.asyncio
async def test_require_account_returns_normalized_ref(engine_session, customer):
    assert await require_account(engine_session, AccountKind.CUSTOMER, " acme01") == "ACME01"
