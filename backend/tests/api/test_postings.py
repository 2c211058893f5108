"""Ledger postings — tests for invoices, credits, receipts, bank entries and journals.

Tests cover:
    - Provisioning on invoices (404 with hint, auto-create, failed auto-create)
    - Credits/receipts require an existing account
    - Generated references and posting defaults
    - Journal line count and balance checks
"""

import logging
from datetime import datetime
from unittest.mock import MagicMock

import pytest


# ─── Sales invoices & provisioning ──────────────────────────────

@pytest.mark.asyncio
async def test_invoice_for_unknown_customer_without_auto_create(client, memory_engine):
    memory_engine.post_sales_invoice = MagicMock(return_value=True)
    resp = await client.post("/api/sales/invoice", json={
        "customerAccount": "NOPE", "netAmount": 100, "autoCreateCustomer": False,
    })
    assert resp.status_code == 404
    error = resp.json()["error"]
    assert "NOPE" in error and "autoCreateCustomer" in error
    memory_engine.post_sales_invoice.assert_not_called()


@pytest.mark.asyncio
async def test_invoice_auto_creates_customer_then_posts(client, memory_engine):
    resp = await client.post("/api/sales/invoice", json={
        "customerAccount": "newco", "netAmount": 100, "taxAmount": 20,
        "autoCreateCustomer": True,
    })
    assert resp.status_code == 200
    assert resp.json()["data"] == {
        "success": True,
        "reference": "SI-20261018093000",
        "message": "Sales invoice posted",
    }
    assert memory_engine.get_customer("NEWCO").name == "Auto-created NEWCO"
    assert memory_engine.get_customer("NEWCO").balance == 120


@pytest.mark.asyncio
async def test_invoice_logs_how_the_account_was_provisioned(client, customer, caplog):
    caplog.set_level(logging.INFO, logger="ledger_bridge.api.routes.ledger_postings")
    await client.post("/api/sales/invoice", json={"customerAccount": "ACME01", "netAmount": 10})
    await client.post("/api/sales/invoice", json={
        "customerAccount": "NEWCO", "netAmount": 10, "autoCreateCustomer": True,
    })
    posted = [r for r in caplog.records if r.getMessage() == "Sales invoice posted"]
    assert [(r.account_ref, r.provisioning) for r in posted] == [
        ("ACME01", "existing"), ("NEWCO", "created"),
    ]


@pytest.mark.asyncio
async def test_failed_auto_create_blocks_the_posting(client, memory_engine):
    memory_engine.create_customer = MagicMock(return_value=False)
    memory_engine.post_sales_invoice = MagicMock(return_value=True)
    resp = await client.post("/api/sales/invoice", json={
        "customerAccount": "NOPE", "netAmount": 100, "autoCreateCustomer": True,
    })
    assert resp.status_code == 400
    assert resp.json()["error"] == "Failed to auto-create customer: NOPE"
    memory_engine.post_sales_invoice.assert_not_called()


@pytest.mark.asyncio
async def test_invoice_applies_defaults(client, memory_engine, customer):
    memory_engine.post_sales_invoice = MagicMock(return_value=True)
    await client.post("/api/sales/invoice", json={
        "customerAccount": "acme01", "invoiceRef": "INV-9", "netAmount": 50,
    })
    memory_engine.post_sales_invoice.assert_called_once_with(
        "ACME01", "INV-9", 50.0, 0.0, "4000", "Posted via API", "T1",
    )


@pytest.mark.asyncio
async def test_engine_rejection_is_500(client, memory_engine, customer):
    resp = await client.post("/api/sales/invoice", json={
        "customerAccount": "ACME01", "netAmount": 50, "nominalCode": "0000",
    })
    assert resp.status_code == 500
    assert resp.json()["error"] == "Failed to post sales invoice"


@pytest.mark.asyncio
async def test_missing_customer_account_is_required(client):
    resp = await client.post("/api/sales/invoice", json={"netAmount": 50})
    assert resp.status_code == 400
    assert resp.json()["error"] == "customerAccount is required"


# ─── Credits & receipts ─────────────────────────────────────────

@pytest.mark.asyncio
async def test_credit_requires_existing_customer(client):
    resp = await client.post("/api/sales/credit", json={"customerAccount": "ghost", "netAmount": 5})
    assert resp.status_code == 404
    assert resp.json()["error"] == "Customer not found: GHOST"


@pytest.mark.asyncio
async def test_receipt_posts_to_default_bank(client, memory_engine, customer):
    resp = await client.post("/api/sales/receipt", json={"customerAccount": "ACME01", "amount": 30})
    assert resp.status_code == 200
    assert resp.json()["data"]["reference"] == "SR-20261018093000"
    assert memory_engine.nominals["1200"].balance == 30


@pytest.mark.asyncio
async def test_purchase_invoice_auto_creates_supplier(client, memory_engine):
    resp = await client.post("/api/purchases/invoice", json={
        "supplierAccount": "NEWSUP", "netAmount": 80, "autoCreateSupplier": True,
    })
    assert resp.status_code == 200
    assert memory_engine.supplier_exists("NEWSUP")
    assert memory_engine.transactions[-1].nominal_code == "5000"


@pytest.mark.asyncio
async def test_purchase_invoice_hint_names_supplier_flag(client):
    resp = await client.post("/api/purchases/invoice", json={"supplierAccount": "NOPE"})
    assert resp.status_code == 404
    assert "autoCreateSupplier" in resp.json()["error"]


@pytest.mark.asyncio
async def test_purchase_payment_and_credit(client, supplier):
    resp = await client.post("/api/purchases/payment", json={
        "supplierAccount": "PAPER01", "amount": 12, "paymentRef": "CHQ-1",
    })
    assert resp.json()["data"]["reference"] == "CHQ-1"
    resp = await client.post("/api/purchases/credit", json={
        "supplierAccount": "PAPER01", "netAmount": 4,
    })
    assert resp.json()["data"]["message"] == "Purchase credit posted"


# ─── Nominals, bank, journals ───────────────────────────────────

@pytest.mark.asyncio
async def test_create_nominal(client):
    resp = await client.post("/api/nominals", json={"code": "4010", "name": "Sales Type B"})
    assert resp.status_code == 201
    resp = await client.get("/api/nominals/4010/exists")
    assert resp.json()["data"]["exists"] is True


@pytest.mark.asyncio
async def test_create_nominal_requires_both_fields(client):
    resp = await client.post("/api/nominals", json={"code": "4010"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "code and name are required"


@pytest.mark.asyncio
async def test_bank_payment_defaults(client, memory_engine):
    resp = await client.post("/api/bank/payment", json={"netAmount": 25})
    assert resp.status_code == 200
    assert resp.json()["data"]["reference"] == "BP-20261018093000"
    assert memory_engine.nominals["7500"].balance == 25


@pytest.mark.asyncio
async def test_bank_receipt_with_standard_tax(client, memory_engine):
    await client.post("/api/bank/receipt", json={"netAmount": 100})
    assert memory_engine.nominals["1200"].balance == 120


@pytest.mark.asyncio
async def test_journal_needs_two_lines(client):
    resp = await client.post("/api/journals", json={"lines": [{"nominalCode": "1200", "debit": 5}]})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Journal must have at least 2 lines"


@pytest.mark.asyncio
async def test_balanced_journal_posts(client, memory_engine):
    resp = await client.post("/api/journals", json={"lines": [
        {"nominalCode": "1200", "debit": 10},
        {"nominalCode": "3000", "credit": 10},
    ]})
    assert resp.status_code == 200
    assert resp.json()["data"]["reference"] == "JNL-20261018093000"
    assert memory_engine.nominals["3000"].balance == -10


@pytest.mark.asyncio
async def test_unbalanced_journal_is_engine_failure(client):
    resp = await client.post("/api/journals", json={"lines": [
        {"nominalCode": "1200", "debit": 10},
        {"nominalCode": "3000", "credit": 9},
    ]})
    assert resp.status_code == 500
    assert resp.json()["error"] == "Failed to post journal"


@pytest.mark.asyncio
async def test_simple_journal_requires_both_nominals(client):
    resp = await client.post("/api/journals/simple", json={"debitNominal": "1200", "amount": 5})
    assert resp.status_code == 400
    assert resp.json()["error"] == "debitNominal and creditNominal are required"


@pytest.mark.asyncio
async def test_simple_journal_defaults_date_to_today(client, memory_engine):
    resp = await client.post("/api/journals/simple", json={
        "debitNominal": "7500", "creditNominal": "1200", "amount": 5,
    })
    assert resp.status_code == 200
    assert memory_engine.transactions[-1].date == datetime(2026, 10, 18)


@pytest.mark.asyncio
async def test_utc_dated_journal_keeps_date_filters_working(client, memory_engine):
    resp = await client.post("/api/journals/simple", json={
        "debitNominal": "1200", "creditNominal": "4000", "amount": 10,
        "date": "2026-10-01T00:00:00Z",
    })
    assert resp.status_code == 200
    assert memory_engine.transactions[-1].date == datetime(2026, 10, 1)

    resp = await client.get("/api/transactions?from=2026-01-01&to=2026-12-31")
    assert resp.status_code == 200
    assert [t["nominalCode"] for t in resp.json()["data"]] == ["1200", "4000"]
