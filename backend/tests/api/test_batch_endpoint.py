"""Batch endpoint — tests for the HTTP contract of /api/transactions/batch."""

import pytest


@pytest.mark.asyncio
async def test_si_and_unknown_type(client, customer):
    resp = await client.post("/api/transactions/batch", json={"transactions": [
        {"type": "SI", "accountRef": "ACME01", "netAmount": 100, "taxAmount": 20},
        {"type": "XX", "accountRef": "ACME01", "netAmount": 1},
    ]})
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert (data["successCount"], data["failCount"]) == (1, 1)
    assert data["results"][1]["message"] == "Unknown transaction type: XX"


@pytest.mark.asyncio
async def test_all_failing_batch_is_still_200(client):
    resp = await client.post("/api/transactions/batch", json={"transactions": [
        {"type": "SI", "accountRef": "NOBODY"},
        {"type": "??"},
    ]})
    assert resp.status_code == 200
    assert resp.json()["data"]["failCount"] == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{"transactions": []}, {}, {"transactions": None}])
async def test_empty_list_is_rejected(client, body):
    resp = await client.post("/api/transactions/batch", json=body)
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid request body or empty transactions list"


@pytest.mark.asyncio
async def test_missing_or_malformed_body_is_rejected(client):
    for content in (b"", b"{nope"):
        resp = await client.post("/api/transactions/batch", content=content)
        assert resp.json()["error"] == "Invalid request body or empty transactions list"


@pytest.mark.asyncio
async def test_allocate_payment(client, customer):
    await client.post("/api/sales/invoice", json={
        "customerAccount": "ACME01", "invoiceRef": "INV-1", "netAmount": 100,
    })
    await client.post("/api/sales/receipt", json={
        "customerAccount": "ACME01", "receiptRef": "REC-1", "amount": 60,
    })
    resp = await client.post("/api/payments/allocate", json={
        "accountRef": "ACME01", "paymentReference": "REC-1",
        "invoiceReference": "INV-1", "amount": 60,
    })
    assert resp.status_code == 200
    assert resp.json()["data"]["message"] == "Payment allocated"


@pytest.mark.asyncio
async def test_allocate_requires_both_references(client):
    resp = await client.post("/api/payments/allocate", json={"paymentReference": "REC-1"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "paymentReference and invoiceReference are required"


@pytest.mark.asyncio
async def test_allocate_unknown_invoice_fails(client):
    resp = await client.post("/api/payments/allocate", json={
        "paymentReference": "REC-1", "invoiceReference": "INV-404",
    })
    assert resp.status_code == 500
    assert resp.json()["error"] == "Failed to allocate payment"
