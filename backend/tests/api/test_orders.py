"""Sales & purchase orders — tests for the order lifecycle over HTTP."""

import pytest


@pytest.mark.asyncio
async def test_sales_order_lifecycle(client):
    resp = await client.post("/api/salesorders", json={
        "customerAccountRef": "shopco", "autoCreateCustomer": True, "reference": "PO-77",
        "orderDate": "2026-10-01",
        "lines": [{"stockCode": "W1", "quantity": 2, "unitPrice": 10}],
    })
    assert resp.status_code == 201
    order = resp.json()["data"]
    assert order["accountRef"] == "SHOPCO"
    assert order["orderDate"] == "2026-10-01"
    assert order["netAmount"] == 20
    assert order["taxAmount"] == 4
    number = order["orderNumber"]

    resp = await client.patch(f"/api/salesorders/{number}", json={"notes": "Deliver Friday"})
    assert resp.json()["data"]["message"] == "Sales order updated"
    resp = await client.get(f"/api/salesorders/{number}")
    assert resp.json()["data"]["notes"] == "Deliver Friday"

    resp = await client.post(f"/api/salesorders/{number}/complete")
    assert resp.json()["data"]["message"] == "Sales order completed"
    resp = await client.post(f"/api/salesorders/{number}/complete")
    assert resp.status_code == 500
    assert resp.json()["error"] == f"Failed to complete sales order: {number}"

    resp = await client.delete(f"/api/salesorders/{number}")
    assert resp.json()["data"]["message"] == "Sales order deleted"
    resp = await client.get(f"/api/salesorders/{number}")
    assert resp.status_code == 404
    assert resp.json()["error"] == f"Sales order not found: {number}"


@pytest.mark.asyncio
async def test_sales_order_for_unknown_customer_is_404(client):
    resp = await client.post("/api/salesorders", json={"customerAccountRef": "NOPE"})
    assert resp.status_code == 404
    assert "autoCreateCustomer" in resp.json()["error"]


@pytest.mark.asyncio
async def test_sales_order_field_name_in_validation(client):
    resp = await client.post("/api/salesorders", json={"customerAccountRef": "MUCHTOOLONG"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "customerAccountRef must be max 8 characters"


@pytest.mark.asyncio
async def test_purchase_order_for_existing_supplier(client, supplier):
    resp = await client.post("/api/purchaseorders", json={"supplierAccount": "paper01"})
    assert resp.status_code == 201
    resp = await client.get("/api/purchaseorders?search=PAPER01")
    assert len(resp.json()["data"]) == 1


@pytest.mark.asyncio
async def test_purchase_order_unknown_supplier_hint(client):
    resp = await client.post("/api/purchaseorders", json={"supplierAccount": "NOPE"})
    assert resp.status_code == 404
    assert "autoCreateSupplier" in resp.json()["error"]


@pytest.mark.asyncio
async def test_update_missing_order_fails(client):
    resp = await client.patch("/api/purchaseorders/999", json={"notes": "x"})
    assert resp.status_code == 500
    assert resp.json()["error"] == "Failed to update purchase order: 999"
