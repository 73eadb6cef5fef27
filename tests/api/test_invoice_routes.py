"""Invoice routes — CRUD envelopes, stats, customer scoping and document download."""

import pytest


@pytest.fixture
async def customer_id(client):
    response = await client.post("/api/customers", json={
        "name": "John Smith", "email": "john.smith@email.com",
    })
    return response.json()["data"]["customer"]["id"]


def _invoice(customer_id, **overrides):
    payload = {
        "date": "2024-01-15",
        "description": "Website Development Services",
        "amount": 2500,
        "note": "Initial payment for website development project",
        "customerId": customer_id,
    }
    payload.update(overrides)
    return payload


async def test_create_invoice_and_stats(client, customer_id):
    response = await client.post("/api/invoices", json=_invoice(customer_id))

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Invoice created successfully"
    assert body["data"]["invoice"]["customer"]["name"] == "John Smith"

    stats = (await client.get("/api/invoices/stats")).json()["data"]
    assert stats["totalInvoices"] == 1
    assert stats["totalAmount"] == 2500.0
    assert stats["recentInvoices"][0]["customer"] == {"name": "John Smith"}


async def test_create_invoice_unknown_customer(client):
    response = await client.post("/api/invoices", json=_invoice(999))

    assert response.status_code == 404
    assert response.json()["message"] == "Customer not found"


async def test_create_invoice_validation(client, customer_id):
    response = await client.post("/api/invoices", json={
        "description": "abc", "amount": -5, "customerId": customer_id,
    })

    assert response.status_code == 400
    assert response.json()["errors"] == [
        {"field": "date", "message": "Invoice date is required"},
        {"field": "description", "message": "Description must be between 5 and 500 characters"},
        {"field": "amount", "message": "Amount must be a positive number"},
    ]


async def test_list_invoices_for_customer(client, customer_id):
    other = (await client.post("/api/customers", json={"name": "Sarah Johnson"})).json()
    await client.post("/api/invoices", json=_invoice(customer_id))
    await client.post("/api/invoices", json=_invoice(other["data"]["customer"]["id"]))

    response = await client.get("/api/invoices", params={"customerId": customer_id})

    data = response.json()["data"]
    assert data["pagination"]["total"] == 1
    assert data["invoices"][0]["customerId"] == customer_id


async def test_list_invoices_rejects_non_integer_customer(client):
    response = await client.get("/api/invoices", params={"customerId": "abc"})

    assert response.status_code == 400
    assert response.json()["errors"] == [
        {"field": "customerId", "message": "Customer ID must be a valid integer"},
    ]


async def test_get_update_delete_invoice(client, customer_id):
    created = (await client.post("/api/invoices", json=_invoice(customer_id))).json()
    invoice_id = created["data"]["invoice"]["id"]

    fetched = await client.get(f"/api/invoices/{invoice_id}")
    assert fetched.json()["data"]["invoice"]["customer"]["email"] == "john.smith@email.com"

    updated = await client.put(
        f"/api/invoices/{invoice_id}",
        json=_invoice(customer_id, amount="99.90", note=None),
    )
    assert updated.status_code == 200
    assert updated.json()["message"] == "Invoice updated successfully"
    assert updated.json()["data"]["invoice"]["amount"] == 99.9
    assert updated.json()["data"]["invoice"]["note"] is None

    deleted = await client.delete(f"/api/invoices/{invoice_id}")
    assert deleted.json() == {"success": True, "message": "Invoice deleted successfully"}
    assert (await client.get(f"/api/invoices/{invoice_id}")).status_code == 404


async def test_update_missing_invoice(client, customer_id):
    response = await client.put("/api/invoices/999", json=_invoice(customer_id))

    assert response.status_code == 404
    assert response.json()["message"] == "Invoice not found"


async def test_download_invoice(client, customer_id):
    created = (await client.post("/api/invoices", json=_invoice(customer_id))).json()
    invoice_id = created["data"]["invoice"]["id"]

    response = await client.get(f"/api/invoices/{invoice_id}/download")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/pdf")
    assert response.headers["content-disposition"] == (
        f"attachment; filename=invoice-{invoice_id}.pdf"
    )
    assert response.text.startswith(f"INVOICE #{invoice_id}\n")
    assert "Amount: $2500.00" in response.text


async def test_download_missing_invoice(client):
    response = await client.get("/api/invoices/999/download")

    assert response.status_code == 404
    assert response.json()["message"] == "Invoice not found"


async def test_out_of_range_customer_id_in_body(client):
    response = await client.post("/api/invoices", json=_invoice(99999999999999999999))

    assert response.status_code == 400
    assert response.json()["errors"] == [
        {"field": "customerId", "message": "Customer ID must be a valid integer"},
    ]


async def test_out_of_range_customer_id_in_query(client):
    response = await client.get(
        "/api/invoices", params={"customerId": "99999999999999999999"},
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "customerId"


async def test_sub_cent_amount_rejected(client, customer_id):
    response = await client.post("/api/invoices", json=_invoice(customer_id, amount=0.001))

    assert response.status_code == 400
    assert response.json()["errors"] == [
        {"field": "amount", "message": "Amount must be a positive number"},
    ]


async def test_out_of_range_invoice_id_is_not_found(client):
    response = await client.delete("/api/invoices/99999999999999999999")

    assert response.status_code == 404
    assert response.json()["message"] == "Invoice not found"
