"""Customer routes — envelopes, status codes and the delete guard over HTTP."""

JOHN = {
    "name": "John Smith",
    "address": "123 Main St, New York, NY 10001",
    "phone": "+1-555-0123",
    "email": "john.smith@email.com",
    "jobLocation": "Manhattan Office Building",
}


async def test_create_customer(client):
    response = await client.post("/api/customers", json=JOHN)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Customer created successfully"
    customer = body["data"]["customer"]
    assert customer["id"] >= 1
    assert customer["jobLocation"] == "Manhattan Office Building"


async def test_create_customer_reports_every_violation(client):
    response = await client.post("/api/customers", json={
        "email": "not-an-email", "phone": "abc",
    })

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation errors"
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert body["errors"] == [
        {"field": "name", "message": "Customer name is required"},
        {"field": "email", "message": "Please provide a valid email address"},
        {"field": "phone", "message": "Please provide a valid phone number"},
    ]


async def test_list_customers(client):
    for n in range(3):
        await client.post("/api/customers", json={"name": f"Customer {n}"})

    response = await client.get("/api/customers", params={"page": 1, "limit": 2})

    assert response.status_code == 200
    data = response.json()["data"]
    assert len(data["customers"]) == 2
    assert data["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}


async def test_list_customers_tolerates_bad_paging(client):
    response = await client.get("/api/customers", params={"page": "x", "limit": "0"})

    assert response.status_code == 200
    assert response.json()["data"]["pagination"]["limit"] == 10


async def test_get_customer(client):
    created = (await client.post("/api/customers", json=JOHN)).json()["data"]["customer"]

    response = await client.get(f"/api/customers/{created['id']}")

    assert response.status_code == 200
    customer = response.json()["data"]["customer"]
    assert customer["name"] == "John Smith"
    assert customer["invoices"] == []


async def test_get_missing_customer(client):
    response = await client.get("/api/customers/999")

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Customer not found"
    assert body["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_update_customer(client):
    created = (await client.post("/api/customers", json=JOHN)).json()["data"]["customer"]

    response = await client.put(
        f"/api/customers/{created['id']}", json={"name": "John A. Smith"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Customer updated successfully"
    assert body["data"]["customer"]["name"] == "John A. Smith"
    assert body["data"]["customer"]["email"] is None


async def test_update_missing_customer(client):
    response = await client.put("/api/customers/999", json={"name": "Nobody Here"})
    assert response.status_code == 404


async def test_delete_customer_with_invoices_is_refused(client):
    created = (await client.post("/api/customers", json=JOHN)).json()["data"]["customer"]
    await client.post("/api/invoices", json={
        "date": "2024-01-15", "description": "Website Development Services",
        "amount": 2500, "customerId": created["id"],
    })

    response = await client.delete(f"/api/customers/{created['id']}")

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Cannot delete customer with existing invoices"
    assert body["error"]["code"] == "CONSTRAINT_VIOLATION"


async def test_delete_customer(client):
    created = (await client.post("/api/customers", json=JOHN)).json()["data"]["customer"]

    response = await client.delete(f"/api/customers/{created['id']}")

    assert response.status_code == 200
    assert response.json() == {
        "success": True, "message": "Customer deleted successfully",
    }
    assert (await client.get(f"/api/customers/{created['id']}")).status_code == 404


async def test_out_of_range_customer_id_is_not_found(client):
    response = await client.get("/api/customers/99999999999999999999")

    assert response.status_code == 404
    assert response.json()["message"] == "Customer not found"


async def test_huge_page_is_an_empty_page(client):
    response = await client.get("/api/customers", params={"page": "99999999999999999999"})

    assert response.status_code == 200
    assert response.json()["data"]["customers"] == []
