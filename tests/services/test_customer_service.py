"""Customer service — pagination, search, full-replace updates and the delete guard.

Invariants:
    - list returns at most `limit` items and pages == ceil(total / limit)
    - create → get_by_id round-trips every supplied field
    - delete refuses while invoices exist, succeeds once they are gone
"""

import logging
import math

import pytest

from invoice_api.core.errors import (
    ConstraintViolationError, RequestValidationFailedError, ResourceNotFoundError,
)

FULL_CUSTOMER = {
    "name": "Sarah Johnson",
    "address": "456 Oak Ave, Los Angeles, CA 90210",
    "phone": "+1-555-0456",
    "email": "sarah.johnson@email.com",
    "jobLocation": "Downtown LA Warehouse",
}


async def _invoice_for(invoice_service, customer_id, issued="2024-01-15"):
    return await invoice_service.create({
        "date": issued, "description": "Consulting services",
        "amount": 150, "customerId": customer_id,
    })


async def test_create_then_get_round_trips_fields(customer_service):
    created = await customer_service.create(FULL_CUSTOMER)

    fetched = await customer_service.get_by_id(created["id"])

    for field, value in FULL_CUSTOMER.items():
        assert fetched[field] == value
    assert fetched["invoices"] == []
    assert fetched["createdAt"]


async def test_create_rejects_short_name_without_writing(customer_service):
    with pytest.raises(RequestValidationFailedError) as exc_info:
        await customer_service.create({"name": "A"})

    assert "at least 2 characters" in exc_info.value.errors[0]["message"]
    assert (await customer_service.list())["pagination"]["total"] == 0


@pytest.mark.parametrize("page,limit", [(1, 5), (2, 5), (3, 5), (1, 10), (2, 4)])
async def test_list_pages_are_bounded(customer_service, page, limit):
    for n in range(12):
        await customer_service.create({"name": f"Customer {n:02d}"})

    result = await customer_service.list(page, limit)

    pagination = result["pagination"]
    assert len(result["customers"]) <= limit
    assert pagination["total"] == 12
    assert pagination["pages"] == math.ceil(12 / limit)
    assert pagination["page"] == page


async def test_last_page_holds_remainder(customer_service):
    for n in range(12):
        await customer_service.create({"name": f"Customer {n:02d}"})

    result = await customer_service.list(page=3, limit=5)

    assert len(result["customers"]) == 2


async def test_list_coerces_bad_page_params(customer_service):
    result = await customer_service.list(page="abc", limit="-1")
    assert result["pagination"] == {"page": 1, "limit": 10, "total": 0, "pages": 0}


async def test_search_matches_name_email_or_phone(customer_service):
    await customer_service.create(FULL_CUSTOMER)
    await customer_service.create({"name": "Michael Brown", "phone": "+1-555-0789"})

    by_name = await customer_service.list(search="SARAH")
    by_email = await customer_service.list(search="johnson@")
    by_phone = await customer_service.list(search="0789")
    everyone = await customer_service.list(search="   ")

    assert [c["name"] for c in by_name["customers"]] == ["Sarah Johnson"]
    assert [c["name"] for c in by_email["customers"]] == ["Sarah Johnson"]
    assert [c["name"] for c in by_phone["customers"]] == ["Michael Brown"]
    assert everyone["pagination"]["total"] == 2


async def test_list_includes_invoice_summaries(customer_service, invoice_service):
    customer = await customer_service.create({"name": "Billed Customer"})
    invoice = await _invoice_for(invoice_service, customer["id"])

    listed = (await customer_service.list())["customers"][0]

    assert listed["invoices"] == [
        {"id": invoice["id"], "amount": 150.0, "date": "2024-01-15"},
    ]


async def test_get_includes_invoices_newest_first(customer_service, invoice_service):
    customer = await customer_service.create({"name": "Billed Customer"})
    await _invoice_for(invoice_service, customer["id"], "2024-01-01")
    await _invoice_for(invoice_service, customer["id"], "2024-03-01")
    await _invoice_for(invoice_service, customer["id"], "2024-02-01")

    fetched = await customer_service.get_by_id(customer["id"])

    assert [i["date"] for i in fetched["invoices"]] == [
        "2024-03-01", "2024-02-01", "2024-01-01",
    ]
    assert fetched["invoices"][0]["description"] == "Consulting services"


async def test_get_missing_customer(customer_service):
    with pytest.raises(ResourceNotFoundError) as exc_info:
        await customer_service.get_by_id(404)
    assert exc_info.value.message == "Customer not found"


async def test_update_replaces_all_fields(customer_service):
    created = await customer_service.create(FULL_CUSTOMER)

    await customer_service.update(created["id"], {"name": "Sarah J. Parker"})
    fetched = await customer_service.get_by_id(created["id"])

    assert fetched["name"] == "Sarah J. Parker"
    assert fetched["address"] is None
    assert fetched["phone"] is None
    assert fetched["email"] is None
    assert fetched["jobLocation"] is None
    assert fetched["createdAt"] == created["createdAt"]


async def test_update_missing_customer(customer_service):
    with pytest.raises(ResourceNotFoundError):
        await customer_service.update(404, {"name": "Nobody Here"})


async def test_update_validates_before_lookup(customer_service):
    with pytest.raises(RequestValidationFailedError):
        await customer_service.update(404, {"name": "A"})


async def test_delete_guarded_by_invoices(customer_service, invoice_service):
    customer = await customer_service.create({"name": "Billed Customer"})
    invoice = await _invoice_for(invoice_service, customer["id"])

    with pytest.raises(ConstraintViolationError) as exc_info:
        await customer_service.delete(customer["id"])
    assert exc_info.value.message == "Cannot delete customer with existing invoices"

    await invoice_service.delete(invoice["id"])
    await customer_service.delete(customer["id"])

    with pytest.raises(ResourceNotFoundError):
        await customer_service.get_by_id(customer["id"])


async def test_delete_missing_customer(customer_service):
    with pytest.raises(ResourceNotFoundError):
        await customer_service.delete(404)


async def test_values_round_trip_as_sent(customer_service):
    sent = {"name": "  Jo Doe ", "email": "Jo@Example.COM", "phone": "+1 (555) 010-2030"}

    created = await customer_service.create(sent)
    fetched = await customer_service.get_by_id(created["id"])

    for field, value in sent.items():
        assert fetched[field] == value


async def test_long_name_is_stored(customer_service):
    created = await customer_service.create({"name": "x" * 300})
    assert (await customer_service.get_by_id(created["id"]))["name"] == "x" * 300


async def test_out_of_range_ids_read_as_missing(customer_service):
    huge = 99999999999999999999

    with pytest.raises(ResourceNotFoundError):
        await customer_service.get_by_id(huge)
    with pytest.raises(ResourceNotFoundError):
        await customer_service.update(huge, {"name": "Nobody Here"})
    with pytest.raises(ResourceNotFoundError):
        await customer_service.delete(huge)


async def test_huge_page_returns_empty_page(customer_service):
    await customer_service.create({"name": "Only Customer"})

    result = await customer_service.list(page="99999999999999999999")

    assert result["customers"] == []
    assert result["pagination"]["total"] == 1


async def test_mutations_logged_at_info(customer_service, caplog):
    caplog.set_level(logging.INFO, logger="invoice_api.services.customer_service")

    created = await customer_service.create({"name": "Logged Customer"})
    await customer_service.update(created["id"], {"name": "Logged Customer 2"})

    messages = [r.getMessage() for r in caplog.records if r.levelno == logging.INFO]
    assert f"Customer {created['id']} created" in messages
    assert f"Customer {created['id']} updated" in messages
