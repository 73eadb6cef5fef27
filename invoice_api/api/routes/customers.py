"""Customer Routes — HTTP surface of CustomerService.

Invariants:
    - Every route sits behind the auth gate (router-level dependency)
    - Write bodies are validated by CustomerWrite before the handler runs
    - page/limit arrive as raw strings; the service coerces them
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from invoice_api.api.dependencies import get_customer_service, require_api_token
from invoice_api.schemas.customer import CustomerWrite
from invoice_api.services.customer_service import CustomerService

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/customers", tags=["customers"],
    dependencies=[Depends(require_api_token)],
)


@router.get("")
async def list_customers(
    page: str | None = Query(None),
    limit: str | None = Query(None),
    search: str = Query(""),
    service: CustomerService = Depends(get_customer_service),
):
    """List customers with pagination and search."""
    return {"success": True, "data": await service.list(page, limit, search)}


@router.get("/{customer_id}")
async def get_customer(
    customer_id: int, service: CustomerService = Depends(get_customer_service),
):
    """Get a customer with its invoices."""
    customer = await service.get_by_id(customer_id)
    return {"success": True, "data": {"customer": customer}}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_customer(
    body: CustomerWrite, service: CustomerService = Depends(get_customer_service),
):
    customer = await service.create(body)
    return {
        "success": True,
        "message": "Customer created successfully",
        "data": {"customer": customer},
    }


@router.put("/{customer_id}")
async def update_customer(
    customer_id: int,
    body: CustomerWrite,
    service: CustomerService = Depends(get_customer_service),
):
    customer = await service.update(customer_id, body)
    return {
        "success": True,
        "message": "Customer updated successfully",
        "data": {"customer": customer},
    }


@router.delete("/{customer_id}")
async def delete_customer(
    customer_id: int, service: CustomerService = Depends(get_customer_service),
):
    await service.delete(customer_id)
    return {"success": True, "message": "Customer deleted successfully"}
