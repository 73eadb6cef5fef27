"""Invoice Routes — HTTP surface of InvoiceService.

Invariants:
    - Every route sits behind the auth gate (router-level dependency)
    - /stats is registered before /{invoice_id}
    - /{invoice_id}/download answers with an attachment, not a JSON envelope
"""

import logging

from fastapi import APIRouter, Depends, Query, Response, status

from invoice_api.api.dependencies import get_invoice_service, require_api_token
from invoice_api.core.domain_types import MAX_ENTITY_ID
from invoice_api.schemas.invoice import InvoiceWrite
from invoice_api.services.invoice_service import InvoiceService

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/invoices", tags=["invoices"],
    dependencies=[Depends(require_api_token)],
)


@router.get("")
async def list_invoices(
    page: str | None = Query(None),
    limit: str | None = Query(None),
    search: str = Query(""),
    customer_id: int | None = Query(None, alias="customerId", le=MAX_ENTITY_ID),
    service: InvoiceService = Depends(get_invoice_service),
):
    """List invoices with pagination, search and optional customer scope."""
    data = await service.list(page, limit, search, customer_id)
    return {"success": True, "data": data}


@router.get("/stats")
async def invoice_stats(service: InvoiceService = Depends(get_invoice_service)):
    """Invoice count, total amount and the 5 most recent invoices."""
    return {"success": True, "data": await service.stats()}


@router.get("/{invoice_id}")
async def get_invoice(
    invoice_id: int, service: InvoiceService = Depends(get_invoice_service),
):
    invoice = await service.get_by_id(invoice_id)
    return {"success": True, "data": {"invoice": invoice}}


@router.get("/{invoice_id}/download")
async def download_invoice(
    invoice_id: int, service: InvoiceService = Depends(get_invoice_service),
):
    """Invoice document as an attachment."""
    document = await service.export_document(invoice_id)
    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={
            "Content-Disposition": f"attachment; filename={document.filename}",
        },
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_invoice(
    body: InvoiceWrite, service: InvoiceService = Depends(get_invoice_service),
):
    invoice = await service.create(body)
    return {
        "success": True,
        "message": "Invoice created successfully",
        "data": {"invoice": invoice},
    }


@router.put("/{invoice_id}")
async def update_invoice(
    invoice_id: int,
    body: InvoiceWrite,
    service: InvoiceService = Depends(get_invoice_service),
):
    invoice = await service.update(invoice_id, body)
    return {
        "success": True,
        "message": "Invoice updated successfully",
        "data": {"invoice": invoice},
    }


@router.delete("/{invoice_id}")
async def delete_invoice(
    invoice_id: int, service: InvoiceService = Depends(get_invoice_service),
):
    await service.delete(invoice_id)
    return {"success": True, "message": "Invoice deleted successfully"}
