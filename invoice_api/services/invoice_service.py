"""Invoice Service — CRUD, search, statistics and document export over invoices.

Invariants:
    - Every write re-resolves customerId; a missing owner raises
      ResourceNotFoundError("Customer") and nothing is written
    - update() checks the invoice first, then the customer (distinct 404 messages)
    - stats() computes count, sum and the 5 most recent invoices concurrently;
      any failure aborts the whole call
    - export_document() is deterministic for a given invoice and clock

Design Decisions:
    - today is injectable: the "Generated on" line is the only time-dependent
      part of the document
"""

import asyncio
import logging
from datetime import date, datetime, timezone
from typing import Any, Callable

from invoice_api.core.document import InvoiceDocument, build_invoice_document
from invoice_api.core.domain_types import (
    Aggregate, CustomerId, Entity, INVOICE_ORDER, InvoiceId,
)
from invoice_api.core.errors import ResourceNotFoundError
from invoice_api.core.filters import MATCH_ALL, build_invoice_filter
from invoice_api.core.pagination import (
    build_pagination, compute_skip, normalize_page_params,
)
from invoice_api.core.projections import (
    INVOICE_DETAIL, INVOICE_LIST, INVOICE_RECENT,
)
from invoice_api.core.repository_protocols import PersistenceGateway
from invoice_api.schemas.invoice import InvoiceWrite
from invoice_api.schemas.validation import validate_payload

logger = logging.getLogger(__name__)

RECENT_INVOICES_LIMIT = 5


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


def _log_mutation(action: str, invoice_id: int) -> None:
    logger.info(
        f"Invoice {invoice_id} {action}",
        extra={"entity": Entity.INVOICE.value, "entity_id": invoice_id},
    )


class InvoiceService:
    """Invoice use cases."""

    def __init__(
        self, gateway: PersistenceGateway, today: Callable[[], date] = _utc_today,
    ):
        self.gateway = gateway
        self._today = today

    async def list(
        self,
        page: object = None,
        limit: object = None,
        search: str | None = None,
        customer_id: CustomerId | None = None,
    ) -> dict:
        """Paginated invoices matching search in description/note/customer name."""
        page, limit = normalize_page_params(page, limit)
        invoices, total = await self.gateway.list(
            Entity.INVOICE,
            build_invoice_filter(search, customer_id),
            skip=compute_skip(page, limit),
            take=limit,
            order=INVOICE_ORDER,
            projection=INVOICE_LIST,
        )
        return {
            "invoices": invoices,
            "pagination": build_pagination(page, limit, total),
        }

    async def get_by_id(self, invoice_id: InvoiceId) -> dict:
        invoice = await self.gateway.get_by_id(
            Entity.INVOICE, invoice_id, INVOICE_DETAIL,
        )
        if invoice is None:
            raise ResourceNotFoundError(Entity.INVOICE.value, invoice_id)
        return invoice

    async def _require_customer(self, customer_id: CustomerId) -> None:
        if not await self.gateway.exists(Entity.CUSTOMER, customer_id):
            logger.warning(
                f"Invoice write rejected: customer {customer_id} not found",
                extra={"entity": Entity.CUSTOMER.value, "entity_id": customer_id},
            )
            raise ResourceNotFoundError(Entity.CUSTOMER.value, customer_id)

    async def create(self, payload: InvoiceWrite | dict[str, Any]) -> dict:
        body = validate_payload(InvoiceWrite, payload)
        await self._require_customer(body.customer_id)
        invoice = await self.gateway.create(
            Entity.INVOICE, body.to_fields(), INVOICE_LIST,
        )
        _log_mutation("created", invoice["id"])
        return invoice

    async def update(
        self, invoice_id: InvoiceId, payload: InvoiceWrite | dict[str, Any],
    ) -> dict:
        body = validate_payload(InvoiceWrite, payload)
        if not await self.gateway.exists(Entity.INVOICE, invoice_id):
            raise ResourceNotFoundError(Entity.INVOICE.value, invoice_id)
        await self._require_customer(body.customer_id)
        invoice = await self.gateway.update(
            Entity.INVOICE, invoice_id, body.to_fields(), INVOICE_LIST,
        )
        if invoice is None:
            raise ResourceNotFoundError(Entity.INVOICE.value, invoice_id)
        _log_mutation("updated", invoice_id)
        return invoice

    async def delete(self, invoice_id: InvoiceId) -> None:
        if not await self.gateway.delete(Entity.INVOICE, invoice_id):
            raise ResourceNotFoundError(Entity.INVOICE.value, invoice_id)
        _log_mutation("deleted", invoice_id)

    async def export_document(self, invoice_id: InvoiceId) -> InvoiceDocument:
        invoice = await self.get_by_id(invoice_id)
        return build_invoice_document(invoice, self._today())

    async def stats(self) -> dict:
        """Invoice count, amount total and the most recent invoices."""
        total_invoices, total_amount, (recent, _) = await asyncio.gather(
            self.gateway.aggregate(Entity.INVOICE, Aggregate.COUNT),
            self.gateway.aggregate(Entity.INVOICE, Aggregate.SUM, field="amount"),
            self.gateway.list(
                Entity.INVOICE, MATCH_ALL,
                skip=0, take=RECENT_INVOICES_LIMIT,
                order=INVOICE_ORDER, projection=INVOICE_RECENT,
            ),
        )
        return {
            "totalInvoices": total_invoices,
            "totalAmount": float(total_amount),
            "recentInvoices": recent,
        }
