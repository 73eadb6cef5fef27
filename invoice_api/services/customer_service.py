"""Customer Service — CRUD and search over customers with the delete guard.

Invariants:
    - list() returns at most `limit` customers plus a pagination block
    - get_by_id() includes the customer's invoices, newest date first
    - create/update validate the whole payload before touching storage
    - update() fully replaces writable fields (omitted optionals become None)
    - delete() refuses while the customer owns >= 1 invoice

Design Decisions:
    - Referential guard counted through the gateway, not left to a DB cascade:
      the caller gets a specific, recoverable ConstraintViolationError
"""

import logging
from typing import Any

from invoice_api.core.domain_types import (
    Aggregate, CUSTOMER_ORDER, CustomerId, Entity,
)
from invoice_api.core.errors import ConstraintViolationError, ResourceNotFoundError
from invoice_api.core.filters import build_customer_filter, invoices_of_customer
from invoice_api.core.pagination import (
    build_pagination, compute_skip, normalize_page_params,
)
from invoice_api.core.projections import (
    CUSTOMER_DETAIL, CUSTOMER_LIST, CUSTOMER_PLAIN,
)
from invoice_api.core.repository_protocols import PersistenceGateway
from invoice_api.schemas.customer import CustomerWrite
from invoice_api.schemas.validation import validate_payload

logger = logging.getLogger(__name__)


def _log_mutation(action: str, customer_id: int) -> None:
    logger.info(
        f"Customer {customer_id} {action}",
        extra={"entity": Entity.CUSTOMER.value, "entity_id": customer_id},
    )


class CustomerService:
    """Customer use cases."""

    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    async def list(
        self, page: object = None, limit: object = None, search: str | None = None,
    ) -> dict:
        """Paginated customers, optionally matching search in name/email/phone."""
        page, limit = normalize_page_params(page, limit)
        customers, total = await self.gateway.list(
            Entity.CUSTOMER,
            build_customer_filter(search),
            skip=compute_skip(page, limit),
            take=limit,
            order=CUSTOMER_ORDER,
            projection=CUSTOMER_LIST,
        )
        return {
            "customers": customers,
            "pagination": build_pagination(page, limit, total),
        }

    async def get_by_id(self, customer_id: CustomerId) -> dict:
        customer = await self.gateway.get_by_id(
            Entity.CUSTOMER, customer_id, CUSTOMER_DETAIL,
        )
        if customer is None:
            raise ResourceNotFoundError(Entity.CUSTOMER.value, customer_id)
        return customer

    async def create(self, payload: CustomerWrite | dict[str, Any]) -> dict:
        body = validate_payload(CustomerWrite, payload)
        customer = await self.gateway.create(
            Entity.CUSTOMER, body.to_fields(), CUSTOMER_PLAIN,
        )
        _log_mutation("created", customer["id"])
        return customer

    async def update(
        self, customer_id: CustomerId, payload: CustomerWrite | dict[str, Any],
    ) -> dict:
        body = validate_payload(CustomerWrite, payload)
        customer = await self.gateway.update(
            Entity.CUSTOMER, customer_id, body.to_fields(), CUSTOMER_PLAIN,
        )
        if customer is None:
            raise ResourceNotFoundError(Entity.CUSTOMER.value, customer_id)
        _log_mutation("updated", customer_id)
        return customer

    async def delete(self, customer_id: CustomerId) -> None:
        if not await self.gateway.exists(Entity.CUSTOMER, customer_id):
            raise ResourceNotFoundError(Entity.CUSTOMER.value, customer_id)
        invoice_count = await self.gateway.aggregate(
            Entity.INVOICE, Aggregate.COUNT,
            predicate=invoices_of_customer(customer_id),
        )
        if invoice_count > 0:
            logger.warning(
                f"Refused to delete customer {customer_id} with {invoice_count} invoice(s)",
                extra={"entity": Entity.CUSTOMER.value, "entity_id": customer_id},
            )
            raise ConstraintViolationError(
                "Cannot delete customer with existing invoices",
            )
        await self.gateway.delete(Entity.CUSTOMER, customer_id)
        _log_mutation("deleted", customer_id)
