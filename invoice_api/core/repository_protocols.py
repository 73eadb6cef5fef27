"""Boundary Protocols — contract between the services and the persistence gateway.

Invariants:
    - Services NEVER import infrastructure — dependency arrows point inward only
    - Every read takes an explicit Projection; items come back as plain dicts
    - Mutations are single-row; update/get return None and delete returns False
      when the id does not resolve

Design Decisions:
    - Protocol over ABC: structural subtyping, the SQLAlchemy gateway and any
      test double satisfy it without inheritance
    - Async methods: implementations do IO, services orchestrate around them
"""

from typing import Any, Protocol

from invoice_api.core.domain_types import Aggregate, Entity, SortKey
from invoice_api.core.filters import Predicate
from invoice_api.core.projections import Projection


class PersistenceGateway(Protocol):
    """Storage of customers and invoices — implemented by infrastructure."""

    async def list(
        self,
        entity: Entity,
        predicate: Predicate,
        skip: int,
        take: int,
        order: tuple[SortKey, ...],
        projection: Projection,
    ) -> tuple[list[dict], int]: ...

    async def get_by_id(
        self, entity: Entity, entity_id: int, projection: Projection,
    ) -> dict | None: ...

    async def exists(self, entity: Entity, entity_id: int) -> bool: ...

    async def create(
        self, entity: Entity, fields: dict[str, Any], projection: Projection,
    ) -> dict: ...

    async def update(
        self,
        entity: Entity,
        entity_id: int,
        fields: dict[str, Any],
        projection: Projection,
    ) -> dict | None: ...

    async def delete(self, entity: Entity, entity_id: int) -> bool: ...

    async def aggregate(
        self,
        entity: Entity,
        op: Aggregate,
        field: str | None = None,
        predicate: Predicate | None = None,
    ) -> Any: ...
