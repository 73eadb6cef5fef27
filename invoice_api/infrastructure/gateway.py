"""Persistence Gateway — SQLAlchemy implementation of the services' storage contract.

Invariants:
    - Every call opens its own session from DatabaseSessionManager
      (independent reads can run concurrently, errors map to DatabaseError)
    - Predicates, orderings and projections arrive as core types and are
      compiled here; nothing above this module sees SQLAlchemy
    - Lists are ordered by the requested SortKeys, ties broken by id ascending
    - Relations load only through projection includes (selectinload + load_only)
    - Ids outside the INTEGER range never reach the driver: they read as missing

Design Decisions:
    - list() runs the page fetch and the count with asyncio.gather on separate
      sessions: an AsyncSession cannot run two statements at once
    - delete() issues a single DELETE statement: no ORM cascade bookkeeping,
      the RESTRICT foreign key backs up the service-level guard
"""

import asyncio
import logging
from decimal import Decimal
from typing import Any

from sqlalchemy import Select, delete, false, func, or_, select
from sqlalchemy.orm import load_only, selectinload

from invoice_api.core.domain_types import MAX_ENTITY_ID, Aggregate, Entity, SortKey
from invoice_api.core.filters import MATCH_ALL, Predicate
from invoice_api.core.projections import Projection, attribute_name, project
from invoice_api.db.base import Base
from invoice_api.infrastructure.database import DatabaseSessionManager
from invoice_api.models.customer import Customer
from invoice_api.models.invoice import Invoice

logger = logging.getLogger(__name__)

_MODELS: dict[Entity, type[Base]] = {
    Entity.CUSTOMER: Customer,
    Entity.INVOICE: Invoice,
}


def _column(model: type[Base], api_field: str):
    return getattr(model, attribute_name(api_field))


def _storable_id(value: object) -> bool:
    """Ids outside the INTEGER column range cannot match any row."""
    return not isinstance(value, int) or -MAX_ENTITY_ID - 1 <= value <= MAX_ENTITY_ID


def _search_clause(model: type[Base], field: str, term: str):
    """icontains on a column, or through a relation for dotted fields."""
    if "." not in field:
        return _column(model, field).icontains(term, autoescape=True)
    relation_name, related_field = field.split(".", 1)
    relation = getattr(model, relation_name)
    related_model = relation.property.mapper.class_
    return relation.has(_search_clause(related_model, related_field, term))


def compile_predicate(model: type[Base], predicate: Predicate) -> list:
    """Translate a core Predicate into SQLAlchemy WHERE clauses."""
    if predicate.is_empty:
        return []
    clauses = []
    if predicate.search is not None:
        clauses.append(or_(*(
            _search_clause(model, f, predicate.search.term)
            for f in predicate.search.fields
        )))
    for equals in predicate.equals:
        if not _storable_id(equals.value):
            clauses.append(false())
            continue
        clauses.append(_column(model, equals.field) == equals.value)
    return clauses


def compile_order(model: type[Base], order: tuple[SortKey, ...]) -> list:
    terms = []
    for key in order:
        column = _column(model, key.field)
        terms.append(column.desc() if key.descending else column.asc())
    terms.append(model.id.asc())
    return terms


def compile_loaders(model: type[Base], projection: Projection) -> list:
    """selectinload every included relation, restricted to its projected columns."""
    options = []
    for relation_name, nested in projection.includes.items():
        relation = getattr(model, relation_name)
        related_model = relation.property.mapper.class_
        loader = selectinload(relation).load_only(
            *(_column(related_model, f) for f in nested.fields),
        )
        options.append(loader)
    return options


class SqlAlchemyGateway:
    """PersistenceGateway backed by an async SQLAlchemy engine."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db

    def _select(self, entity: Entity, projection: Projection) -> Select:
        model = _MODELS[entity]
        return select(model).options(*compile_loaders(model, projection))

    async def _fetch_page(
        self,
        entity: Entity,
        predicate: Predicate,
        skip: int,
        take: int,
        order: tuple[SortKey, ...],
        projection: Projection,
    ) -> list[dict]:
        model = _MODELS[entity]
        query = (
            self._select(entity, projection)
            .where(*compile_predicate(model, predicate))
            .order_by(*compile_order(model, order))
            .offset(skip)
            .limit(take)
        )
        async with self._db.session() as db:
            result = await db.execute(query)
            return [project(row, projection) for row in result.scalars().all()]

    async def list(
        self,
        entity: Entity,
        predicate: Predicate,
        skip: int,
        take: int,
        order: tuple[SortKey, ...],
        projection: Projection,
    ) -> tuple[list[dict], int]:
        items, total = await asyncio.gather(
            self._fetch_page(entity, predicate, skip, take, order, projection),
            self.aggregate(entity, Aggregate.COUNT, predicate=predicate),
        )
        return items, total

    async def get_by_id(
        self, entity: Entity, entity_id: int, projection: Projection,
    ) -> dict | None:
        model = _MODELS[entity]
        if not _storable_id(entity_id):
            return None
        query = self._select(entity, projection).where(model.id == entity_id)
        async with self._db.session() as db:
            row = (await db.execute(query)).scalar_one_or_none()
            return project(row, projection) if row is not None else None

    async def exists(self, entity: Entity, entity_id: int) -> bool:
        model = _MODELS[entity]
        if not _storable_id(entity_id):
            return False
        async with self._db.session() as db:
            found = await db.scalar(select(model.id).where(model.id == entity_id))
            return found is not None

    async def _reload(self, db, entity: Entity, entity_id: int, projection: Projection) -> dict:
        model = _MODELS[entity]
        query = (
            self._select(entity, projection)
            .where(model.id == entity_id)
            .execution_options(populate_existing=True)
        )
        row = (await db.execute(query)).scalar_one()
        return project(row, projection)

    async def create(
        self, entity: Entity, fields: dict[str, Any], projection: Projection,
    ) -> dict:
        model = _MODELS[entity]
        async with self._db.session() as db:
            row = model(**{attribute_name(k): v for k, v in fields.items()})
            db.add(row)
            await db.commit()
            logger.debug(
                f"Inserted {entity.value} row {row.id}",
                extra={"entity": entity.value, "entity_id": row.id},
            )
            return await self._reload(db, entity, row.id, projection)

    async def update(
        self,
        entity: Entity,
        entity_id: int,
        fields: dict[str, Any],
        projection: Projection,
    ) -> dict | None:
        model = _MODELS[entity]
        if not _storable_id(entity_id):
            return None
        async with self._db.session() as db:
            row = await db.get(model, entity_id)
            if row is None:
                return None
            for key, value in fields.items():
                setattr(row, attribute_name(key), value)
            await db.commit()
            logger.debug(
                f"Updated {entity.value} row {entity_id}",
                extra={"entity": entity.value, "entity_id": entity_id},
            )
            return await self._reload(db, entity, entity_id, projection)

    async def delete(self, entity: Entity, entity_id: int) -> bool:
        model = _MODELS[entity]
        if not _storable_id(entity_id):
            return False
        async with self._db.session() as db:
            result = await db.execute(delete(model).where(model.id == entity_id))
            await db.commit()
            deleted = result.rowcount > 0
        if deleted:
            logger.debug(
                f"Deleted {entity.value} row {entity_id}",
                extra={"entity": entity.value, "entity_id": entity_id},
            )
        return deleted

    async def aggregate(
        self,
        entity: Entity,
        op: Aggregate,
        field: str | None = None,
        predicate: Predicate | None = None,
    ) -> Any:
        model = _MODELS[entity]
        if op is Aggregate.COUNT:
            expression = func.count(model.id)
        elif op is Aggregate.SUM:
            if field is None:
                raise ValueError("SUM aggregate requires a field")
            expression = func.coalesce(func.sum(_column(model, field)), 0)
        else:
            raise ValueError(f"Unsupported aggregate: {op}")
        query = select(expression).where(
            *compile_predicate(model, predicate or MATCH_ALL),
        )
        async with self._db.session() as db:
            value = await db.scalar(query)
        if op is Aggregate.COUNT:
            return int(value or 0)
        return Decimal(str(value))
