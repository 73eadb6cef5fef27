"""Projections — explicit field sets shaping every read the gateway performs.

Invariants:
    - Field names are API (camelCase) names; attribute_name() maps them to ORM attributes
    - A projection only reads the attributes it names (relations never lazy-load)
    - project() output is JSON-ready: dates/datetimes as ISO strings, Decimals as floats

Design Decisions:
    - Named projections as module constants: response payload shape is a
      first-class parameter of each service call, not emergent ORM behavior
    - project() works on any attribute-bearing object so core never imports models
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any

_ATTRIBUTE_NAMES = {
    "jobLocation": "job_location",
    "customerId": "customer_id",
    "createdAt": "created_at",
}


def attribute_name(api_field: str) -> str:
    """ORM attribute backing an API field name."""
    return _ATTRIBUTE_NAMES.get(api_field, api_field)


@dataclass
class Projection:
    """Scalar fields to read plus related records to include."""
    fields: tuple[str, ...]
    includes: dict[str, "Projection"] = field(default_factory=dict)


CUSTOMER_FIELDS: tuple[str, ...] = (
    "id", "name", "address", "phone", "email", "jobLocation", "createdAt",
)
INVOICE_FIELDS: tuple[str, ...] = (
    "id", "date", "description", "amount", "note", "customerId", "createdAt",
)

CUSTOMER_PLAIN = Projection(CUSTOMER_FIELDS)
CUSTOMER_LIST = Projection(
    CUSTOMER_FIELDS, {"invoices": Projection(("id", "amount", "date"))},
)
CUSTOMER_DETAIL = Projection(
    CUSTOMER_FIELDS, {"invoices": Projection(INVOICE_FIELDS)},
)

INVOICE_PLAIN = Projection(INVOICE_FIELDS)
INVOICE_LIST = Projection(
    INVOICE_FIELDS, {"customer": Projection(("id", "name", "email", "phone"))},
)
INVOICE_DETAIL = Projection(
    INVOICE_FIELDS, {"customer": Projection(CUSTOMER_FIELDS)},
)
INVOICE_RECENT = Projection(
    INVOICE_FIELDS, {"customer": Projection(("name",))},
)


def to_json_value(value: Any) -> Any:
    """Convert a column value into its JSON representation."""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return value


def project(record: Any, projection: Projection) -> dict:
    """Read the projected fields (and includes) of record into a plain dict."""
    item = {
        name: to_json_value(getattr(record, attribute_name(name)))
        for name in projection.fields
    }
    for relation, nested in projection.includes.items():
        related = getattr(record, relation)
        if related is None:
            item[relation] = None
        elif isinstance(related, (list, tuple)):
            item[relation] = [project(r, nested) for r in related]
        else:
            item[relation] = project(related, nested)
    return item
