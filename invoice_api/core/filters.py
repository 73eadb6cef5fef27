"""Filter Builders — typed, per-entity predicates consumed by the persistence gateway.

Invariants:
    - Builders are pure: no IO, no ORM imports
    - A blank or whitespace-only search term produces no search clause
    - Search fields are OR-ed; scopes (FieldEquals) are AND-ed with the search
    - Dotted fields ("customer.name") reach through a relation

Design Decisions:
    - Structured predicate over raw SQL fragments: core stays independent of
      SQLAlchemy, the gateway compiles it (ADR: dependency arrows point inward)
"""

from dataclasses import dataclass

CUSTOMER_SEARCH_FIELDS: tuple[str, ...] = ("name", "email", "phone")
INVOICE_SEARCH_FIELDS: tuple[str, ...] = ("description", "note", "customer.name")


@dataclass(frozen=True)
class TextSearch:
    """Case-insensitive substring match of term against any of fields."""
    term: str
    fields: tuple[str, ...]


@dataclass(frozen=True)
class FieldEquals:
    """Exact match of one field."""
    field: str
    value: object


@dataclass(frozen=True)
class Predicate:
    """Complete WHERE description for one gateway call."""
    search: TextSearch | None = None
    equals: tuple[FieldEquals, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.search is None and not self.equals


MATCH_ALL = Predicate()


def _text_search(search: str | None, fields: tuple[str, ...]) -> TextSearch | None:
    term = (search or "").strip()
    if not term:
        return None
    return TextSearch(term=term, fields=fields)


def build_customer_filter(search: str | None = None) -> Predicate:
    """Customers matching search in name, email or phone."""
    return Predicate(search=_text_search(search, CUSTOMER_SEARCH_FIELDS))


def build_invoice_filter(
    search: str | None = None, customer_id: int | None = None,
) -> Predicate:
    """Invoices matching search in description, note or owner name, optionally scoped to one customer."""
    equals = (
        (FieldEquals("customerId", customer_id),) if customer_id is not None else ()
    )
    return Predicate(
        search=_text_search(search, INVOICE_SEARCH_FIELDS), equals=equals,
    )


def invoices_of_customer(customer_id: int) -> Predicate:
    """All invoices owned by customer_id (referential-integrity guard)."""
    return Predicate(equals=(FieldEquals("customerId", customer_id),))
