"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - CustomerId, InvoiceId wrap ints — system-assigned, monotonic, never reused,
      always within 1..MAX_ENTITY_ID
    - Entity enumerates every persisted record type the gateway knows about
    - SortKey fields use API (camelCase) names, never ORM attribute names

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and log without custom encoders
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

CustomerId = NewType("CustomerId", int)
InvoiceId = NewType("InvoiceId", int)

# Largest id a 32-bit INTEGER column holds; larger ids can never exist
MAX_ENTITY_ID = 2**31 - 1


# ─── Enums ───────────────────────────────────────────────────────

class Entity(str, Enum):
    """Persisted record types."""
    CUSTOMER = "Customer"
    INVOICE = "Invoice"


class Aggregate(str, Enum):
    """Scalar aggregates the gateway can compute."""
    COUNT = "count"
    SUM = "sum"


# ─── Ordering ────────────────────────────────────────────────────

@dataclass(frozen=True)
class SortKey:
    """One ORDER BY term. Ties are always broken by insertion order."""
    field: str
    descending: bool = False


CUSTOMER_ORDER: tuple[SortKey, ...] = (SortKey("createdAt", descending=True),)
INVOICE_ORDER: tuple[SortKey, ...] = (SortKey("date", descending=True),)
