"""ORM Models — SQLAlchemy declarative models for customers and invoices.

Invariants:
    - All models inherit from Base (db/base.py)
    - Customer is the parent; every Invoice belongs to exactly one Customer

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from invoice_api.models.customer import Customer  # noqa: F401
from invoice_api.models.invoice import Invoice  # noqa: F401
