"""Invoice ORM — persists a billed amount for one customer.

Invariants:
    - Always belongs to a Customer (customer_id FK, non-nullable, ON DELETE RESTRICT)
    - amount is NUMERIC(12, 2) and strictly positive (enforced by the write schema)
    - date is a calendar date (no time component)

Design Decisions:
    - Indexes on customer_id and date: list scope and default ordering
"""

from datetime import date as date_type, datetime, timezone
from decimal import Decimal

from sqlalchemy import Integer, Date, DateTime, ForeignKey, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from invoice_api.db.base import Base


class Invoice(Base):
    """Invoice entity — leaf of the customer aggregate."""
    __tablename__ = "invoices"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    date: Mapped[date_type] = mapped_column(Date, nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    customer_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("customers.id", ondelete="RESTRICT"),
        nullable=False, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    customer: Mapped["Customer"] = relationship(
        "Customer", back_populates="invoices", lazy="raise",
    )
