"""Customer ORM — persists the parent entity that owns invoices.

Invariants:
    - id is an autoincrement integer, never reused after delete (sqlite_autoincrement)
    - name is non-nullable and unbounded (Text); contact fields are optional
    - Every bounded column is at least as wide as its schema limit
    - created_at is set once at insert

Design Decisions:
    - lazy="raise" on invoices: every read states its include explicitly
      through a Projection, accidental lazy loads fail loudly
    - passive_deletes="all": the ORM never nullifies or cascades children,
      deletion is guarded by the service and the RESTRICT foreign key
"""

from datetime import datetime, timezone

from sqlalchemy import Integer, String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from invoice_api.db.base import Base


class Customer(Base):
    """Customer entity — owns zero or more invoices."""
    __tablename__ = "customers"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    phone: Mapped[str | None] = mapped_column(Text, nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    job_location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    invoices: Mapped[list["Invoice"]] = relationship(
        "Invoice", back_populates="customer",
        order_by="[Invoice.date.desc(), Invoice.id]",
        lazy="raise", passive_deletes="all",
    )
