"""Demo Seed — inserts sample customers and invoices into an empty database.

Invariants:
    - Idempotent: does nothing when any customer already exists
    - Writes through the ORM only (same defaults as the API)

Usage:
    python -m invoice_api.db.seed
"""

import asyncio
import logging
from datetime import date
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from invoice_api.config import get_settings
from invoice_api.db.base import Base
from invoice_api.db.session import create_session_factory
from invoice_api.infrastructure.observability import setup_logging
from invoice_api.models.customer import Customer
from invoice_api.models.invoice import Invoice

logger = logging.getLogger(__name__)

DEMO_CUSTOMERS = [
    {
        "name": "John Smith",
        "address": "123 Main St, New York, NY 10001",
        "phone": "+1-555-0123",
        "email": "john.smith@email.com",
        "job_location": "Manhattan Office Building",
    },
    {
        "name": "Sarah Johnson",
        "address": "456 Oak Ave, Los Angeles, CA 90210",
        "phone": "+1-555-0456",
        "email": "sarah.johnson@email.com",
        "job_location": "Downtown LA Warehouse",
    },
    {
        "name": "Michael Brown",
        "address": "789 Pine Rd, Chicago, IL 60601",
        "phone": "+1-555-0789",
        "email": "michael.brown@email.com",
        "job_location": "Chicago Industrial Park",
    },
]

# (customer index, date, description, amount, note)
DEMO_INVOICES = [
    (0, date(2024, 1, 15), "Website Development Services", Decimal("2500.00"),
     "Initial payment for website development project"),
    (1, date(2024, 1, 20), "Mobile App Design", Decimal("1800.00"),
     "UI/UX design for mobile application"),
    (2, date(2024, 1, 25), "Database Optimization", Decimal("1200.00"),
     "Performance optimization and database restructuring"),
    (0, date(2024, 2, 1), "System Maintenance", Decimal("800.00"),
     "Monthly system maintenance and updates"),
]


async def seed_demo_data(session_factory: async_sessionmaker[AsyncSession]) -> bool:
    """Insert demo rows. Returns False when the database was not empty."""
    async with session_factory() as db:
        existing = await db.scalar(select(func.count(Customer.id)))
        if existing:
            logger.info(f"Seed skipped: {existing} customer(s) already present")
            return False

        customers = [Customer(**data) for data in DEMO_CUSTOMERS]
        db.add_all(customers)
        await db.flush()
        db.add_all([
            Invoice(
                customer_id=customers[index].id, date=issued, description=description,
                amount=amount, note=note,
            )
            for index, issued, description, amount, note in DEMO_INVOICES
        ])
        await db.commit()
        logger.info(
            f"Seeded {len(DEMO_CUSTOMERS)} customers and {len(DEMO_INVOICES)} invoices",
        )
        return True


async def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    engine, session_factory = create_session_factory(settings.database_url)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        await seed_demo_data(session_factory)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
