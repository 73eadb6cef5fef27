"""Root conftest — shared test configuration and database fixtures.

Invariants:
    - Every test gets a fresh SQLite file database under tmp_path
    - Foreign keys are enforced on every test connection
    - The app's gateway is attached per test and detached afterwards

Design Decisions:
    - File database over :memory:: list/stats run concurrent reads on separate
      sessions, each needs its own connection to the same data
"""

import os
from datetime import date

# Settings are read at import time; keep tests off any real database/tokens
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.pop("API_TOKENS", None)

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402

import invoice_api.models  # noqa: E402,F401
from invoice_api.db.base import Base  # noqa: E402
from invoice_api.infrastructure.database import (  # noqa: E402
    DatabaseSessionManager, enforce_sqlite_foreign_keys,
)
from invoice_api.infrastructure.gateway import SqlAlchemyGateway  # noqa: E402
from invoice_api.main import app, attach_database  # noqa: E402
from invoice_api.services.customer_service import CustomerService  # noqa: E402
from invoice_api.services.invoice_service import InvoiceService  # noqa: E402

DOCUMENT_DAY = date(2024, 3, 1)


@pytest.fixture
async def test_engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False,
    )
    enforce_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def db_manager(test_engine):
    return DatabaseSessionManager.from_engine(test_engine)


@pytest.fixture
def gateway(db_manager):
    return SqlAlchemyGateway(db_manager)


@pytest.fixture
def customer_service(gateway):
    return CustomerService(gateway)


@pytest.fixture
def invoice_service(gateway):
    return InvoiceService(gateway, today=lambda: DOCUMENT_DAY)


@pytest.fixture
async def client(db_manager):
    """FastAPI test client wired to the per-test database."""
    attach_database(app, db_manager)
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.dependency_overrides.clear()
    app.state.gateway = None
    app.state.db_manager = None


@pytest.fixture
async def john(customer_service):
    """Customer used by most invoice tests."""
    return await customer_service.create({
        "name": "John Smith",
        "address": "123 Main St, New York, NY 10001",
        "phone": "+1-555-0123",
        "email": "john.smith@email.com",
        "jobLocation": "Manhattan Office Building",
    })


@pytest.fixture
async def sarah(customer_service):
    return await customer_service.create({
        "name": "Sarah Johnson", "email": "sarah.johnson@email.com",
    })
