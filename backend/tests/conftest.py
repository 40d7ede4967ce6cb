"""Shared test fixtures for all test modules."""

import contextlib
from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

import invoicedesk.models  # noqa: F401
from invoicedesk.core import database as db_module
from invoicedesk.core.cache import listing_cache
from invoicedesk.core.config import settings
from invoicedesk.core.database import Base, Database, create_db_engine
from invoicedesk.models.customer import Customer
from invoicedesk.models.invoice import Invoice


@pytest.fixture(scope="session")
def test_engine(tmp_path_factory):
    """File-backed SQLite engine shared by the whole test session.

    A file rather than ``sqlite://`` so worker threads get their own
    connections from the pool.
    """
    path = tmp_path_factory.mktemp("db") / "invoicedesk.db"
    engine = create_db_engine(f"sqlite:///{path}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture(autouse=True)
def setup_database(test_engine, monkeypatch):
    """Point the application at the test database and empty it after each test.

    Also turns off the simulated fetch latency and clears the listing cache.
    """
    monkeypatch.setattr(db_module, "_database", Database(test_engine))
    monkeypatch.setattr(settings, "REVENUE_FETCH_DELAY", 0)
    monkeypatch.setattr(settings, "LATEST_INVOICES_FETCH_DELAY", 0)
    listing_cache.clear()

    yield

    listing_cache.clear()
    with test_engine.connect() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            with contextlib.suppress(OperationalError):
                conn.execute(table.delete())
        conn.commit()


@pytest.fixture
def database() -> Database:
    """Return the Database the application is using for this test."""
    return db_module.get_database()


@pytest.fixture
def make_customer(database):
    """Factory inserting a customer and returning its id."""
    counter = {"n": 0}

    def _make(name: str = "Customer", email: str | None = None, image_url: str = "/c.png") -> str:
        counter["n"] += 1
        with database.session() as session:
            customer = Customer(
                name=name,
                email=email or f"customer{counter['n']}@example.com",
                image_url=image_url,
            )
            session.add(customer)
            session.commit()
            return str(customer.id)

    return _make


@pytest.fixture
def make_invoice(database):
    """Factory inserting an invoice (amount in cents) and returning its id."""

    def _make(
        customer_id: str,
        amount: int = 1000,
        status: str = "pending",
        invoice_date: date | None = None,
    ) -> str:
        with database.session() as session:
            invoice = Invoice(
                customer_id=customer_id,
                amount=amount,
                status=status,
                date=invoice_date or date(2024, 1, 1),
            )
            session.add(invoice)
            session.commit()
            return str(invoice.id)

    return _make
