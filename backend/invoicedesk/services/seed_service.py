"""Idempotent bootstrap of the schema and placeholder rows."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any

import bcrypt
from sqlalchemy import Table, insert
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.sql.dml import Insert

from invoicedesk.core.cache import ListingCache
from invoicedesk.core.config import settings
from invoicedesk.core.database import Database
from invoicedesk.data import placeholder
from invoicedesk.models.customer import Customer
from invoicedesk.models.invoice import Invoice
from invoicedesk.models.revenue import Revenue
from invoicedesk.models.user import User

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


@dataclass
class SeedResult:
    users: int
    customers: int
    revenue: int
    invoices: int


class SeedService:
    def __init__(self, db: Database, cache: ListingCache | None = None):
        self.db = db
        self.cache = cache

    def _insert_ignore(self, table: Table, rows: list[dict[str, Any]]) -> int:
        """Insert ``rows`` skipping any that collide with an existing key."""
        if not rows:
            return 0

        stmt: Insert
        if self.db.dialect == "sqlite":
            stmt = sqlite.insert(table).values(rows).on_conflict_do_nothing()
        elif self.db.dialect == "postgresql":
            stmt = postgresql.insert(table).values(rows).on_conflict_do_nothing()
        else:
            stmt = insert(table).values(rows).prefix_with("IGNORE")
        return max(self.db.execute(stmt), 0)

    def seed_users(self) -> int:
        rows = [
            {**user, "password": hash_password(user["password"])}
            for user in placeholder.USERS
        ]
        return self._insert_ignore(User.__table__, rows)

    def seed_customers(self) -> int:
        return self._insert_ignore(Customer.__table__, list(placeholder.CUSTOMERS))

    def seed_revenue(self) -> int:
        return self._insert_ignore(Revenue.__table__, list(placeholder.REVENUE))

    def seed_invoices(self) -> int:
        # Positional ids keep repeated runs from inserting duplicates
        rows = [
            {
                "id": str(index),
                "customer_id": invoice["customer_id"],
                "amount": invoice["amount"],
                "status": invoice["status"],
                "date": date.fromisoformat(invoice["date"]),
            }
            for index, invoice in enumerate(placeholder.INVOICES, start=1)
        ]
        return self._insert_ignore(Invoice.__table__, rows)

    def seed(self) -> SeedResult:
        """Create missing tables, then insert placeholder rows.

        Customers go in before invoices so the foreign key holds. The
        invoice listing is revalidated afterwards when a cache is attached.
        """
        self.db.create_all()
        result = SeedResult(
            users=self.seed_users(),
            customers=self.seed_customers(),
            revenue=self.seed_revenue(),
            invoices=self.seed_invoices(),
        )
        if self.cache is not None:
            self.cache.revalidate(settings.INVOICES_PATH)
        logger.info(
            "Seeded database: %d users, %d customers, %d revenue, %d invoices",
            result.users,
            result.customers,
            result.revenue,
            result.invoices,
        )
        return result
