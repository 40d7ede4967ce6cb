from datetime import date

from sqlalchemy import String, case, cast, delete, func, insert, or_, select, update
from sqlalchemy.engine import RowMapping
from sqlalchemy.sql.elements import ColumnElement

from invoicedesk.core.database import Database
from invoicedesk.models.customer import Customer
from invoicedesk.models.invoice import Invoice, InvoiceStatus
from invoicedesk.models.shared import generate_uuid


def search_filter(query: str) -> ColumnElement[bool]:
    """Case-insensitive substring match on customer and invoice fields."""
    pattern = f"%{query.lower()}%"
    return or_(
        func.lower(Customer.name).like(pattern),
        func.lower(Customer.email).like(pattern),
        cast(Invoice.amount, String).like(pattern),
        cast(Invoice.date, String).like(pattern),
        func.lower(Invoice.status).like(pattern),
    )


class InvoiceRepository:
    def __init__(self, db: Database):
        self.db = db

    def get_filtered(self, query: str, limit: int, offset: int) -> list[RowMapping]:
        stmt = (
            select(
                Invoice.id,
                Invoice.amount,
                Invoice.date,
                Invoice.status,
                Customer.name,
                Customer.email,
                Customer.image_url,
            )
            .join(Customer, Invoice.customer_id == Customer.id)
            .where(search_filter(query))
            .order_by(Invoice.date.desc(), Invoice.id)
            .limit(limit)
            .offset(offset)
        )
        return self.db.query(stmt)

    def count_filtered(self, query: str) -> int:
        stmt = (
            select(func.count().label("count"))
            .select_from(Invoice)
            .join(Customer, Invoice.customer_id == Customer.id)
            .where(search_filter(query))
        )
        rows = self.db.query(stmt)
        return int(rows[0]["count"] or 0) if rows else 0

    def get_latest(self, limit: int = 5) -> list[RowMapping]:
        stmt = (
            select(
                Invoice.amount,
                Customer.name,
                Customer.image_url,
                Customer.email,
                Invoice.id,
            )
            .join(Customer, Invoice.customer_id == Customer.id)
            .order_by(Invoice.date.desc(), Invoice.id)
            .limit(limit)
        )
        return self.db.query(stmt)

    def get_form_by_id(self, invoice_id: str) -> RowMapping | None:
        stmt = select(
            Invoice.id,
            Invoice.customer_id,
            Invoice.amount,
            Invoice.status,
        ).where(Invoice.id == invoice_id)
        rows = self.db.query(stmt)
        return rows[0] if rows else None

    def count(self) -> int:
        rows = self.db.query(select(func.count(Invoice.id).label("count")))
        return int(rows[0]["count"] or 0) if rows else 0

    def status_totals(self) -> RowMapping | None:
        """Sum of amounts (cents) per status as ``paid`` and ``pending``."""
        stmt = select(
            func.sum(
                case((Invoice.status == InvoiceStatus.PAID.value, Invoice.amount), else_=0)
            ).label("paid"),
            func.sum(
                case((Invoice.status == InvoiceStatus.PENDING.value, Invoice.amount), else_=0)
            ).label("pending"),
        )
        rows = self.db.query(stmt)
        return rows[0] if rows else None

    def create(self, customer_id: str, amount: int, status: str, invoice_date: date) -> str:
        invoice_id = generate_uuid()
        self.db.execute(
            insert(Invoice).values(
                id=invoice_id,
                customer_id=customer_id,
                amount=amount,
                status=status,
                date=invoice_date,
            )
        )
        return invoice_id

    def update(self, invoice_id: str, customer_id: str, amount: int, status: str) -> int:
        return self.db.execute(
            update(Invoice)
            .where(Invoice.id == invoice_id)
            .values(customer_id=customer_id, amount=amount, status=status)
        )

    def delete(self, invoice_id: str) -> int:
        return self.db.execute(delete(Invoice).where(Invoice.id == invoice_id))
