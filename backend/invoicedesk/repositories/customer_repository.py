from sqlalchemy import case, func, or_, select
from sqlalchemy.engine import RowMapping

from invoicedesk.core.database import Database
from invoicedesk.models.customer import Customer
from invoicedesk.models.invoice import Invoice, InvoiceStatus


class CustomerRepository:
    def __init__(self, db: Database):
        self.db = db

    def get_all_fields(self) -> list[RowMapping]:
        """Id and name of every customer, ordered by name."""
        return self.db.query(select(Customer.id, Customer.name).order_by(Customer.name.asc()))

    def count(self) -> int:
        rows = self.db.query(select(func.count(Customer.id).label("count")))
        return int(rows[0]["count"] or 0) if rows else 0

    def get_filtered_table(self, query: str) -> list[RowMapping]:
        """Customers matching ``query`` with invoice count and per-status totals."""
        pattern = f"%{query.lower()}%"
        stmt = (
            select(
                Customer.id,
                Customer.name,
                Customer.email,
                Customer.image_url,
                func.count(Invoice.id).label("total_invoices"),
                func.coalesce(
                    func.sum(
                        case(
                            (Invoice.status == InvoiceStatus.PENDING.value, Invoice.amount),
                            else_=0,
                        )
                    ),
                    0,
                ).label("total_pending"),
                func.coalesce(
                    func.sum(
                        case(
                            (Invoice.status == InvoiceStatus.PAID.value, Invoice.amount),
                            else_=0,
                        )
                    ),
                    0,
                ).label("total_paid"),
            )
            .outerjoin(Invoice, Customer.id == Invoice.customer_id)
            .where(
                or_(
                    func.lower(Customer.name).like(pattern),
                    func.lower(Customer.email).like(pattern),
                )
            )
            .group_by(Customer.id, Customer.name, Customer.email, Customer.image_url)
            .order_by(Customer.name.asc())
        )
        return self.db.query(stmt)
