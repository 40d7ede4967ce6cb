"""Read queries backing the dashboard and invoice pages.

Every fetch runs one statement with light post-processing. Any failure is
logged and re-raised as :class:`DataFetchError` whose message names the fetch,
so callers can render an error state without inspecting driver exceptions.
"""

import logging
import math
import time
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager

from invoicedesk.core.cache import ListingCache
from invoicedesk.core.config import settings
from invoicedesk.core.database import Database
from invoicedesk.core.exceptions import DataFetchError
from invoicedesk.core.money import format_currency, to_major_units
from invoicedesk.repositories.customer_repository import CustomerRepository
from invoicedesk.repositories.invoice_repository import InvoiceRepository
from invoicedesk.repositories.revenue_repository import RevenueRepository
from invoicedesk.schemas.customer import CustomerField, CustomerTableRow
from invoicedesk.schemas.dashboard import CardData, RevenueRow
from invoicedesk.schemas.invoice import InvoiceEditForm, InvoiceTableRow, LatestInvoice

logger = logging.getLogger(__name__)


@contextmanager
def _fetching(error_message: str) -> Iterator[None]:
    try:
        yield
    except Exception as exc:
        logger.exception("Database Error: %s", error_message)
        raise DataFetchError(error_message) from exc


def _simulate_latency(seconds: float) -> None:
    if seconds > 0:
        time.sleep(seconds)


class DashboardService:
    def __init__(self, db: Database, cache: ListingCache | None = None):
        self.db = db
        self.cache = cache
        self.invoices = InvoiceRepository(db)
        self.customers = CustomerRepository(db)
        self.revenue = RevenueRepository(db)

    def fetch_revenue(self) -> list[RevenueRow]:
        with _fetching("Failed to fetch revenue data."):
            _simulate_latency(settings.REVENUE_FETCH_DELAY)
            return [RevenueRow.model_validate(dict(row)) for row in self.revenue.get_all()]

    def fetch_latest_invoices(self) -> list[LatestInvoice]:
        with _fetching("Failed to fetch the latest invoices."):
            _simulate_latency(settings.LATEST_INVOICES_FETCH_DELAY)
            rows = self.invoices.get_latest(limit=settings.LATEST_INVOICES_LIMIT)
            return [
                LatestInvoice(
                    id=row["id"],
                    amount=format_currency(row["amount"]),
                    name=row["name"],
                    email=row["email"],
                    image_url=row["image_url"],
                )
                for row in rows
            ]

    def fetch_card_data(self) -> CardData:
        """Run the three dashboard aggregates concurrently and combine them."""
        with _fetching("Failed to fetch card data."):
            with ThreadPoolExecutor(max_workers=settings.CARD_DATA_WORKERS) as pool:
                invoice_count = pool.submit(self.invoices.count)
                customer_count = pool.submit(self.customers.count)
                status_totals = pool.submit(self.invoices.status_totals)

                number_of_invoices = invoice_count.result() or 0
                number_of_customers = customer_count.result() or 0
                totals = status_totals.result()

            paid = (totals["paid"] if totals else None) or 0
            pending = (totals["pending"] if totals else None) or 0
            return CardData(
                number_of_customers=number_of_customers,
                number_of_invoices=number_of_invoices,
                total_paid_invoices=format_currency(paid),
                total_pending_invoices=format_currency(pending),
            )

    def fetch_filtered_invoices(self, query: str, current_page: int) -> list[InvoiceTableRow]:
        page = max(current_page, 1)
        offset = (page - 1) * settings.ITEMS_PER_PAGE

        def compute() -> list[InvoiceTableRow]:
            rows = self.invoices.get_filtered(query, limit=settings.ITEMS_PER_PAGE, offset=offset)
            return [InvoiceTableRow.model_validate(dict(row)) for row in rows]

        with _fetching("Failed to fetch invoices."):
            if self.cache is None:
                return compute()
            return self.cache.get_or_compute(settings.INVOICES_PATH, ("invoices", query, page), compute)

    def fetch_invoices_pages(self, query: str) -> int:
        def compute() -> int:
            total = self.invoices.count_filtered(query)
            return math.ceil(total / settings.ITEMS_PER_PAGE)

        with _fetching("Failed to fetch total number of invoices."):
            if self.cache is None:
                return compute()
            return self.cache.get_or_compute(settings.INVOICES_PATH, ("pages", query), compute)

    def fetch_invoice_by_id(self, invoice_id: str) -> InvoiceEditForm | None:
        with _fetching("Failed to fetch invoice."):
            row = self.invoices.get_form_by_id(invoice_id)
            if row is None:
                return None
            return InvoiceEditForm(
                id=row["id"],
                customer_id=row["customer_id"],
                amount=to_major_units(row["amount"]),
                status=row["status"],
            )

    def fetch_customers(self) -> list[CustomerField]:
        with _fetching("Failed to fetch all customers."):
            return [CustomerField.model_validate(dict(row)) for row in self.customers.get_all_fields()]

    def fetch_filtered_customers(self, query: str) -> list[CustomerTableRow]:
        with _fetching("Failed to fetch customer table."):
            return [
                CustomerTableRow(
                    id=row["id"],
                    name=row["name"],
                    email=row["email"],
                    image_url=row["image_url"],
                    total_invoices=row["total_invoices"],
                    total_pending=format_currency(row["total_pending"]),
                    total_paid=format_currency(row["total_paid"]),
                )
                for row in self.customers.get_filtered_table(query)
            ]
