from invoicedesk.repositories.customer_repository import CustomerRepository
from invoicedesk.repositories.invoice_repository import InvoiceRepository
from invoicedesk.repositories.revenue_repository import RevenueRepository

__all__ = [
    "CustomerRepository",
    "InvoiceRepository",
    "RevenueRepository",
]
