from invoicedesk.models.customer import Customer
from invoicedesk.models.invoice import Invoice, InvoiceStatus
from invoicedesk.models.revenue import Revenue
from invoicedesk.models.user import User

__all__ = [
    "Customer",
    "Invoice",
    "InvoiceStatus",
    "Revenue",
    "User",
]
