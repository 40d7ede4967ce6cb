from invoicedesk.schemas.customer import CustomerField, CustomerTableRow
from invoicedesk.schemas.dashboard import CardData, RevenueRow
from invoicedesk.schemas.invoice import (
    FormState,
    InvoiceEditForm,
    InvoiceForm,
    InvoiceListResponse,
    InvoiceTableRow,
    LatestInvoice,
)

__all__ = [
    "CardData",
    "CustomerField",
    "CustomerTableRow",
    "FormState",
    "InvoiceEditForm",
    "InvoiceForm",
    "InvoiceListResponse",
    "InvoiceTableRow",
    "LatestInvoice",
    "RevenueRow",
]
