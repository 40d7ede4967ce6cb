import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_serializer

from invoicedesk.models.invoice import InvoiceStatus
from invoicedesk.schemas.customer import CustomerField

# Form field name -> message shown next to that field
FIELD_ERROR_MESSAGES = {
    "customerId": "Please select a customer.",
    "amount": "Please enter an amount greater than $0.",
    "status": "Please select an invoice status.",
}

FORM_FIELDS = tuple(FIELD_ERROR_MESSAGES)


class InvoiceForm(BaseModel):
    """Submitted invoice fields. ``amount`` is in major units (dollars)."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    customer_id: str = Field(..., alias="customerId", min_length=1, max_length=36)
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    status: InvoiceStatus


def field_errors(exc: ValidationError) -> dict[str, list[str]]:
    """Flatten a ValidationError into form field name -> messages."""
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else ""
        if field == "customer_id":
            field = "customerId"
        message = FIELD_ERROR_MESSAGES.get(field, error["msg"])
        messages = errors.setdefault(field, [])
        if message not in messages:
            messages.append(message)
    return errors


class FormState(BaseModel):
    """Result of a failed form submission, rendered back into the form."""

    errors: dict[str, list[str]] = Field(default_factory=dict)
    message: str | None = None
    fields: dict[str, Any] = Field(default_factory=dict)


class InvoiceTableRow(BaseModel):
    id: str
    amount: int
    date: datetime.date
    status: str
    name: str
    email: str
    image_url: str


class LatestInvoice(BaseModel):
    id: str
    amount: str
    name: str
    email: str
    image_url: str


class InvoiceEditForm(BaseModel):
    id: str
    customer_id: str
    amount: Decimal
    status: str

    @field_serializer("amount", when_used="json")
    def serialize_amount(self, amount: Decimal) -> float:
        return float(amount)


class InvoiceListResponse(BaseModel):
    invoices: list[InvoiceTableRow]
    total_pages: int
    current_page: int
    query: str


class InvoiceCreatePage(BaseModel):
    customers: list[CustomerField]


class InvoiceEditPage(BaseModel):
    invoice: InvoiceEditForm
    customers: list[CustomerField]


class DeleteInvoiceResponse(BaseModel):
    success: bool
