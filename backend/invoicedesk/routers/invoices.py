from fastapi import APIRouter, Depends, Form, HTTPException, Query
from fastapi.responses import JSONResponse, RedirectResponse, Response

from invoicedesk.core.cache import ListingCache, get_listing_cache
from invoicedesk.core.database import Database, get_database
from invoicedesk.schemas.invoice import (
    DeleteInvoiceResponse,
    FormState,
    InvoiceCreatePage,
    InvoiceEditPage,
    InvoiceListResponse,
)
from invoicedesk.services.dashboard_service import DashboardService
from invoicedesk.services.invoice_actions import ActionRedirect, InvoiceActions

router = APIRouter()

_FORM_RESPONSES: dict[int | str, dict[str, str]] = {
    303: {"description": "Saved; redirects to the invoice listing"},
    422: {"description": "Validation failed; body is the form state"},
    500: {"description": "Database error; body is the form state"},
}


def _action_response(result: FormState | ActionRedirect) -> Response:
    if isinstance(result, ActionRedirect):
        return RedirectResponse(url=result.url, status_code=303)
    status_code = 422 if result.errors else 500
    return JSONResponse(status_code=status_code, content=result.model_dump(mode="json"))


@router.get(
    "/",
    response_model=InvoiceListResponse,
    summary="List invoices",
    responses={500: {"description": "Failed to fetch invoices"}},
)
def list_invoices(
    query: str = Query(default="", max_length=255),
    page: int = Query(default=1, ge=1),
    db: Database = Depends(get_database),
    cache: ListingCache = Depends(get_listing_cache),
) -> InvoiceListResponse:
    """Search invoices and return one page plus the total page count."""
    service = DashboardService(db, cache)
    return InvoiceListResponse(
        invoices=service.fetch_filtered_invoices(query, page),
        total_pages=service.fetch_invoices_pages(query),
        current_page=page,
        query=query,
    )


@router.get(
    "/create",
    response_model=InvoiceCreatePage,
    summary="Get data for the create invoice form",
)
def get_create_form(db: Database = Depends(get_database)) -> InvoiceCreatePage:
    return InvoiceCreatePage(customers=DashboardService(db).fetch_customers())


@router.post(
    "/create",
    summary="Create invoice",
    responses=_FORM_RESPONSES,
)
def create_invoice(
    customer_id: str | None = Form(default=None, alias="customerId"),
    amount: str | None = Form(default=None),
    status: str | None = Form(default=None),
    db: Database = Depends(get_database),
    cache: ListingCache = Depends(get_listing_cache),
) -> Response:
    form = {"customerId": customer_id, "amount": amount, "status": status}
    return _action_response(InvoiceActions(db, cache).create_invoice(form))


@router.post(
    "/delete",
    response_model=DeleteInvoiceResponse,
    summary="Delete invoice",
    responses={500: {"description": "Failed to delete invoice"}},
)
def delete_invoice(
    invoice_id: str | None = Form(default=None, alias="id"),
    db: Database = Depends(get_database),
    cache: ListingCache = Depends(get_listing_cache),
) -> DeleteInvoiceResponse:
    success = InvoiceActions(db, cache).delete_invoice({"id": invoice_id})
    return DeleteInvoiceResponse(success=success)


@router.get(
    "/{invoice_id}/edit",
    response_model=InvoiceEditPage,
    summary="Get data for the edit invoice form",
    responses={404: {"description": "Invoice not found"}},
)
def get_edit_form(invoice_id: str, db: Database = Depends(get_database)) -> InvoiceEditPage:
    service = DashboardService(db)
    invoice = service.fetch_invoice_by_id(invoice_id)
    if invoice is None:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return InvoiceEditPage(invoice=invoice, customers=service.fetch_customers())


@router.post(
    "/{invoice_id}/edit",
    summary="Update invoice",
    responses=_FORM_RESPONSES,
)
def update_invoice(
    invoice_id: str,
    customer_id: str | None = Form(default=None, alias="customerId"),
    amount: str | None = Form(default=None),
    status: str | None = Form(default=None),
    db: Database = Depends(get_database),
    cache: ListingCache = Depends(get_listing_cache),
) -> Response:
    form = {"customerId": customer_id, "amount": amount, "status": status}
    return _action_response(InvoiceActions(db, cache).update_invoice(invoice_id, form))
