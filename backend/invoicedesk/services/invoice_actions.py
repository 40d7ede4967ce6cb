"""Form-handling actions that create, update and delete invoices.

A create or update submission either fails validation (FormState with field
errors, nothing written), fails to persist (FormState with a message), or
succeeds, in which case the invoice listing is revalidated and the caller is
sent back to it.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from invoicedesk.core.cache import ListingCache
from invoicedesk.core.config import settings
from invoicedesk.core.database import Database
from invoicedesk.core.exceptions import MutationError
from invoicedesk.core.money import to_minor_units
from invoicedesk.models.shared import today
from invoicedesk.repositories.invoice_repository import InvoiceRepository
from invoicedesk.schemas.invoice import FORM_FIELDS, FormState, InvoiceForm, field_errors

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionRedirect:
    """Successful submission; the caller should navigate to ``url``."""

    url: str


@dataclass(frozen=True)
class _ValidInvoice:
    customer_id: str
    amount: int
    status: str


def _submitted_fields(form: Mapping[str, Any]) -> dict[str, Any]:
    return {name: form.get(name) for name in FORM_FIELDS}


class InvoiceActions:
    def __init__(self, db: Database, cache: ListingCache):
        self.db = db
        self.cache = cache
        self.repo = InvoiceRepository(db)

    def _validate(
        self, form: Mapping[str, Any], failure_message: str
    ) -> tuple[_ValidInvoice | None, FormState]:
        fields = _submitted_fields(form)
        state = FormState(fields=fields)
        try:
            data = InvoiceForm.model_validate(fields)
        except ValidationError as exc:
            state.errors = field_errors(exc)
            state.message = failure_message
            return None, state

        return (
            _ValidInvoice(
                customer_id=data.customer_id,
                amount=to_minor_units(data.amount),
                status=data.status.value,
            ),
            state,
        )

    def _revalidate_and_redirect(self) -> ActionRedirect:
        self.cache.revalidate(settings.INVOICES_PATH)
        return ActionRedirect(url=settings.INVOICES_PATH)

    def create_invoice(self, form: Mapping[str, Any]) -> FormState | ActionRedirect:
        valid, state = self._validate(form, "Missing Fields. Failed to Create Invoice.")
        if valid is None:
            return state

        try:
            invoice_id = self.repo.create(
                customer_id=valid.customer_id,
                amount=valid.amount,
                status=valid.status,
                invoice_date=today(),
            )
        except Exception:
            logger.exception("Failed to create invoice for customer %s", valid.customer_id)
            state.message = "Database Error: Failed to Create Invoice."
            return state

        logger.info("Created invoice %s", invoice_id)
        return self._revalidate_and_redirect()

    def update_invoice(self, invoice_id: str, form: Mapping[str, Any]) -> FormState | ActionRedirect:
        valid, state = self._validate(form, "Missing Fields. Failed to Update Invoice.")
        if valid is None:
            return state

        try:
            self.repo.update(
                invoice_id,
                customer_id=valid.customer_id,
                amount=valid.amount,
                status=valid.status,
            )
        except Exception:
            logger.exception("Failed to update invoice %s", invoice_id)
            state.message = "Database Error: Failed to Update Invoice."
            return state

        logger.info("Updated invoice %s", invoice_id)
        return self._revalidate_and_redirect()

    def delete_invoice(self, form: Mapping[str, Any]) -> bool:
        """Delete the invoice named by the submitted ``id``.

        A missing id deletes nothing and still reports success.
        """
        invoice_id = form.get("id")
        try:
            deleted = self.repo.delete(str(invoice_id) if invoice_id is not None else "")
        except Exception as exc:
            logger.exception("Failed to delete invoice %s", invoice_id)
            raise MutationError("Database Error: Failed to Delete Invoice.") from exc

        logger.info("Deleted invoice %s (rows=%d)", invoice_id, deleted)
        self.cache.revalidate(settings.INVOICES_PATH)
        return True
