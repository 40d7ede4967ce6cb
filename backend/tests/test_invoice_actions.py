"""Tests for the create, update and delete invoice actions."""

from datetime import UTC, date, datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import patch

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from invoicedesk.core.cache import ListingCache
from invoicedesk.core.config import settings
from invoicedesk.core.exceptions import MutationError
from invoicedesk.models.invoice import Invoice
from invoicedesk.models.shared import today
from invoicedesk.repositories.invoice_repository import InvoiceRepository
from invoicedesk.schemas.invoice import FormState
from invoicedesk.services.dashboard_service import DashboardService
from invoicedesk.services.invoice_actions import ActionRedirect, InvoiceActions


@pytest.fixture
def cache():
    return ListingCache()


@pytest.fixture
def actions(database, cache):
    return InvoiceActions(database, cache)


@pytest.fixture
def customer_id(make_customer):
    return make_customer(name="Jane Doe", email="jane@doe.com")


def _invoices(database):
    return database.query(
        select(Invoice.id, Invoice.customer_id, Invoice.amount, Invoice.status, Invoice.date)
    )


class TestCreateInvoice:
    def test_valid_submission_inserts_and_redirects(self, actions, database, customer_id):
        result = actions.create_invoice(
            {"customerId": customer_id, "amount": "157.95", "status": "pending"}
        )

        assert result == ActionRedirect(url="/dashboard/invoices")
        rows = _invoices(database)
        assert len(rows) == 1
        assert rows[0]["customer_id"] == customer_id
        assert rows[0]["amount"] == 15795
        assert rows[0]["status"] == "pending"
        assert rows[0]["date"] == today()

    def test_amount_round_trips_through_fetch_by_id(self, actions, database, customer_id):
        actions.create_invoice({"customerId": customer_id, "amount": "42.5", "status": "paid"})

        invoice_id = _invoices(database)[0]["id"]
        invoice = DashboardService(database).fetch_invoice_by_id(invoice_id)

        assert invoice is not None
        assert invoice.amount == Decimal("42.50")

    def test_uses_current_date(self, actions, database, customer_id):
        with patch("invoicedesk.services.invoice_actions.today", return_value=date(2025, 2, 28)):
            actions.create_invoice({"customerId": customer_id, "amount": "1", "status": "paid"})

        assert _invoices(database)[0]["date"] == date(2025, 2, 28)

    def test_revalidates_listing(self, actions, cache, customer_id):
        cache.get_or_compute(settings.INVOICES_PATH, "k", lambda: "stale")

        actions.create_invoice({"customerId": customer_id, "amount": "5", "status": "paid"})

        assert not cache.is_cached(settings.INVOICES_PATH, "k")

    @pytest.mark.parametrize("amount", ["0", "-5", "0.00", "", None, "abc"])
    def test_non_positive_or_invalid_amount(self, actions, database, customer_id, amount):
        result = actions.create_invoice(
            {"customerId": customer_id, "amount": amount, "status": "pending"}
        )

        assert isinstance(result, FormState)
        assert result.errors["amount"] == ["Please enter an amount greater than $0."]
        assert "customerId" not in result.errors
        assert result.message == "Missing Fields. Failed to Create Invoice."
        assert _invoices(database) == []

    def test_all_fields_missing(self, actions, database):
        result = actions.create_invoice({})

        assert isinstance(result, FormState)
        assert result.errors == {
            "customerId": ["Please select a customer."],
            "amount": ["Please enter an amount greater than $0."],
            "status": ["Please select an invoice status."],
        }
        assert result.fields == {"customerId": None, "amount": None, "status": None}
        assert _invoices(database) == []

    def test_invalid_status(self, actions, customer_id):
        result = actions.create_invoice(
            {"customerId": customer_id, "amount": "10", "status": "overdue"}
        )

        assert isinstance(result, FormState)
        assert result.errors == {"status": ["Please select an invoice status."]}

    def test_echoes_submitted_fields(self, actions, customer_id):
        form = {"customerId": customer_id, "amount": "-1", "status": "paid", "extra": "x"}

        result = actions.create_invoice(form)

        assert isinstance(result, FormState)
        assert result.fields == {"customerId": customer_id, "amount": "-1", "status": "paid"}

    def test_unknown_customer_is_reported_as_database_error(self, actions, database, cache):
        cache.get_or_compute(settings.INVOICES_PATH, "k", lambda: "kept")

        result = actions.create_invoice(
            {"customerId": "no-such-customer", "amount": "10", "status": "paid"}
        )

        assert isinstance(result, FormState)
        assert result.errors == {}
        assert result.message == "Database Error: Failed to Create Invoice."
        assert _invoices(database) == []
        assert cache.is_cached(settings.INVOICES_PATH, "k")

    def test_database_failure_is_caught(self, actions, customer_id, monkeypatch):
        def fail(*_args, **_kwargs):
            raise OperationalError("INSERT", {}, Exception("gone"))

        monkeypatch.setattr(InvoiceRepository, "create", fail)

        result = actions.create_invoice(
            {"customerId": customer_id, "amount": "10", "status": "paid"}
        )

        assert isinstance(result, FormState)
        assert result.message == "Database Error: Failed to Create Invoice."
        assert result.fields["amount"] == "10"


class TestUpdateInvoice:
    def test_valid_update(self, actions, database, customer_id, make_customer, make_invoice):
        other_customer = make_customer(name="John Smith")
        invoice_id = make_invoice(customer_id, amount=100, status="pending")

        result = actions.update_invoice(
            invoice_id, {"customerId": other_customer, "amount": "99.99", "status": "paid"}
        )

        assert result == ActionRedirect(url=settings.INVOICES_PATH)
        row = _invoices(database)[0]
        assert row["customer_id"] == other_customer
        assert row["amount"] == 9999
        assert row["status"] == "paid"
        assert row["date"] == date(2024, 1, 1)

    def test_invalid_update_changes_nothing(self, actions, database, customer_id, make_invoice):
        invoice_id = make_invoice(customer_id, amount=100, status="pending")

        result = actions.update_invoice(
            invoice_id, {"customerId": customer_id, "amount": "0", "status": "paid"}
        )

        assert isinstance(result, FormState)
        assert result.errors == {"amount": ["Please enter an amount greater than $0."]}
        assert result.message == "Missing Fields. Failed to Update Invoice."
        row = _invoices(database)[0]
        assert row["amount"] == 100
        assert row["status"] == "pending"

    def test_database_failure_maps_to_form_state(self, actions, database, customer_id, make_invoice):
        invoice_id = make_invoice(customer_id, amount=100)

        result = actions.update_invoice(
            invoice_id, {"customerId": "no-such-customer", "amount": "3", "status": "paid"}
        )

        assert isinstance(result, FormState)
        assert result.message == "Database Error: Failed to Update Invoice."
        assert _invoices(database)[0]["customer_id"] == customer_id

    def test_revalidates_listing(self, actions, cache, customer_id, make_invoice):
        invoice_id = make_invoice(customer_id)
        cache.get_or_compute(settings.INVOICES_PATH, "k", lambda: "stale")

        actions.update_invoice(invoice_id, {"customerId": customer_id, "amount": "2", "status": "paid"})

        assert not cache.is_cached(settings.INVOICES_PATH, "k")


class TestDeleteInvoice:
    def test_deletes_and_reports_success(self, actions, database, customer_id, make_invoice):
        keep = make_invoice(customer_id)
        drop = make_invoice(customer_id)

        assert actions.delete_invoice({"id": drop}) is True
        assert [row["id"] for row in _invoices(database)] == [keep]

    def test_missing_id_is_noop_success(self, actions, database, customer_id, make_invoice):
        make_invoice(customer_id)

        assert actions.delete_invoice({"id": "does-not-exist"}) is True
        assert actions.delete_invoice({}) is True
        assert len(_invoices(database)) == 1

    def test_revalidates_listing(self, actions, cache):
        cache.get_or_compute(settings.INVOICES_PATH, "k", lambda: "stale")

        actions.delete_invoice({"id": "x"})

        assert not cache.is_cached(settings.INVOICES_PATH, "k")

    def test_database_failure_raises_mutation_error(self, actions, monkeypatch):
        def fail(*_args, **_kwargs):
            raise OperationalError("DELETE", {}, Exception("gone"))

        monkeypatch.setattr(InvoiceRepository, "delete", fail)

        with pytest.raises(MutationError, match="Failed to Delete Invoice"):
            actions.delete_invoice({"id": "1"})


class _HalfPastMidnightUtc(datetime):
    """Clock at 00:30 UTC on 1 March, still 28 February in UTC-5."""

    @classmethod
    def now(cls, tz=None):
        moment = datetime(2025, 3, 1, 0, 30, tzinfo=UTC)
        if tz is None:
            return moment.astimezone(timezone(timedelta(hours=-5))).replace(tzinfo=None)
        return moment.astimezone(tz)


def test_invoice_date_is_utc_calendar_date(actions, database, customer_id):
    with patch("invoicedesk.models.shared.datetime", _HalfPastMidnightUtc):
        assert today() == date(2025, 3, 1)
        actions.create_invoice({"customerId": customer_id, "amount": "1", "status": "paid"})

    assert _invoices(database)[0]["date"] == date(2025, 3, 1)
