from fastapi import APIRouter, Depends

from invoicedesk.core.database import Database, get_database
from invoicedesk.schemas.dashboard import CardData, RevenueRow
from invoicedesk.schemas.invoice import LatestInvoice
from invoicedesk.services.dashboard_service import DashboardService

router = APIRouter()


@router.get(
    "/revenue",
    response_model=list[RevenueRow],
    summary="Get monthly revenue",
    responses={500: {"description": "Failed to fetch revenue data"}},
)
def get_revenue(db: Database = Depends(get_database)) -> list[RevenueRow]:
    """Return every revenue row as stored."""
    return DashboardService(db).fetch_revenue()


@router.get(
    "/latest-invoices",
    response_model=list[LatestInvoice],
    summary="Get the latest invoices",
    responses={500: {"description": "Failed to fetch the latest invoices"}},
)
def get_latest_invoices(db: Database = Depends(get_database)) -> list[LatestInvoice]:
    """Return the five most recent invoices with formatted amounts."""
    return DashboardService(db).fetch_latest_invoices()


@router.get(
    "/cards",
    response_model=CardData,
    summary="Get dashboard card totals",
    responses={500: {"description": "Failed to fetch card data"}},
)
def get_card_data(db: Database = Depends(get_database)) -> CardData:
    return DashboardService(db).fetch_card_data()
