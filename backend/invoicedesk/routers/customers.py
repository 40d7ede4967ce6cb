from fastapi import APIRouter, Depends, Query

from invoicedesk.core.database import Database, get_database
from invoicedesk.schemas.customer import CustomerTableRow
from invoicedesk.services.dashboard_service import DashboardService

router = APIRouter()


@router.get(
    "/",
    response_model=list[CustomerTableRow],
    summary="List customers with invoice totals",
    responses={500: {"description": "Failed to fetch customer table"}},
)
def list_customers(
    query: str = Query(default="", max_length=255),
    db: Database = Depends(get_database),
) -> list[CustomerTableRow]:
    return DashboardService(db).fetch_filtered_customers(query)
