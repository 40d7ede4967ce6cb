from pydantic import BaseModel


class RevenueRow(BaseModel):
    month: str
    revenue: int


class CardData(BaseModel):
    number_of_customers: int
    number_of_invoices: int
    total_paid_invoices: str
    total_pending_invoices: str
