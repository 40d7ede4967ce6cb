from sqlalchemy import select
from sqlalchemy.engine import RowMapping

from invoicedesk.core.database import Database
from invoicedesk.models.revenue import Revenue


class RevenueRepository:
    def __init__(self, db: Database):
        self.db = db

    def get_all(self) -> list[RowMapping]:
        return self.db.query(select(Revenue.month, Revenue.revenue))
