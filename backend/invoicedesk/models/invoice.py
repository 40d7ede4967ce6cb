from enum import Enum

from sqlalchemy import Column, Date, ForeignKey, Integer, String

from invoicedesk.core.database import Base
from invoicedesk.models.shared import generate_uuid


class InvoiceStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    customer_id = Column(String(36), ForeignKey("customers.id"), nullable=False)
    # Stored in minor units (cents)
    amount = Column(Integer, nullable=False)
    status = Column(String(255), nullable=False, default=InvoiceStatus.PENDING.value)
    date = Column(Date, nullable=False)
