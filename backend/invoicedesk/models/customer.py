from sqlalchemy import Column, String

from invoicedesk.core.database import Base
from invoicedesk.models.shared import generate_uuid


class Customer(Base):
    __tablename__ = "customers"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    image_url = Column(String(255), nullable=False)
