from sqlalchemy import Column, String, Text

from invoicedesk.core.database import Base
from invoicedesk.models.shared import generate_uuid


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    # bcrypt hash
    password = Column(Text, nullable=False)
