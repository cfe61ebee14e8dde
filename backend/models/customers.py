from sqlalchemy import Column, Integer, String, Text, Numeric, Boolean
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin


class Customer(Base, TimestampMixin):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    address = Column(Text, nullable=True)
    credit_limit = Column(Numeric(18, 2), nullable=False, default=0)
    balance = Column(Numeric(18, 2), nullable=False, default=0)  # receivable owed to the business
    is_active = Column(Boolean, nullable=False, default=True)

    sales_orders = relationship("SalesOrder", back_populates="customer")
