from sqlalchemy import Column, Integer, String, Text, Numeric, Boolean
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin


class Supplier(Base, TimestampMixin):
    __tablename__ = "suppliers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    address = Column(Text, nullable=True)
    balance = Column(Numeric(18, 2), nullable=False, default=0)  # payable owed by the business
    is_active = Column(Boolean, nullable=False, default=True)

    purchase_orders = relationship("PurchaseOrder", back_populates="supplier")
