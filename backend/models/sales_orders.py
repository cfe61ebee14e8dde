from sqlalchemy import Column, Integer, String, Text, Numeric, Date, ForeignKey, Enum
from sqlalchemy.orm import relationship
from database import Base
import enum
from models.audit_mixin import TimestampMixin


class SalesOrderStatus(enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class PaymentMethod(enum.Enum):
    CASH = "CASH"
    CARD = "CARD"
    BANK_TRANSFER = "BANK_TRANSFER"
    CREDIT = "CREDIT"


class SalesOrder(Base, TimestampMixin):
    __tablename__ = "sales_orders"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String(20), nullable=False, unique=True, index=True)  # SO-000001
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    user_id = Column(String, nullable=True)
    order_date = Column(Date, nullable=False)
    total_amount = Column(Numeric(18, 2), nullable=False, default=0)  # sum of line totals
    discount = Column(Numeric(18, 2), nullable=False, default=0)
    tax = Column(Numeric(18, 2), nullable=False, default=0)
    grand_total = Column(Numeric(18, 2), nullable=False, default=0)  # total - discount + tax
    paid_amount = Column(Numeric(18, 2), nullable=False, default=0)
    balance = Column(Numeric(18, 2), nullable=False, default=0)  # still owed by the customer
    status = Column(Enum(SalesOrderStatus), nullable=False, default=SalesOrderStatus.COMPLETED)
    payment_method = Column(Enum(PaymentMethod), nullable=False, default=PaymentMethod.CASH)
    notes = Column(Text, nullable=True)

    # Relationships
    customer = relationship("Customer", back_populates="sales_orders")
    items = relationship(
        "SalesOrderItem",
        back_populates="sales_order",
        cascade="all, delete-orphan",
        order_by="SalesOrderItem.id",
    )
