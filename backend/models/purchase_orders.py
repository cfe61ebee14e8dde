from sqlalchemy import Column, Integer, String, Text, Numeric, Date, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from database import Base
import enum
from models.audit_mixin import TimestampMixin


class PurchaseOrderStatus(enum.Enum):
    PENDING = "PENDING"
    RECEIVED = "RECEIVED"
    CANCELLED = "CANCELLED"


class PurchaseOrder(Base, TimestampMixin):
    __tablename__ = "purchase_orders"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String(20), nullable=False, unique=True, index=True)  # PO-000001
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=False, index=True)
    user_id = Column(String, nullable=True)
    order_date = Column(Date, nullable=False)
    total_amount = Column(Numeric(18, 2), nullable=False, default=0)
    discount = Column(Numeric(18, 2), nullable=False, default=0)
    tax = Column(Numeric(18, 2), nullable=False, default=0)
    grand_total = Column(Numeric(18, 2), nullable=False, default=0)
    paid_amount = Column(Numeric(18, 2), nullable=False, default=0)
    balance = Column(Numeric(18, 2), nullable=False, default=0)  # still owed to the supplier
    status = Column(Enum(PurchaseOrderStatus), nullable=False, default=PurchaseOrderStatus.PENDING)
    notes = Column(Text, nullable=True)
    received_date = Column(DateTime(timezone=True), nullable=True)
    received_warehouse_id = Column(Integer, ForeignKey("warehouses.id"), nullable=True)

    # Relationships
    supplier = relationship("Supplier", back_populates="purchase_orders")
    received_warehouse = relationship("Warehouse")
    items = relationship(
        "PurchaseOrderItem",
        back_populates="purchase_order",
        cascade="all, delete-orphan",
        order_by="PurchaseOrderItem.id",
    )
