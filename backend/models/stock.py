from sqlalchemy import Column, Integer, ForeignKey, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin


class Stock(Base, TimestampMixin):
    """On-hand quantity of one product in one warehouse. Written only by crud.stock."""
    __tablename__ = "stocks"
    __table_args__ = (
        UniqueConstraint('product_id', 'warehouse_id', name='_stock_product_warehouse_uc'),
        CheckConstraint('quantity >= 0', name='check_stock_quantity_non_negative'),
    )

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    warehouse_id = Column(Integer, ForeignKey("warehouses.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=0)

    # Relationships
    product = relationship("Product", back_populates="stocks")
    warehouse = relationship("Warehouse", back_populates="stocks")
