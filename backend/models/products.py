from sqlalchemy import Column, Integer, String, Text, Numeric, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin


class Product(Base, TimestampMixin):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    sku = Column(String(64), nullable=False, unique=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    cost_price = Column(Numeric(18, 2), nullable=False, default=0)
    selling_price = Column(Numeric(18, 2), nullable=False, default=0)
    reorder_level = Column(Integer, nullable=False, default=10)  # low-stock alert threshold
    is_active = Column(Boolean, nullable=False, default=True)

    # Relationships
    category = relationship("Category", back_populates="products")
    stocks = relationship("Stock", back_populates="product")
