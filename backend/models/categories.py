from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin


class Category(Base, TimestampMixin):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True)
    description = Column(Text, nullable=True)

    products = relationship("Product", back_populates="category")
