from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime
from schemas.common import Money, MoneyOut


class ProductBase(BaseModel):
    sku: str
    name: str
    description: Optional[str] = None
    category_id: Optional[int] = None
    cost_price: Money = Field(default=Decimal("0.00"))
    selling_price: Money = Field(default=Decimal("0.00"))
    reorder_level: int = Field(default=10, ge=0)


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[int] = None
    cost_price: Optional[Money] = None
    selling_price: Optional[Money] = None
    reorder_level: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class Product(ProductBase):
    id: int
    cost_price: MoneyOut
    selling_price: MoneyOut
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
