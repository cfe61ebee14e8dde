from pydantic import BaseModel, ConfigDict, EmailStr
from typing import Optional
from datetime import datetime
from schemas.common import MoneyOut, SignedMoney


class SupplierBase(BaseModel):
    name: str
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class SupplierCreate(SupplierBase):
    pass


class SupplierUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    is_active: Optional[bool] = None
    # Administrative correction only; normal balance changes come from orders
    balance: Optional[SignedMoney] = None


class Supplier(SupplierBase):
    id: int
    balance: MoneyOut
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
