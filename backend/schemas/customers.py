from decimal import Decimal
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional
from datetime import datetime
from schemas.common import Money, MoneyOut, SignedMoney


class CustomerBase(BaseModel):
    name: str
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    credit_limit: Money = Field(default=Decimal("0.00"))


class CustomerCreate(CustomerBase):
    pass


class CustomerUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    credit_limit: Optional[Money] = None
    is_active: Optional[bool] = None
    # Administrative correction only; normal balance changes come from orders
    balance: Optional[SignedMoney] = None


class Customer(CustomerBase):
    id: int
    credit_limit: MoneyOut
    balance: MoneyOut
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
