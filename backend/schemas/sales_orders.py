from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
import datetime as dt
from models.sales_orders import SalesOrderStatus, PaymentMethod
from schemas.common import Money, MoneyOut


class SalesOrderItemCreateRequest(BaseModel):
    product_id: int
    quantity: int = Field(..., gt=0)


class SalesOrderItem(BaseModel):
    id: int
    product_id: int
    quantity: int
    unit_price: MoneyOut
    line_total: MoneyOut

    model_config = ConfigDict(from_attributes=True)


class SalesOrderCreate(BaseModel):
    customer_id: int
    items: List[SalesOrderItemCreateRequest] = Field(..., min_length=1)
    discount: Money = Field(default=Decimal("0.00"))
    tax: Money = Field(default=Decimal("0.00"))
    payment_method: PaymentMethod = PaymentMethod.CASH
    warehouse_id: Optional[int] = None  # stock is reduced only when a warehouse is given
    order_date: Optional[dt.date] = None
    notes: Optional[str] = None


class SalesOrderUpdate(BaseModel):
    status: Optional[SalesOrderStatus] = None
    paid_amount: Optional[Money] = None
    notes: Optional[str] = None


class SalesOrder(BaseModel):
    id: int
    order_number: str
    customer_id: int
    user_id: Optional[str] = None
    order_date: dt.date
    total_amount: MoneyOut
    discount: MoneyOut
    tax: MoneyOut
    grand_total: MoneyOut
    paid_amount: MoneyOut
    balance: MoneyOut
    status: SalesOrderStatus
    payment_method: PaymentMethod
    notes: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None
    items: List[SalesOrderItem] = []

    model_config = ConfigDict(from_attributes=True)
