from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
import datetime as dt
from models.purchase_orders import PurchaseOrderStatus
from schemas.common import Money, MoneyOut


class PurchaseOrderItemCreateRequest(BaseModel):
    product_id: int
    quantity: int = Field(..., gt=0)
    unit_price: Optional[Money] = None  # falls back to the product's cost price


class PurchaseOrderItem(BaseModel):
    id: int
    product_id: int
    quantity: int
    unit_price: MoneyOut
    line_total: MoneyOut

    model_config = ConfigDict(from_attributes=True)


class PurchaseOrderCreate(BaseModel):
    supplier_id: int
    items: List[PurchaseOrderItemCreateRequest] = Field(..., min_length=1)
    discount: Money = Field(default=Decimal("0.00"))
    tax: Money = Field(default=Decimal("0.00"))
    warehouse_id: Optional[int] = None  # receive immediately into this warehouse
    order_date: Optional[dt.date] = None
    notes: Optional[str] = None


class PurchaseOrderUpdate(BaseModel):
    status: Optional[PurchaseOrderStatus] = None
    paid_amount: Optional[Money] = None
    notes: Optional[str] = None
    # Receiving goes through POST /purchase-orders/{id}/receive, never through status


class PurchaseOrderReceive(BaseModel):
    warehouse_id: int


class PurchaseOrder(BaseModel):
    id: int
    order_number: str
    supplier_id: int
    user_id: Optional[str] = None
    order_date: dt.date
    total_amount: MoneyOut
    discount: MoneyOut
    tax: MoneyOut
    grand_total: MoneyOut
    paid_amount: MoneyOut
    balance: MoneyOut
    status: PurchaseOrderStatus
    notes: Optional[str] = None
    received_date: Optional[dt.datetime] = None
    received_warehouse_id: Optional[int] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None
    items: List[PurchaseOrderItem] = []

    model_config = ConfigDict(from_attributes=True)
