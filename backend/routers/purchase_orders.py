from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
import logging

from database import get_db
from schemas.purchase_orders import (
    PurchaseOrder as PurchaseOrderSchema,
    PurchaseOrderCreate,
    PurchaseOrderReceive,
    PurchaseOrderUpdate,
)
from crud import purchase_orders as crud_purchases
from crud import stock as crud_stock
from crud.activity_log import record_activity
from utils.auth_utils import get_current_user, get_user_identifier, require_role, PURCHASING_ROLES, STOCK_ROLES

router = APIRouter(prefix="/purchase-orders", tags=["Purchase Orders"])
logger = logging.getLogger("purchase_orders")


@router.post("/", response_model=PurchaseOrderSchema, status_code=status.HTTP_201_CREATED)
def create_purchase_order(
    po: PurchaseOrderCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(PURCHASING_ROLES)),
):
    """Create a purchase order; with warehouse_id the goods are received at once."""
    user_id = get_user_identifier(user)
    db_po = crud_purchases.create_purchase_order(db, po, user_id)
    record_activity(db, user_id, "CREATE", "PurchaseOrder", db_po.id, f"{db_po.order_number} grand total {db_po.grand_total}")
    return db_po


@router.get("/", response_model=List[PurchaseOrderSchema])
def read_purchase_orders(
    supplier_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    return crud_purchases.get_purchase_orders(
        db, supplier_id=supplier_id, start_date=start_date, end_date=end_date, skip=skip, limit=limit
    )


@router.get("/{po_id}", response_model=PurchaseOrderSchema)
def read_purchase_order(po_id: int, db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    db_po = crud_purchases.get_purchase_order(db, po_id)
    if db_po is None:
        raise HTTPException(status_code=404, detail="Purchase order not found")
    return db_po


@router.patch("/{po_id}", response_model=PurchaseOrderSchema)
def update_purchase_order(
    po_id: int,
    po: PurchaseOrderUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(PURCHASING_ROLES)),
):
    user_id = get_user_identifier(user)
    db_po = crud_purchases.update_purchase_order(db, po_id, po, user_id)
    record_activity(db, user_id, "UPDATE", "PurchaseOrder", po_id, po.model_dump_json(exclude_unset=True))
    return db_po


@router.post("/{po_id}/receive", response_model=PurchaseOrderSchema)
def receive_purchase_order(
    po_id: int,
    receipt: PurchaseOrderReceive,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(STOCK_ROLES)),
):
    """Book every item of the order into a warehouse."""
    user_id = get_user_identifier(user)
    db_po = crud_stock.receive_purchase_order(db, po_id, receipt.warehouse_id, user_id)
    record_activity(db, user_id, "RECEIVE", "PurchaseOrder", po_id, f"Received into warehouse {receipt.warehouse_id}")
    return db_po
