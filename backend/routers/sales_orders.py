from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
import logging

from database import get_db
from schemas.sales_orders import SalesOrder as SalesOrderSchema, SalesOrderCreate, SalesOrderUpdate
from crud import sales_orders as crud_sales
from crud.activity_log import record_activity
from utils.auth_utils import get_current_user, get_user_identifier, require_role, SALES_ROLES

router = APIRouter(prefix="/sales-orders", tags=["Sales Orders"])
logger = logging.getLogger("sales_orders")


@router.post("/", response_model=SalesOrderSchema, status_code=status.HTTP_201_CREATED)
def create_sales_order(
    so: SalesOrderCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(SALES_ROLES)),
):
    """Create a sales order with its stock, ledger and receivable effects."""
    user_id = get_user_identifier(user)
    db_so = crud_sales.create_sales_order(db, so, user_id)
    record_activity(
        db, user_id, "CREATE", "SalesOrder", db_so.id,
        f"{db_so.order_number} grand total {db_so.grand_total} ({db_so.payment_method.value})"
    )
    return db_so


@router.get("/", response_model=List[SalesOrderSchema])
def read_sales_orders(
    customer_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    return crud_sales.get_sales_orders(
        db, customer_id=customer_id, start_date=start_date, end_date=end_date, skip=skip, limit=limit
    )


@router.get("/{so_id}", response_model=SalesOrderSchema)
def read_sales_order(so_id: int, db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    db_so = crud_sales.get_sales_order(db, so_id)
    if db_so is None:
        raise HTTPException(status_code=404, detail="Sales order not found")
    return db_so


@router.patch("/{so_id}", response_model=SalesOrderSchema)
def update_sales_order(
    so_id: int,
    so: SalesOrderUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(SALES_ROLES)),
):
    """Record a payment or change the status or notes of a sales order."""
    user_id = get_user_identifier(user)
    db_so = crud_sales.update_sales_order(db, so_id, so, user_id)
    record_activity(db, user_id, "UPDATE", "SalesOrder", so_id, so.model_dump_json(exclude_unset=True))
    return db_so
