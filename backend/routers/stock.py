from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database import get_db
from models.stock_movements import MovementType
from schemas.stock import LowStockProduct, StockLevel, StockMovement, StockMovementCreate
from crud import stock as crud_stock
from crud.activity_log import record_activity
from utils.auth_utils import get_current_user, get_user_identifier, require_role, STOCK_ROLES

router = APIRouter(prefix="/stock", tags=["Stock"])
logger = logging.getLogger("stock")


@router.get("/", response_model=List[StockLevel])
def read_stock_levels(
    warehouse_id: Optional[int] = None,
    product_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    return crud_stock.get_stock_levels(db, warehouse_id=warehouse_id, product_id=product_id)


@router.get("/low-stock", response_model=List[LowStockProduct])
def read_low_stock(db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    return crud_stock.get_low_stock_products(db)


@router.get("/movements", response_model=List[StockMovement])
def read_movements(
    product_id: Optional[int] = None,
    movement_type: Optional[MovementType] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    return crud_stock.get_movements(db, product_id=product_id, movement_type=movement_type, skip=skip, limit=limit)


@router.post("/movements", response_model=StockMovement, status_code=status.HTTP_201_CREATED)
def create_movement(
    movement: StockMovementCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(STOCK_ROLES)),
):
    user_id = get_user_identifier(user)
    record = crud_stock.apply_movement(db, movement, user_id)
    record_activity(
        db, user_id, movement.movement_type.value, "StockMovement", record.id,
        f"{record.quantity} x product {record.product_id}"
    )
    return record
