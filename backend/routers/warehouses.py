from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
import logging

from database import get_db
from schemas.warehouses import Warehouse as WarehouseSchema, WarehouseCreate, WarehouseUpdate
from crud import warehouses as crud_warehouses
from crud.activity_log import record_activity
from utils.auth_utils import get_current_user, get_user_identifier, require_role, ADMIN, MANAGER

router = APIRouter(prefix="/warehouses", tags=["Warehouses"])
logger = logging.getLogger("warehouses")


@router.get("/", response_model=List[WarehouseSchema])
def read_warehouses(
    include_inactive: bool = False,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    return crud_warehouses.get_warehouses(db, include_inactive=include_inactive)


@router.post("/", response_model=WarehouseSchema, status_code=status.HTTP_201_CREATED)
def create_warehouse(
    warehouse: WarehouseCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role([ADMIN, MANAGER])),
):
    user_id = get_user_identifier(user)
    db_warehouse = crud_warehouses.create_warehouse(db, warehouse, user_id)
    record_activity(db, user_id, "CREATE", "Warehouse", db_warehouse.id, db_warehouse.name)
    return db_warehouse


@router.patch("/{warehouse_id}", response_model=WarehouseSchema)
def update_warehouse(
    warehouse_id: int,
    warehouse: WarehouseUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role([ADMIN, MANAGER])),
):
    if crud_warehouses.get_warehouse(db, warehouse_id) is None:
        raise HTTPException(status_code=404, detail="Warehouse not found")
    user_id = get_user_identifier(user)
    db_warehouse = crud_warehouses.update_warehouse(db, warehouse_id, warehouse, user_id)
    record_activity(db, user_id, "UPDATE", "Warehouse", warehouse_id, warehouse.model_dump_json(exclude_unset=True))
    return db_warehouse


@router.delete("/{warehouse_id}", response_model=WarehouseSchema)
def deactivate_warehouse(
    warehouse_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role([ADMIN, MANAGER])),
):
    if crud_warehouses.get_warehouse(db, warehouse_id) is None:
        raise HTTPException(status_code=404, detail="Warehouse not found")
    user_id = get_user_identifier(user)
    db_warehouse = crud_warehouses.deactivate_warehouse(db, warehouse_id, user_id)
    record_activity(db, user_id, "DEACTIVATE", "Warehouse", warehouse_id, db_warehouse.name)
    return db_warehouse
