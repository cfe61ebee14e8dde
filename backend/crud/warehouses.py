import logging
from sqlalchemy import func
from sqlalchemy.orm import Session

from database import transaction
from exceptions import DuplicateCodeError, UnknownWarehouseError, WarehouseInUseError
from models.stock import Stock
from models.warehouses import Warehouse
from schemas.warehouses import WarehouseCreate, WarehouseUpdate

logger = logging.getLogger("warehouses")

DEFAULT_WAREHOUSE = "Main Warehouse"


def get_warehouse(db: Session, warehouse_id: int):
    return db.query(Warehouse).filter(Warehouse.id == warehouse_id).first()


def get_warehouses(db: Session, include_inactive: bool = False):
    query = db.query(Warehouse)
    if not include_inactive:
        query = query.filter(Warehouse.is_active == True)
    return query.order_by(Warehouse.name).all()


def create_warehouse(db: Session, warehouse: WarehouseCreate, user_id: str = None) -> Warehouse:
    with transaction(db):
        if db.query(Warehouse.id).filter(Warehouse.name == warehouse.name).first():
            raise DuplicateCodeError("Warehouse", warehouse.name)
        db_warehouse = Warehouse(**warehouse.model_dump(), created_by=user_id)
        db.add(db_warehouse)
        db.flush()
    db.refresh(db_warehouse)
    logger.info(f"Warehouse {db_warehouse.name} created by user {user_id}")
    return db_warehouse


def update_warehouse(db: Session, warehouse_id: int, warehouse_update: WarehouseUpdate, user_id: str = None) -> Warehouse:
    """
    Rename, relocate, deactivate or reactivate a warehouse.

    A warehouse keeps its movement history, so it is never deleted. It can
    only be deactivated once it holds no stock.
    """
    with transaction(db):
        db_warehouse = db.query(Warehouse).filter(Warehouse.id == warehouse_id).with_for_update().first()
        if db_warehouse is None:
            raise UnknownWarehouseError(warehouse_id)
        update_data = warehouse_update.model_dump(exclude_unset=True)
        for key in ("name", "is_active"):
            if key in update_data and update_data[key] is None:
                update_data.pop(key)

        new_name = update_data.get("name")
        if new_name is not None and new_name != db_warehouse.name:
            if db.query(Warehouse.id).filter(Warehouse.name == new_name).first():
                raise DuplicateCodeError("Warehouse", new_name)

        if update_data.get("is_active") is False and db_warehouse.is_active:
            on_hand = db.query(func.coalesce(func.sum(Stock.quantity), 0)).filter(
                Stock.warehouse_id == warehouse_id
            ).scalar()
            if on_hand > 0:
                logger.warning(f"Warehouse {db_warehouse.name} not deactivated: {on_hand} unit(s) on hand")
                raise WarehouseInUseError(db_warehouse.name, on_hand)

        for key, value in update_data.items():
            setattr(db_warehouse, key, value)
        db_warehouse.updated_by = user_id
    db.refresh(db_warehouse)
    logger.info(f"Warehouse {db_warehouse.name} updated by user {user_id}")
    return db_warehouse


def deactivate_warehouse(db: Session, warehouse_id: int, user_id: str = None) -> Warehouse:
    return update_warehouse(db, warehouse_id, WarehouseUpdate(is_active=False), user_id)
