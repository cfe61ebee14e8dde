import logging
from sqlalchemy.orm import Session

from database import transaction
from exceptions import UnknownPartyError
from models.suppliers import Supplier
from schemas.suppliers import SupplierCreate, SupplierUpdate
from utils.money import as_money

logger = logging.getLogger("suppliers")


def get_supplier(db: Session, supplier_id: int):
    return db.query(Supplier).filter(Supplier.id == supplier_id).first()


def get_suppliers(db: Session, include_inactive: bool = False, skip: int = 0, limit: int = 100):
    query = db.query(Supplier)
    if not include_inactive:
        query = query.filter(Supplier.is_active == True)
    return query.order_by(Supplier.name).offset(skip).limit(limit).all()


def create_supplier(db: Session, supplier: SupplierCreate, user_id: str = None) -> Supplier:
    with transaction(db):
        db_supplier = Supplier(**supplier.model_dump(), balance=0, created_by=user_id)
        db.add(db_supplier)
        db.flush()
    db.refresh(db_supplier)
    logger.info(f"Supplier {db_supplier.id} ({db_supplier.name}) created by user {user_id}")
    return db_supplier


def update_supplier(db: Session, supplier_id: int, supplier_update: SupplierUpdate, user_id: str = None) -> Supplier:
    update_data = supplier_update.model_dump(exclude_unset=True)
    with transaction(db):
        db_supplier = db.query(Supplier).filter(Supplier.id == supplier_id).with_for_update().first()
        if db_supplier is None:
            raise UnknownPartyError("Supplier", supplier_id)

        if update_data.get("balance") is not None:
            logger.warning(
                f"Supplier {supplier_id} balance overridden from {as_money(db_supplier.balance)} "
                f"to {update_data['balance']} by user {user_id}"
            )
        for key, value in update_data.items():
            if value is None and key in ("name", "is_active", "balance"):
                continue
            setattr(db_supplier, key, value)
        db_supplier.updated_by = user_id

    db.refresh(db_supplier)
    return db_supplier
