from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
import json
import logging

from database import get_db
from schemas.suppliers import Supplier as SupplierSchema, SupplierCreate, SupplierUpdate
from crud import suppliers as crud_suppliers
from crud.activity_log import record_activity
from utils import sqlalchemy_to_dict
from utils.auth_utils import get_current_user, get_user_identifier, require_role, PURCHASING_ROLES, ADMIN

router = APIRouter(prefix="/suppliers", tags=["Suppliers"])
logger = logging.getLogger("suppliers")


@router.get("/", response_model=List[SupplierSchema])
def read_suppliers(
    include_inactive: bool = False,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    return crud_suppliers.get_suppliers(db, include_inactive=include_inactive, skip=skip, limit=limit)


@router.get("/{supplier_id}", response_model=SupplierSchema)
def read_supplier(supplier_id: int, db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    db_supplier = crud_suppliers.get_supplier(db, supplier_id)
    if db_supplier is None:
        raise HTTPException(status_code=404, detail="Supplier not found")
    return db_supplier


@router.post("/", response_model=SupplierSchema, status_code=status.HTTP_201_CREATED)
def create_supplier(
    supplier: SupplierCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(PURCHASING_ROLES)),
):
    user_id = get_user_identifier(user)
    db_supplier = crud_suppliers.create_supplier(db, supplier, user_id)
    record_activity(db, user_id, "CREATE", "Supplier", db_supplier.id, json.dumps(sqlalchemy_to_dict(db_supplier)))
    return db_supplier


@router.patch("/{supplier_id}", response_model=SupplierSchema)
def update_supplier(
    supplier_id: int,
    supplier: SupplierUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(PURCHASING_ROLES)),
):
    if crud_suppliers.get_supplier(db, supplier_id) is None:
        raise HTTPException(status_code=404, detail="Supplier not found")
    if supplier.balance is not None and ADMIN not in (user.get("roles") or [user.get("role")]):
        raise HTTPException(status_code=403, detail="Only administrators may override a balance")

    user_id = get_user_identifier(user)
    db_supplier = crud_suppliers.update_supplier(db, supplier_id, supplier, user_id)
    action = "BALANCE_OVERRIDE" if supplier.balance is not None else "UPDATE"
    record_activity(db, user_id, action, "Supplier", supplier_id, supplier.model_dump_json(exclude_unset=True))
    return db_supplier
