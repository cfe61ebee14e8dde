from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
import json
import logging

from database import get_db
from schemas.customers import Customer as CustomerSchema, CustomerCreate, CustomerUpdate
from crud import customers as crud_customers
from crud.activity_log import record_activity
from utils import sqlalchemy_to_dict
from utils.auth_utils import get_current_user, get_user_identifier, require_role, SALES_ROLES, ADMIN

router = APIRouter(prefix="/customers", tags=["Customers"])
logger = logging.getLogger("customers")


@router.get("/", response_model=List[CustomerSchema])
def read_customers(
    include_inactive: bool = False,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    return crud_customers.get_customers(db, include_inactive=include_inactive, skip=skip, limit=limit)


@router.get("/{customer_id}", response_model=CustomerSchema)
def read_customer(customer_id: int, db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    db_customer = crud_customers.get_customer(db, customer_id)
    if db_customer is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    return db_customer


@router.post("/", response_model=CustomerSchema, status_code=status.HTTP_201_CREATED)
def create_customer(
    customer: CustomerCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(SALES_ROLES)),
):
    user_id = get_user_identifier(user)
    db_customer = crud_customers.create_customer(db, customer, user_id)
    record_activity(db, user_id, "CREATE", "Customer", db_customer.id, json.dumps(sqlalchemy_to_dict(db_customer)))
    return db_customer


@router.patch("/{customer_id}", response_model=CustomerSchema)
def update_customer(
    customer_id: int,
    customer: CustomerUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(SALES_ROLES)),
):
    if crud_customers.get_customer(db, customer_id) is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    if customer.balance is not None and ADMIN not in (user.get("roles") or [user.get("role")]):
        raise HTTPException(status_code=403, detail="Only administrators may override a balance")

    user_id = get_user_identifier(user)
    db_customer = crud_customers.update_customer(db, customer_id, customer, user_id)
    action = "BALANCE_OVERRIDE" if customer.balance is not None else "UPDATE"
    record_activity(db, user_id, action, "Customer", customer_id, customer.model_dump_json(exclude_unset=True))
    return db_customer
