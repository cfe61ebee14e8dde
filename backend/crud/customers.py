import logging
from sqlalchemy.orm import Session

from database import transaction
from exceptions import UnknownPartyError
from models.customers import Customer
from schemas.customers import CustomerCreate, CustomerUpdate
from utils.money import as_money

logger = logging.getLogger("customers")

WALK_IN_CUSTOMER = "Walk-in Customer"


def get_customer(db: Session, customer_id: int):
    return db.query(Customer).filter(Customer.id == customer_id).first()


def get_customers(db: Session, include_inactive: bool = False, skip: int = 0, limit: int = 100):
    query = db.query(Customer)
    if not include_inactive:
        query = query.filter(Customer.is_active == True)
    return query.order_by(Customer.name).offset(skip).limit(limit).all()


def create_customer(db: Session, customer: CustomerCreate, user_id: str = None) -> Customer:
    with transaction(db):
        db_customer = Customer(**customer.model_dump(), balance=0, created_by=user_id)
        db.add(db_customer)
        db.flush()
    db.refresh(db_customer)
    logger.info(f"Customer {db_customer.id} ({db_customer.name}) created by user {user_id}")
    return db_customer


def update_customer(db: Session, customer_id: int, customer_update: CustomerUpdate, user_id: str = None) -> Customer:
    """
    Update customer details.

    A balance in the payload overwrites the receivable balance outright. That
    is an administrative correction outside the order flow, so it is logged at
    WARNING level.
    """
    update_data = customer_update.model_dump(exclude_unset=True)
    with transaction(db):
        db_customer = db.query(Customer).filter(Customer.id == customer_id).with_for_update().first()
        if db_customer is None:
            raise UnknownPartyError("Customer", customer_id)

        if update_data.get("balance") is not None:
            logger.warning(
                f"Customer {customer_id} balance overridden from {as_money(db_customer.balance)} "
                f"to {update_data['balance']} by user {user_id}"
            )
        for key, value in update_data.items():
            if value is None and key in ("name", "credit_limit", "is_active", "balance"):
                continue
            setattr(db_customer, key, value)
        db_customer.updated_by = user_id

    db.refresh(db_customer)
    return db_customer
