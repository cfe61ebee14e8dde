"""Running receivable/payable balances on customers and suppliers.

These helpers flush but never commit: they are only called from inside a
document transaction (see crud.sales_orders and crud.purchase_orders).
"""
import logging
from decimal import Decimal
from sqlalchemy.orm import Session

from exceptions import UnknownPartyError
from models.customers import Customer
from models.suppliers import Supplier
from utils.money import as_money

logger = logging.getLogger(__name__)


def adjust_customer_balance(db: Session, customer_id: int, delta: Decimal) -> Customer:
    customer = db.query(Customer).filter(Customer.id == customer_id).with_for_update().first()
    if customer is None:
        raise UnknownPartyError("Customer", customer_id)

    customer.balance = as_money(customer.balance) + delta
    db.flush()
    logger.info(f"Customer {customer_id} balance adjusted by {delta} to {customer.balance}")
    return customer


def adjust_supplier_balance(db: Session, supplier_id: int, delta: Decimal) -> Supplier:
    supplier = db.query(Supplier).filter(Supplier.id == supplier_id).with_for_update().first()
    if supplier is None:
        raise UnknownPartyError("Supplier", supplier_id)

    supplier.balance = as_money(supplier.balance) + delta
    db.flush()
    logger.info(f"Supplier {supplier_id} balance adjusted by {delta} to {supplier.balance}")
    return supplier
