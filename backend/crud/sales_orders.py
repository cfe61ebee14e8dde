import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from database import transaction
from exceptions import OrderNotFoundError, UnknownPartyError, UnknownProductError, ValidationError
from models.audit_mixin import now_local
from models.customers import Customer
from models.journal_entry import JournalEntryType
from models.products import Product
from models.sales_order_items import SalesOrderItem
from models.sales_orders import PaymentMethod, SalesOrder, SalesOrderStatus
from models.stock_movements import MovementType
from schemas.journal_entry import JournalEntryCreate, JournalEntryLineCreate
from schemas.sales_orders import SalesOrderCreate, SalesOrderUpdate
from schemas.stock import StockMovementCreate
from crud.chart_of_accounts import get_posting_accounts
from crud.journal_entry import write_journal_entry
from crud.order_totals import line_total, order_totals
from crud.party_balance import adjust_customer_balance
from crud.sequences import next_document_number, SALES_ORDER_PREFIX
from crud.stock import write_movement
from utils.money import ZERO, as_money, to_decimal

logger = logging.getLogger("sales_orders")


def create_sales_order(db: Session, order: SalesOrderCreate, user_id: str = None) -> SalesOrder:
    """
    Record a sale with all of its effects in one transaction.

    Items are priced at the product's selling price. When a warehouse is
    given, stock is taken out of it. A SALE journal entry debits cash (or
    receivables for credit sales) and credits sales revenue for the grand
    total, and credit sales add the grand total to the customer's balance.
    """
    is_credit = order.payment_method == PaymentMethod.CREDIT

    with transaction(db):
        customer = db.query(Customer).filter(Customer.id == order.customer_id).first()
        if customer is None or not customer.is_active:
            raise UnknownPartyError("Customer", order.customer_id)

        priced_items = []
        for item in order.items:
            product = db.query(Product).filter(Product.id == item.product_id).first()
            if product is None or not product.is_active:
                raise UnknownProductError(item.product_id)
            unit_price = as_money(product.selling_price)
            priced_items.append((item, unit_price, line_total(item.quantity, unit_price)))

        total_amount, discount, tax, grand_total = order_totals(
            [total for _, _, total in priced_items], order.discount, order.tax
        )

        accounts = get_posting_accounts(db, "receivable" if is_credit else "cash", "sales")
        debit_account = accounts["receivable" if is_credit else "cash"]
        sales_account = accounts["sales"]

        order_number = next_document_number(db, SALES_ORDER_PREFIX)
        order_date = order.order_date or now_local().date()

        db_order = SalesOrder(
            order_number=order_number,
            customer_id=customer.id,
            user_id=user_id,
            order_date=order_date,
            total_amount=total_amount,
            discount=discount,
            tax=tax,
            grand_total=grand_total,
            paid_amount=ZERO if is_credit else grand_total,
            balance=grand_total if is_credit else ZERO,
            status=SalesOrderStatus.PENDING if is_credit else SalesOrderStatus.COMPLETED,
            payment_method=order.payment_method,
            notes=order.notes,
            created_by=user_id,
        )
        db.add(db_order)
        db.flush()

        for item, unit_price, total in priced_items:
            db.add(SalesOrderItem(
                sales_order_id=db_order.id,
                product_id=item.product_id,
                quantity=item.quantity,
                unit_price=unit_price,
                line_total=total,
            ))

        if order.warehouse_id is not None:
            for item, _, _ in sorted(priced_items, key=lambda priced: priced[0].product_id):
                write_movement(db, StockMovementCreate(
                    product_id=item.product_id,
                    movement_type=MovementType.OUT,
                    quantity=item.quantity,
                    from_warehouse_id=order.warehouse_id,
                    notes=f"Sales order: {order_number}",
                ), user_id)

        if grand_total > 0:
            write_journal_entry(db, JournalEntryCreate(
                date=order_date,
                description=f"Sales Order {order_number}",
                entry_type=JournalEntryType.SALE,
                reference_id=order_number,
                lines=[
                    JournalEntryLineCreate(
                        account_id=debit_account.id,
                        debit=grand_total,
                        description=f"Sale to {customer.name}",
                    ),
                    JournalEntryLineCreate(
                        account_id=sales_account.id,
                        credit=grand_total,
                        description=f"Sales revenue {order_number}",
                    ),
                ],
            ), user_id)
        else:
            logger.info(f"Sales order {order_number} has a zero total; no journal entry posted")

        if is_credit:
            adjust_customer_balance(db, customer.id, grand_total)

    db.refresh(db_order)
    logger.info(
        f"Sales order {order_number} created for customer {customer.id}: "
        f"grand total {grand_total} ({order.payment_method.value}) by user {user_id}"
    )
    return db_order


def update_sales_order(db: Session, order_id: int, order_update: SalesOrderUpdate, user_id: str = None) -> SalesOrder:
    """
    Record a payment against a sale or change its status or notes.

    Never touches the ledger or stock. For credit sales the change in
    paid_amount is taken off the customer's receivable balance, and a
    pending credit sale that is fully paid becomes COMPLETED.
    """
    update_data = order_update.model_dump(exclude_unset=True)

    with transaction(db):
        db_order = db.query(SalesOrder).filter(SalesOrder.id == order_id).with_for_update().first()
        if db_order is None:
            raise OrderNotFoundError("Sales order", order_id)

        if update_data.get("paid_amount") is not None:
            grand_total = as_money(db_order.grand_total)
            new_paid = to_decimal(update_data["paid_amount"])
            if new_paid > grand_total:
                raise ValidationError(
                    f"Paid amount {new_paid} exceeds grand total {grand_total} of {db_order.order_number}"
                )
            paid_delta = new_paid - as_money(db_order.paid_amount)
            db_order.paid_amount = new_paid
            db_order.balance = grand_total - new_paid
            if paid_delta and db_order.payment_method == PaymentMethod.CREDIT:
                adjust_customer_balance(db, db_order.customer_id, -paid_delta)
            logger.info(f"Sales order {db_order.order_number} paid amount set to {new_paid} by user {user_id}")

            if (
                update_data.get("status") is None
                and db_order.status == SalesOrderStatus.PENDING
                and db_order.balance == 0
            ):
                db_order.status = SalesOrderStatus.COMPLETED

        if update_data.get("status") is not None:
            db_order.status = update_data["status"]
        if "notes" in update_data:
            db_order.notes = update_data["notes"]
        db_order.updated_by = user_id

    db.refresh(db_order)
    return db_order


def get_sales_order(db: Session, order_id: int):
    return db.query(SalesOrder).filter(SalesOrder.id == order_id).first()


def get_sales_orders(
    db: Session,
    customer_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100
):
    query = db.query(SalesOrder)
    if customer_id:
        query = query.filter(SalesOrder.customer_id == customer_id)
    if start_date:
        query = query.filter(SalesOrder.order_date >= start_date)
    if end_date:
        query = query.filter(SalesOrder.order_date <= end_date)
    return query.order_by(SalesOrder.order_date.desc(), SalesOrder.id.desc()).offset(skip).limit(limit).all()
