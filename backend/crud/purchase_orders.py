import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from database import transaction
from exceptions import (
    OrderNotFoundError,
    UnknownPartyError,
    UnknownProductError,
    UnknownWarehouseError,
    ValidationError,
)
from models.audit_mixin import now_local
from models.journal_entry import JournalEntryType
from models.products import Product
from models.purchase_order_items import PurchaseOrderItem
from models.purchase_orders import PurchaseOrder, PurchaseOrderStatus
from models.suppliers import Supplier
from models.warehouses import Warehouse
from schemas.journal_entry import JournalEntryCreate, JournalEntryLineCreate
from schemas.purchase_orders import PurchaseOrderCreate, PurchaseOrderUpdate
from crud.chart_of_accounts import get_posting_accounts
from crud.journal_entry import write_journal_entry
from crud.order_totals import line_total, order_totals
from crud.party_balance import adjust_supplier_balance
from crud.sequences import next_document_number, PURCHASE_ORDER_PREFIX
from crud.stock import write_receipt
from utils.money import ZERO, as_money, to_decimal

logger = logging.getLogger("purchase_orders")


def create_purchase_order(db: Session, order: PurchaseOrderCreate, user_id: str = None) -> PurchaseOrder:
    """
    Record a purchase, its PURCHASE journal entry and the supplier accrual.

    The entry debits inventory and credits accounts payable for the grand
    total. With a warehouse_id the goods are received in the same
    transaction; otherwise the order waits for POST /{id}/receive.
    """
    with transaction(db):
        supplier = db.query(Supplier).filter(Supplier.id == order.supplier_id).first()
        if supplier is None or not supplier.is_active:
            raise UnknownPartyError("Supplier", order.supplier_id)
        if order.warehouse_id is not None:
            if db.query(Warehouse.id).filter(Warehouse.id == order.warehouse_id).first() is None:
                raise UnknownWarehouseError(order.warehouse_id)

        priced_items = []
        for item in order.items:
            product = db.query(Product).filter(Product.id == item.product_id).first()
            if product is None or not product.is_active:
                raise UnknownProductError(item.product_id)
            unit_price = to_decimal(item.unit_price) if item.unit_price is not None else as_money(product.cost_price)
            priced_items.append((item, unit_price, line_total(item.quantity, unit_price)))

        total_amount, discount, tax, grand_total = order_totals(
            [total for _, _, total in priced_items], order.discount, order.tax
        )

        accounts = get_posting_accounts(db, "inventory", "payable")

        order_number = next_document_number(db, PURCHASE_ORDER_PREFIX)
        order_date = order.order_date or now_local().date()

        db_order = PurchaseOrder(
            order_number=order_number,
            supplier_id=supplier.id,
            user_id=user_id,
            order_date=order_date,
            total_amount=total_amount,
            discount=discount,
            tax=tax,
            grand_total=grand_total,
            paid_amount=ZERO,
            balance=grand_total,
            status=PurchaseOrderStatus.PENDING,
            notes=order.notes,
            created_by=user_id,
        )
        db.add(db_order)
        db.flush()

        for item, unit_price, total in priced_items:
            db.add(PurchaseOrderItem(
                purchase_order_id=db_order.id,
                product_id=item.product_id,
                quantity=item.quantity,
                unit_price=unit_price,
                line_total=total,
            ))
        db.flush()

        if order.warehouse_id is not None:
            db.refresh(db_order)
            write_receipt(db, db_order.id, order.warehouse_id, user_id)

        if grand_total > 0:
            write_journal_entry(db, JournalEntryCreate(
                date=order_date,
                description=f"Purchase Order {order_number}",
                entry_type=JournalEntryType.PURCHASE,
                reference_id=order_number,
                lines=[
                    JournalEntryLineCreate(
                        account_id=accounts["inventory"].id,
                        debit=grand_total,
                        description=f"Inventory purchased {order_number}",
                    ),
                    JournalEntryLineCreate(
                        account_id=accounts["payable"].id,
                        credit=grand_total,
                        description=f"Payable to {supplier.name}",
                    ),
                ],
            ), user_id)
        else:
            logger.info(f"Purchase order {order_number} has a zero total; no journal entry posted")

        adjust_supplier_balance(db, supplier.id, grand_total)

    db.refresh(db_order)
    logger.info(
        f"Purchase order {order_number} created for supplier {supplier.id}: "
        f"grand total {grand_total} by user {user_id}"
    )
    return db_order


def update_purchase_order(db: Session, order_id: int, order_update: PurchaseOrderUpdate, user_id: str = None) -> PurchaseOrder:
    """
    Record a payment to the supplier or change status or notes.

    The change in paid_amount is taken off the supplier's payable balance.
    Receiving is only possible through receive_purchase_order().
    """
    update_data = order_update.model_dump(exclude_unset=True)
    new_status = update_data.get("status")

    with transaction(db):
        db_order = db.query(PurchaseOrder).filter(PurchaseOrder.id == order_id).with_for_update().first()
        if db_order is None:
            raise OrderNotFoundError("Purchase order", order_id)

        if new_status == PurchaseOrderStatus.RECEIVED and db_order.status != PurchaseOrderStatus.RECEIVED:
            raise ValidationError("Purchase orders are received through the receive operation, not by status update")
        if (
            new_status is not None
            and db_order.status == PurchaseOrderStatus.RECEIVED
            and new_status != PurchaseOrderStatus.RECEIVED
        ):
            raise ValidationError(f"Purchase order {db_order.order_number} has been received; its status cannot change")

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
            if paid_delta:
                adjust_supplier_balance(db, db_order.supplier_id, -paid_delta)
            logger.info(f"Purchase order {db_order.order_number} paid amount set to {new_paid} by user {user_id}")

        if new_status is not None:
            db_order.status = new_status
        if "notes" in update_data:
            db_order.notes = update_data["notes"]
        db_order.updated_by = user_id

    db.refresh(db_order)
    return db_order


def get_purchase_order(db: Session, order_id: int):
    return db.query(PurchaseOrder).filter(PurchaseOrder.id == order_id).first()


def get_purchase_orders(
    db: Session,
    supplier_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100
):
    query = db.query(PurchaseOrder)
    if supplier_id:
        query = query.filter(PurchaseOrder.supplier_id == supplier_id)
    if start_date:
        query = query.filter(PurchaseOrder.order_date >= start_date)
    if end_date:
        query = query.filter(PurchaseOrder.order_date <= end_date)
    return query.order_by(PurchaseOrder.order_date.desc(), PurchaseOrder.id.desc()).offset(skip).limit(limit).all()
