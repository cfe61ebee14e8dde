"""
Stock engine.

Every change to an on-hand quantity goes through write_movement(), which locks
the affected Stock rows, refuses to take a bin below zero and appends exactly
one StockMovement row. write_* functions flush only; apply_movement() and
receive_purchase_order() are the transactional entry points.

Row locks are always taken in this order, so concurrent postings queue behind
each other instead of deadlocking:

    1. document sequence row of the order being created (SO, PO)
    2. the sales or purchase order row
    3. Stock rows, by product id and then warehouse id
    4. accounts, by id
    5. the JE sequence row
    6. the customer or supplier row

Sales and purchases therefore move stock before posting their journal entry.
"""
import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from database import transaction
from exceptions import (
    AlreadyReceivedError,
    InsufficientStockError,
    OrderNotFoundError,
    UnknownProductError,
    UnknownWarehouseError,
    ValidationError,
    WarehouseInactiveError,
)
from models.audit_mixin import now_local
from models.products import Product
from models.purchase_orders import PurchaseOrder, PurchaseOrderStatus
from models.stock import Stock
from models.stock_movements import MovementType, StockMovement
from models.warehouses import Warehouse
from schemas.stock import StockMovementCreate

logger = logging.getLogger("stock")


def _locked_stock(db: Session, product_id: int, warehouse_id: int) -> Optional[Stock]:
    return db.query(Stock).filter(
        Stock.product_id == product_id,
        Stock.warehouse_id == warehouse_id
    ).with_for_update().first()


def _require_warehouse(db: Session, warehouse_id: Optional[int], role: str, movement_type: MovementType) -> int:
    if warehouse_id is None:
        raise ValidationError(f"{movement_type.value} movement requires {role}")
    warehouse = db.query(Warehouse).filter(Warehouse.id == warehouse_id).first()
    if warehouse is None:
        raise UnknownWarehouseError(warehouse_id)
    if not warehouse.is_active:
        raise WarehouseInactiveError(warehouse_id)
    return warehouse_id


def _add(db: Session, product_id: int, warehouse_id: int, quantity: int) -> Stock:
    stock = _locked_stock(db, product_id, warehouse_id)
    if stock:
        stock.quantity += quantity
    else:
        stock = Stock(product_id=product_id, warehouse_id=warehouse_id, quantity=quantity)
        db.add(stock)
    return stock


def _check_available(stock: Optional[Stock], product_id: int, warehouse_id: int, quantity: int):
    available = stock.quantity if stock else 0
    if available < quantity:
        logger.warning(
            f"Insufficient stock for product {product_id} in warehouse {warehouse_id}: "
            f"available {available}, requested {quantity}"
        )
        raise InsufficientStockError(product_id, warehouse_id, available, quantity)


def write_movement(db: Session, movement: StockMovementCreate, user_id: str = None) -> StockMovement:
    quantity = movement.quantity
    movement_type = movement.movement_type

    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError("Quantity must be a whole number")
    if movement_type == MovementType.ADJUSTMENT:
        if quantity < 0:
            raise ValidationError("Adjusted quantity must not be negative")
    elif quantity <= 0:
        raise ValidationError("Quantity must be greater than zero")

    product = db.query(Product).filter(Product.id == movement.product_id).first()
    if product is None:
        raise UnknownProductError(movement.product_id)

    from_warehouse_id = None
    to_warehouse_id = None

    if movement_type == MovementType.IN:
        to_warehouse_id = _require_warehouse(db, movement.to_warehouse_id, "to_warehouse_id", movement_type)
        _add(db, product.id, to_warehouse_id, quantity)

    elif movement_type == MovementType.OUT:
        from_warehouse_id = _require_warehouse(db, movement.from_warehouse_id, "from_warehouse_id", movement_type)
        stock = _locked_stock(db, product.id, from_warehouse_id)
        _check_available(stock, product.id, from_warehouse_id, quantity)
        stock.quantity -= quantity

    elif movement_type == MovementType.TRANSFER:
        from_warehouse_id = _require_warehouse(db, movement.from_warehouse_id, "from_warehouse_id", movement_type)
        to_warehouse_id = _require_warehouse(db, movement.to_warehouse_id, "to_warehouse_id", movement_type)
        if from_warehouse_id == to_warehouse_id:
            raise ValidationError("Transfer source and destination must be different warehouses")
        locked = {
            warehouse_id: _locked_stock(db, product.id, warehouse_id)
            for warehouse_id in sorted((from_warehouse_id, to_warehouse_id))
        }
        source = locked[from_warehouse_id]
        _check_available(source, product.id, from_warehouse_id, quantity)
        source.quantity -= quantity
        destination = locked[to_warehouse_id]
        if destination:
            destination.quantity += quantity
        else:
            db.add(Stock(product_id=product.id, warehouse_id=to_warehouse_id, quantity=quantity))

    elif movement_type == MovementType.ADJUSTMENT:
        to_warehouse_id = _require_warehouse(db, movement.to_warehouse_id, "to_warehouse_id", movement_type)
        stock = _locked_stock(db, product.id, to_warehouse_id)
        if stock:
            logger.info(
                f"Adjusting product {product.id} in warehouse {to_warehouse_id} "
                f"from {stock.quantity} to {quantity}"
            )
            stock.quantity = quantity
        else:
            db.add(Stock(product_id=product.id, warehouse_id=to_warehouse_id, quantity=quantity))

    record = StockMovement(
        product_id=product.id,
        from_warehouse_id=from_warehouse_id,
        to_warehouse_id=to_warehouse_id,
        movement_type=movement_type,
        quantity=quantity,
        notes=movement.notes,
        user_id=user_id,
    )
    db.add(record)
    db.flush()
    logger.info(
        f"Stock movement {movement_type.value} of {quantity} x product {product.id} "
        f"(from {from_warehouse_id} to {to_warehouse_id}) by user {user_id}"
    )
    return record


def apply_movement(db: Session, movement: StockMovementCreate, user_id: str = None) -> StockMovement:
    with transaction(db):
        record = write_movement(db, movement, user_id)
    db.refresh(record)
    return record


def write_receipt(db: Session, order_id: int, warehouse_id: int, user_id: str = None) -> PurchaseOrder:
    """Book every item of a purchase order into a warehouse. Flushes only."""
    order = db.query(PurchaseOrder).filter(PurchaseOrder.id == order_id).with_for_update().first()
    if order is None:
        raise OrderNotFoundError("Purchase order", order_id)
    if order.status == PurchaseOrderStatus.RECEIVED:
        logger.warning(f"Purchase order {order.order_number} already received")
        raise AlreadyReceivedError(order.order_number)
    if db.query(Warehouse.id).filter(Warehouse.id == warehouse_id).first() is None:
        raise UnknownWarehouseError(warehouse_id)

    for item in sorted(order.items, key=lambda item: item.product_id):
        write_movement(db, StockMovementCreate(
            product_id=item.product_id,
            movement_type=MovementType.IN,
            quantity=item.quantity,
            to_warehouse_id=warehouse_id,
            notes=f"Purchase order: {order.order_number}",
        ), user_id)

    order.status = PurchaseOrderStatus.RECEIVED
    order.received_date = now_local()
    order.received_warehouse_id = warehouse_id
    order.updated_by = user_id
    db.flush()
    logger.info(f"Purchase order {order.order_number} received into warehouse {warehouse_id} by user {user_id}")
    return order


def receive_purchase_order(db: Session, order_id: int, warehouse_id: int, user_id: str = None) -> PurchaseOrder:
    with transaction(db):
        order = write_receipt(db, order_id, warehouse_id, user_id)
    db.refresh(order)
    return order


def get_stock_levels(db: Session, warehouse_id: Optional[int] = None, product_id: Optional[int] = None):
    query = db.query(Stock)
    if warehouse_id:
        query = query.filter(Stock.warehouse_id == warehouse_id)
    if product_id:
        query = query.filter(Stock.product_id == product_id)
    return query.order_by(Stock.product_id, Stock.warehouse_id).all()


def get_movements(
    db: Session,
    product_id: Optional[int] = None,
    movement_type: Optional[MovementType] = None,
    skip: int = 0,
    limit: int = 100
):
    query = db.query(StockMovement)
    if product_id:
        query = query.filter(StockMovement.product_id == product_id)
    if movement_type:
        query = query.filter(StockMovement.movement_type == movement_type)
    return query.order_by(StockMovement.created_at.desc(), StockMovement.id.desc()).offset(skip).limit(limit).all()


def get_low_stock_products(db: Session):
    """Active products whose stock across all warehouses is at or below their reorder level."""
    total_quantity = func.coalesce(func.sum(Stock.quantity), 0)
    rows = db.query(Product, total_quantity).outerjoin(
        Stock, Stock.product_id == Product.id
    ).filter(
        Product.is_active == True
    ).group_by(Product.id).order_by(Product.sku).all()

    return [
        {
            "product_id": product.id,
            "sku": product.sku,
            "name": product.name,
            "total_quantity": int(total),
            "reorder_level": product.reorder_level,
        }
        for product, total in rows
        if int(total) <= product.reorder_level
    ]
