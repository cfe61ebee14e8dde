import pytest

import crud.stock
from crud.stock import apply_movement, get_low_stock_products, get_movements, get_stock_levels
from exceptions import (
    InsufficientStockError,
    UnknownProductError,
    UnknownWarehouseError,
    ValidationError,
)
from models.stock_movements import MovementType, StockMovement
from schemas.stock import StockMovementCreate
from helpers import stock_quantity


def stock_in(db, product, warehouse, quantity):
    return apply_movement(db, StockMovementCreate(
        product_id=product.id, movement_type=MovementType.IN, quantity=quantity, to_warehouse_id=warehouse.id
    ), "storekeeper")


def test_in_creates_then_increments_stock(db, product_a, warehouse):
    stock_in(db, product_a, warehouse, 5)
    assert stock_quantity(db, product_a.id, warehouse.id) == 5

    record = stock_in(db, product_a, warehouse, 7)
    assert stock_quantity(db, product_a.id, warehouse.id) == 12
    assert record.movement_type == MovementType.IN
    assert record.to_warehouse_id == warehouse.id
    assert record.user_id == "storekeeper"


def test_out_refuses_to_go_negative(db, product_a, warehouse):
    stock_in(db, product_a, warehouse, 3)

    with pytest.raises(InsufficientStockError) as exc_info:
        apply_movement(db, StockMovementCreate(
            product_id=product_a.id, movement_type=MovementType.OUT, quantity=4, from_warehouse_id=warehouse.id
        ))

    assert exc_info.value.available == 3
    assert exc_info.value.requested == 4
    assert stock_quantity(db, product_a.id, warehouse.id) == 3
    assert db.query(StockMovement).count() == 1


def test_out_without_stock_row(db, product_a, warehouse):
    with pytest.raises(InsufficientStockError) as exc_info:
        apply_movement(db, StockMovementCreate(
            product_id=product_a.id, movement_type=MovementType.OUT, quantity=1, from_warehouse_id=warehouse.id
        ))
    assert exc_info.value.available == 0


def test_out_decrements(db, product_a, warehouse):
    stock_in(db, product_a, warehouse, 10)
    apply_movement(db, StockMovementCreate(
        product_id=product_a.id, movement_type=MovementType.OUT, quantity=10, from_warehouse_id=warehouse.id
    ))
    assert stock_quantity(db, product_a.id, warehouse.id) == 0


def test_transfer_moves_stock_and_logs_one_movement(db, product_a, warehouse, second_warehouse):
    stock_in(db, product_a, warehouse, 10)

    record = apply_movement(db, StockMovementCreate(
        product_id=product_a.id,
        movement_type=MovementType.TRANSFER,
        quantity=4,
        from_warehouse_id=warehouse.id,
        to_warehouse_id=second_warehouse.id,
    ))

    assert stock_quantity(db, product_a.id, warehouse.id) == 6
    assert stock_quantity(db, product_a.id, second_warehouse.id) == 4
    transfers = db.query(StockMovement).filter(StockMovement.movement_type == MovementType.TRANSFER).all()
    assert [t.id for t in transfers] == [record.id]
    assert record.from_warehouse_id == warehouse.id
    assert record.to_warehouse_id == second_warehouse.id


def test_transfer_with_insufficient_source_changes_nothing(db, product_a, warehouse, second_warehouse):
    stock_in(db, product_a, warehouse, 2)

    with pytest.raises(InsufficientStockError):
        apply_movement(db, StockMovementCreate(
            product_id=product_a.id,
            movement_type=MovementType.TRANSFER,
            quantity=3,
            from_warehouse_id=warehouse.id,
            to_warehouse_id=second_warehouse.id,
        ))

    assert stock_quantity(db, product_a.id, warehouse.id) == 2
    assert stock_quantity(db, product_a.id, second_warehouse.id) == 0


def test_transfer_to_same_warehouse_is_rejected(db, product_a, warehouse):
    stock_in(db, product_a, warehouse, 2)
    with pytest.raises(ValidationError):
        apply_movement(db, StockMovementCreate(
            product_id=product_a.id,
            movement_type=MovementType.TRANSFER,
            quantity=1,
            from_warehouse_id=warehouse.id,
            to_warehouse_id=warehouse.id,
        ))


def test_adjustment_sets_absolute_quantity(db, product_a, warehouse):
    stock_in(db, product_a, warehouse, 10)

    apply_movement(db, StockMovementCreate(
        product_id=product_a.id, movement_type=MovementType.ADJUSTMENT, quantity=3, to_warehouse_id=warehouse.id
    ))
    assert stock_quantity(db, product_a.id, warehouse.id) == 3

    apply_movement(db, StockMovementCreate(
        product_id=product_a.id, movement_type=MovementType.ADJUSTMENT, quantity=0, to_warehouse_id=warehouse.id
    ))
    assert stock_quantity(db, product_a.id, warehouse.id) == 0


@pytest.mark.parametrize("movement_type,fields", [
    (MovementType.IN, {}),
    (MovementType.OUT, {}),
    (MovementType.ADJUSTMENT, {}),
    (MovementType.TRANSFER, {"to_warehouse_id": None}),
])
def test_missing_warehouse_is_a_validation_error(db, product_a, movement_type, fields):
    with pytest.raises(ValidationError):
        apply_movement(db, StockMovementCreate(
            product_id=product_a.id, movement_type=movement_type, quantity=1, **fields
        ))


def test_zero_quantity_is_rejected_except_for_adjustment(db, product_a, warehouse):
    with pytest.raises(ValidationError):
        apply_movement(db, StockMovementCreate(
            product_id=product_a.id, movement_type=MovementType.IN, quantity=0, to_warehouse_id=warehouse.id
        ))


def test_unknown_product_and_warehouse(db, product_a, warehouse):
    with pytest.raises(UnknownProductError):
        apply_movement(db, StockMovementCreate(
            product_id=9999, movement_type=MovementType.IN, quantity=1, to_warehouse_id=warehouse.id
        ))
    with pytest.raises(UnknownWarehouseError):
        apply_movement(db, StockMovementCreate(
            product_id=product_a.id, movement_type=MovementType.IN, quantity=1, to_warehouse_id=9999
        ))


def test_low_stock_uses_total_across_warehouses(db, product_a, product_b, warehouse, second_warehouse):
    stock_in(db, product_a, warehouse, 4)
    stock_in(db, product_a, second_warehouse, 4)
    stock_in(db, product_b, warehouse, 50)

    low = get_low_stock_products(db)
    assert [(p["sku"], p["total_quantity"]) for p in low] == [("SKU-A", 8)]

    stock_in(db, product_a, warehouse, 3)
    assert get_low_stock_products(db) == []


def test_read_side_filters(db, product_a, product_b, warehouse, second_warehouse):
    stock_in(db, product_a, warehouse, 4)
    stock_in(db, product_b, second_warehouse, 6)

    assert [s.product_id for s in get_stock_levels(db, warehouse_id=second_warehouse.id)] == [product_b.id]
    assert len(get_movements(db, product_id=product_a.id)) == 1
    assert len(get_movements(db, movement_type=MovementType.OUT)) == 0


def test_transfer_of_entire_bin(db, product_a, warehouse, second_warehouse):
    stock_in(db, product_a, warehouse, 10)

    apply_movement(db, StockMovementCreate(
        product_id=product_a.id,
        movement_type=MovementType.TRANSFER,
        quantity=10,
        from_warehouse_id=warehouse.id,
        to_warehouse_id=second_warehouse.id,
    ))

    assert stock_quantity(db, product_a.id, warehouse.id) == 0
    assert stock_quantity(db, product_a.id, second_warehouse.id) == 10
    assert db.query(StockMovement).filter(StockMovement.movement_type == MovementType.TRANSFER).count() == 1


def record_stock_locks(monkeypatch):
    locks = []
    original = crud.stock._locked_stock

    def locked_stock(db, product_id, warehouse_id):
        locks.append((product_id, warehouse_id))
        return original(db, product_id, warehouse_id)

    monkeypatch.setattr(crud.stock, "_locked_stock", locked_stock)
    return locks


def test_transfer_locks_both_bins_in_warehouse_order(db, monkeypatch, product_a, warehouse, second_warehouse):
    stock_in(db, product_a, second_warehouse, 5)
    locks = record_stock_locks(monkeypatch)

    apply_movement(db, StockMovementCreate(
        product_id=product_a.id,
        movement_type=MovementType.TRANSFER,
        quantity=3,
        from_warehouse_id=second_warehouse.id,
        to_warehouse_id=warehouse.id,
    ))

    assert locks == [(product_a.id, warehouse.id), (product_a.id, second_warehouse.id)]
    assert stock_quantity(db, product_a.id, second_warehouse.id) == 2
    assert stock_quantity(db, product_a.id, warehouse.id) == 3
