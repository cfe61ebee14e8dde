from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

import crud.activity_log
from crud.activity_log import record_activity
from models.activity_log import ActivityLog
from utils.auth_utils import create_access_token, get_current_user
from helpers import account


def post_entry(client, db, debit="100.00", credit="100.00"):
    return client.post("/journal-entries/", json={
        "description": "Owner investment",
        "lines": [
            {"account_id": account(db, "1100").id, "debit": debit},
            {"account_id": account(db, "3100").id, "credit": credit},
        ],
    })


def test_post_journal_entry(client, db):
    response = post_entry(client, db)

    assert response.status_code == 201
    body = response.json()
    assert body["entry_number"] == "JE-000001"
    assert body["lines"][0]["debit"] == "100.00"
    assert body["lines"][1]["credit"] == "100.00"
    assert body["user_id"] == "tester"


def test_unbalanced_entry_maps_to_400(client, db):
    response = post_entry(client, db, credit="90.00")

    assert response.status_code == 400
    assert response.json()["code"] == "UNBALANCED_ENTRY"


def test_float_amounts_are_refused(client, db):
    response = post_entry(client, db, debit=100.5, credit="100.50")
    assert response.status_code == 422


def test_oversized_amounts_are_refused(client, db):
    response = post_entry(client, db, debit="1e30", credit="1e30")
    assert response.status_code == 422

    response = post_entry(client, db, debit="10000000000000000.00", credit="10000000000000000.00")
    assert response.status_code == 422


def test_unknown_account_in_body_is_400(client, db):
    response = client.post("/journal-entries/", json={
        "description": "Ghost",
        "lines": [
            {"account_id": 9999, "debit": "1.00"},
            {"account_id": account(db, "3100").id, "credit": "1.00"},
        ],
    })
    assert response.status_code == 400
    assert response.json()["code"] == "UNKNOWN_ACCOUNT"


def test_trial_balance_endpoint(client, db):
    post_entry(client, db)
    body = client.get("/accounts/trial-balance").json()

    assert body["balanced"] is True
    assert body["total_debit"] == "100.00"
    assert body["total_credit"] == "100.00"


def test_sale_with_insufficient_stock_is_409(client, db, customer, product_a, warehouse):
    response = client.post("/sales-orders/", json={
        "customer_id": customer.id,
        "items": [{"product_id": product_a.id, "quantity": 1}],
        "warehouse_id": warehouse.id,
    })

    assert response.status_code == 409
    assert response.json()["code"] == "INSUFFICIENT_STOCK"


def test_sale_and_activity_log(client, db, customer, product_a):
    response = client.post("/sales-orders/", json={
        "customer_id": customer.id,
        "items": [{"product_id": product_a.id, "quantity": 2}],
        "payment_method": "CREDIT",
    })

    assert response.status_code == 201
    body = response.json()
    assert body["grand_total"] == "20.00"
    assert body["balance"] == "20.00"
    assert body["status"] == "PENDING"

    logged = db.query(ActivityLog).filter(ActivityLog.entity == "SalesOrder").one()
    assert logged.entity_id == str(body["id"])
    assert logged.user_id == "tester"

    response = client.patch(f"/sales-orders/{body['id']}", json={"paid_amount": "20.00"})
    assert response.json()["status"] == "COMPLETED"


def test_missing_records_are_404(client):
    assert client.get("/sales-orders/999").status_code == 404
    assert client.get("/accounts/999").status_code == 404
    response = client.patch("/purchase-orders/999", json={"notes": "x"})
    assert response.status_code == 404
    assert response.json()["code"] == "ORDER_NOT_FOUND"


def test_receive_twice_is_409(client, db, supplier, product_a, warehouse):
    created = client.post("/purchase-orders/", json={
        "supplier_id": supplier.id,
        "items": [{"product_id": product_a.id, "quantity": 4}],
    }).json()

    first = client.post(f"/purchase-orders/{created['id']}/receive", json={"warehouse_id": warehouse.id})
    second = client.post(f"/purchase-orders/{created['id']}/receive", json={"warehouse_id": warehouse.id})

    assert first.status_code == 200
    assert first.json()["status"] == "RECEIVED"
    assert second.status_code == 409
    assert second.json()["code"] == "ALREADY_RECEIVED"

    levels = client.get("/stock/", params={"warehouse_id": warehouse.id}).json()
    assert levels[0]["quantity"] == 4


def test_stock_transfer_endpoint(client, product_a, warehouse, second_warehouse):
    client.post("/stock/movements", json={
        "product_id": product_a.id, "movement_type": "IN", "quantity": 5, "to_warehouse_id": warehouse.id
    })
    response = client.post("/stock/movements", json={
        "product_id": product_a.id,
        "movement_type": "TRANSFER",
        "quantity": 2,
        "from_warehouse_id": warehouse.id,
        "to_warehouse_id": second_warehouse.id,
    })

    assert response.status_code == 201
    movements = client.get("/stock/movements", params={"movement_type": "TRANSFER"}).json()
    assert len(movements) == 1
    low = client.get("/stock/low-stock").json()
    assert low[0]["total_quantity"] == 5


def test_admin_balance_override_is_logged(client, db, customer):
    response = client.patch(f"/customers/{customer.id}", json={"balance": "-15.00"})

    assert response.status_code == 200
    assert response.json()["balance"] == "-15.00"
    assert db.query(ActivityLog).filter(ActivityLog.action == "BALANCE_OVERRIDE").count() == 1


def test_role_is_enforced(client, db):
    from main import app

    app.dependency_overrides[get_current_user] = lambda: {"sub": "keeper", "role": "STOREKEEPER"}
    response = post_entry(client, db)
    assert response.status_code == 403


def test_real_token_is_validated(client):
    from main import app

    app.dependency_overrides.pop(get_current_user)
    assert client.get("/accounts/").status_code == 401

    token = create_access_token({"sub": "alice", "role": "ADMIN"})
    response = client.get("/accounts/", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert any(a["code"] == "1100" for a in response.json())

    bad = client.get("/accounts/", headers={"Authorization": "Bearer not-a-token"})
    assert bad.status_code == 401


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_activity_log_failure_never_propagates(db, monkeypatch):
    def broken(**kwargs):
        raise RuntimeError("audit store down")

    monkeypatch.setattr(crud.activity_log, "ActivityLog", broken)
    assert record_activity(db, "tester", "CREATE", "Thing", 1) is None
    assert account(db, "1100").balance == Decimal("0.00")


def test_category_endpoints(client, db):
    response = client.post("/categories/", json={"name": "Tools"})
    assert response.status_code == 201
    category_id = response.json()["id"]

    response = client.post("/products/", json={"sku": "HAM-1", "name": "Hammer", "category_id": category_id})
    assert response.status_code == 201
    product_id = response.json()["id"]

    listed = client.get("/categories/").json()
    assert [(c["name"], c["product_count"]) for c in listed] == [("Tools", 1)]

    response = client.delete(f"/categories/{category_id}")
    assert response.status_code == 409
    assert response.json()["code"] == "CATEGORY_IN_USE"

    client.patch(f"/products/{product_id}", json={"category_id": None})
    assert client.patch(f"/categories/{category_id}", json={"name": "Hand Tools"}).json()["name"] == "Hand Tools"
    assert client.delete(f"/categories/{category_id}").status_code == 204
    assert client.delete(f"/categories/{category_id}").status_code == 404


def test_product_with_unknown_category_is_400(client):
    response = client.post("/products/", json={"sku": "GHOST", "name": "Ghost", "category_id": 9999})
    assert response.status_code == 400
    assert response.json()["code"] == "UNKNOWN_CATEGORY"


def test_warehouse_update_and_deactivate(client, warehouse, product_a):
    response = client.patch(f"/warehouses/{warehouse.id}", json={"location": "Dock 2"})
    assert response.status_code == 200
    assert response.json()["location"] == "Dock 2"

    client.post("/stock/movements", json={
        "product_id": product_a.id, "movement_type": "IN", "quantity": 3, "to_warehouse_id": warehouse.id,
    })
    response = client.delete(f"/warehouses/{warehouse.id}")
    assert response.status_code == 409
    assert response.json()["code"] == "WAREHOUSE_IN_USE"

    client.post("/stock/movements", json={
        "product_id": product_a.id, "movement_type": "OUT", "quantity": 3, "from_warehouse_id": warehouse.id,
    })
    response = client.delete(f"/warehouses/{warehouse.id}")
    assert response.status_code == 200
    assert response.json()["is_active"] is False
    assert client.get("/warehouses/").json() == []
    assert client.patch("/warehouses/999", json={"name": "Nowhere"}).status_code == 404


def test_recent_activities_newest_first(client, db):
    client.post("/categories/", json={"name": "Tools"})
    client.post("/warehouses/", json={"name": "Overflow"})

    response = client.get("/activities/recent", params={"limit": 5})
    assert response.status_code == 200
    assert [(a["action"], a["entity"]) for a in response.json()] == [
        ("CREATE", "Warehouse"),
        ("CREATE", "Category"),
    ]

    only_categories = client.get("/activities/recent", params={"entity": "Category"}).json()
    assert [a["details"] for a in only_categories] == ["Created category: Tools"]
