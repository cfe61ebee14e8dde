from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
import json
import logging

from database import get_db
from schemas.products import Product as ProductSchema, ProductCreate, ProductUpdate
from crud import products as crud_products
from crud.activity_log import record_activity
from utils import sqlalchemy_to_dict
from utils.auth_utils import get_current_user, get_user_identifier, require_role, CATALOG_ROLES

router = APIRouter(prefix="/products", tags=["Products"])
logger = logging.getLogger("products")


@router.get("/", response_model=List[ProductSchema])
def read_products(
    include_inactive: bool = False,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    return crud_products.get_products(db, include_inactive=include_inactive, skip=skip, limit=limit)


@router.get("/{product_id}", response_model=ProductSchema)
def read_product(product_id: int, db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    db_product = crud_products.get_product(db, product_id)
    if db_product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return db_product


@router.post("/", response_model=ProductSchema, status_code=status.HTTP_201_CREATED)
def create_product(
    product: ProductCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(CATALOG_ROLES)),
):
    user_id = get_user_identifier(user)
    db_product = crud_products.create_product(db, product, user_id)
    record_activity(db, user_id, "CREATE", "Product", db_product.id, json.dumps(sqlalchemy_to_dict(db_product)))
    return db_product


@router.patch("/{product_id}", response_model=ProductSchema)
def update_product(
    product_id: int,
    product: ProductUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(CATALOG_ROLES)),
):
    if crud_products.get_product(db, product_id) is None:
        raise HTTPException(status_code=404, detail="Product not found")
    user_id = get_user_identifier(user)
    db_product = crud_products.update_product(db, product_id, product, user_id)
    record_activity(db, user_id, "UPDATE", "Product", product_id, product.model_dump_json(exclude_unset=True))
    return db_product
