import logging
from sqlalchemy.orm import Session

from database import transaction
from exceptions import DuplicateCodeError, UnknownProductError
from models.products import Product
from schemas.products import ProductCreate, ProductUpdate
from crud.categories import require_category

logger = logging.getLogger("products")


def get_product(db: Session, product_id: int):
    return db.query(Product).filter(Product.id == product_id).first()


def get_products(db: Session, include_inactive: bool = False, skip: int = 0, limit: int = 100):
    query = db.query(Product)
    if not include_inactive:
        query = query.filter(Product.is_active == True)
    return query.order_by(Product.sku).offset(skip).limit(limit).all()


def create_product(db: Session, product: ProductCreate, user_id: str = None) -> Product:
    with transaction(db):
        if db.query(Product.id).filter(Product.sku == product.sku).first():
            raise DuplicateCodeError("Product SKU", product.sku)
        require_category(db, product.category_id)
        db_product = Product(**product.model_dump(), created_by=user_id)
        db.add(db_product)
        db.flush()
    db.refresh(db_product)
    logger.info(f"Product {db_product.sku} created by user {user_id}")
    return db_product


def update_product(db: Session, product_id: int, product_update: ProductUpdate, user_id: str = None) -> Product:
    with transaction(db):
        db_product = get_product(db, product_id)
        if db_product is None:
            raise UnknownProductError(product_id)
        update_data = product_update.model_dump(exclude_unset=True)
        if "category_id" in update_data:
            require_category(db, update_data["category_id"])
        for key, value in update_data.items():
            if value is None and key in ("name", "cost_price", "selling_price", "reorder_level", "is_active"):
                continue
            setattr(db_product, key, value)
        db_product.updated_by = user_id
    db.refresh(db_product)
    logger.info(f"Product {db_product.sku} updated by user {user_id}")
    return db_product
