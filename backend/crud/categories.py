import logging
from sqlalchemy import func
from sqlalchemy.orm import Session

from database import transaction
from exceptions import CategoryInUseError, DuplicateCodeError, UnknownCategoryError
from models.categories import Category
from models.products import Product
from schemas.categories import CategoryCreate, CategoryUpdate

logger = logging.getLogger("categories")


def _product_count(db: Session, category_id: int) -> int:
    return db.query(func.count(Product.id)).filter(Product.category_id == category_id).scalar() or 0


def get_category(db: Session, category_id: int):
    return db.query(Category).filter(Category.id == category_id).first()


def get_categories(db: Session):
    """All categories by name, each with the number of products assigned to it."""
    rows = db.query(Category, func.count(Product.id)).outerjoin(
        Product, Product.category_id == Category.id
    ).group_by(Category.id).order_by(Category.name).all()
    for category, count in rows:
        category.product_count = count
    return [category for category, _ in rows]


def require_category(db: Session, category_id):
    """Raise UnknownCategoryError unless category_id is None or names an existing category."""
    if category_id is not None and db.query(Category.id).filter(Category.id == category_id).first() is None:
        raise UnknownCategoryError(category_id)


def create_category(db: Session, category: CategoryCreate, user_id: str = None) -> Category:
    with transaction(db):
        if db.query(Category.id).filter(Category.name == category.name).first():
            raise DuplicateCodeError("Category", category.name)
        db_category = Category(**category.model_dump(), created_by=user_id)
        db.add(db_category)
        db.flush()
    db.refresh(db_category)
    logger.info(f"Category {db_category.name} created by user {user_id}")
    return db_category


def update_category(db: Session, category_id: int, category_update: CategoryUpdate, user_id: str = None) -> Category:
    with transaction(db):
        db_category = get_category(db, category_id)
        if db_category is None:
            raise UnknownCategoryError(category_id)
        update_data = category_update.model_dump(exclude_unset=True)
        new_name = update_data.get("name")
        if new_name is None:
            update_data.pop("name", None)
        elif new_name != db_category.name:
            if db.query(Category.id).filter(Category.name == new_name).first():
                raise DuplicateCodeError("Category", new_name)
        for key, value in update_data.items():
            setattr(db_category, key, value)
        db_category.updated_by = user_id
    db.refresh(db_category)
    db_category.product_count = _product_count(db, db_category.id)
    logger.info(f"Category {db_category.name} updated by user {user_id}")
    return db_category


def delete_category(db: Session, category_id: int, user_id: str = None):
    """Delete a category that no product refers to."""
    with transaction(db):
        db_category = get_category(db, category_id)
        if db_category is None:
            raise UnknownCategoryError(category_id)
        count = _product_count(db, category_id)
        if count:
            logger.warning(f"Category {db_category.name} not deleted: assigned to {count} product(s)")
            raise CategoryInUseError(db_category.name, count)
        name = db_category.name
        db.delete(db_category)
    logger.info(f"Category {name} deleted by user {user_id}")
