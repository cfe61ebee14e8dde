from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session
from typing import List
import logging

from database import get_db
from schemas.categories import Category as CategorySchema, CategoryCreate, CategoryUpdate
from crud import categories as crud_categories
from crud.activity_log import record_activity
from utils.auth_utils import get_current_user, get_user_identifier, require_role, CATALOG_ROLES

router = APIRouter(prefix="/categories", tags=["Categories"])
logger = logging.getLogger("categories")


@router.get("/", response_model=List[CategorySchema])
def read_categories(db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    return crud_categories.get_categories(db)


@router.post("/", response_model=CategorySchema, status_code=status.HTTP_201_CREATED)
def create_category(
    category: CategoryCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(CATALOG_ROLES)),
):
    user_id = get_user_identifier(user)
    db_category = crud_categories.create_category(db, category, user_id)
    record_activity(db, user_id, "CREATE", "Category", db_category.id, f"Created category: {db_category.name}")
    return db_category


@router.patch("/{category_id}", response_model=CategorySchema)
def update_category(
    category_id: int,
    category: CategoryUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(CATALOG_ROLES)),
):
    if crud_categories.get_category(db, category_id) is None:
        raise HTTPException(status_code=404, detail="Category not found")
    user_id = get_user_identifier(user)
    db_category = crud_categories.update_category(db, category_id, category, user_id)
    record_activity(db, user_id, "UPDATE", "Category", category_id, category.model_dump_json(exclude_unset=True))
    return db_category


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(CATALOG_ROLES)),
):
    db_category = crud_categories.get_category(db, category_id)
    if db_category is None:
        raise HTTPException(status_code=404, detail="Category not found")
    name = db_category.name
    user_id = get_user_identifier(user)
    crud_categories.delete_category(db, category_id, user_id)
    record_activity(db, user_id, "DELETE", "Category", category_id, f"Deleted category: {name}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
