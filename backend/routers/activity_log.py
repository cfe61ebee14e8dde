from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from database import get_db
from schemas.activity_log import ActivityLog as ActivityLogSchema
from crud import activity_log as crud_activity_log
from utils.auth_utils import get_current_user

router = APIRouter(prefix="/activities", tags=["Activity Log"])


@router.get("/recent", response_model=List[ActivityLogSchema])
def read_recent_activities(
    entity: Optional[str] = None,
    limit: int = Query(20, ge=1, le=200),
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    """Newest activity first, optionally only for one entity type such as "SalesOrder"."""
    return crud_activity_log.get_activities(db, entity=entity, limit=limit)
