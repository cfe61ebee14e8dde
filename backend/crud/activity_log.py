import logging
from sqlalchemy.orm import Session
from models.activity_log import ActivityLog

logger = logging.getLogger(__name__)


def record_activity(db: Session, user_id: str, action: str, entity: str, entity_id, details: str = None):
    """
    Write an activity log row after a business operation has committed.

    Best effort: a failure here is logged and rolled back on its own and never
    reaches the caller, whose work is already committed.
    """
    try:
        entry = ActivityLog(
            user_id=user_id,
            action=action,
            entity=entity,
            entity_id=str(entity_id) if entity_id is not None else None,
            details=details,
        )
        db.add(entry)
        db.commit()
        return entry
    except Exception:
        db.rollback()
        logger.exception(f"Failed to record activity {action} on {entity} {entity_id} by user {user_id}")
        return None


def get_activities(db: Session, entity: str = None, skip: int = 0, limit: int = 100):
    query = db.query(ActivityLog)
    if entity:
        query = query.filter(ActivityLog.entity == entity)
    return query.order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc()).offset(skip).limit(limit).all()
