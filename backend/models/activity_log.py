from sqlalchemy import Column, Integer, String, Text, DateTime
from database import Base
from models.audit_mixin import now_local


class ActivityLog(Base):
    __tablename__ = "activity_log"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=True)
    action = Column(String, nullable=False)  # e.g., 'CREATE', 'UPDATE', 'RECEIVE'
    entity = Column(String, nullable=False)
    entity_id = Column(String, nullable=True)
    details = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_local)
