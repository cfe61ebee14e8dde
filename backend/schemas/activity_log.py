from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime


class ActivityLog(BaseModel):
    id: int
    user_id: Optional[str] = None
    action: str
    entity: str
    entity_id: Optional[str] = None
    details: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
