from sqlalchemy import Column, DateTime, String
from datetime import datetime
import pytz

from config import TIMEZONE


def now_local():
    return datetime.now(pytz.timezone(TIMEZONE))


class TimestampMixin:
    """Mixin that provides created/updated timestamps and user info.

    Ledger facts (journal entries, stock movements) only use created_at/created_by;
    the updated_* columns stay empty for them because they are never modified.
    """
    # DateTime(timezone=True) ensures the timezone info is persisted in the database.
    created_at = Column(DateTime(timezone=True), default=now_local)
    updated_at = Column(DateTime(timezone=True), onupdate=now_local)
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)
