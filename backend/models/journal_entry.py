from sqlalchemy import Column, Integer, String, Date, Enum
from sqlalchemy.orm import relationship
from database import Base
import enum
from models.audit_mixin import TimestampMixin


class JournalEntryType(enum.Enum):
    JOURNAL = "JOURNAL"
    SALE = "SALE"
    PURCHASE = "PURCHASE"
    PAYMENT = "PAYMENT"
    ADJUSTMENT = "ADJUSTMENT"


class JournalEntry(Base, TimestampMixin):
    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True, index=True)
    entry_number = Column(String(20), nullable=False, unique=True, index=True)  # JE-000001
    date = Column(Date, nullable=False)
    description = Column(String, nullable=False)
    entry_type = Column(Enum(JournalEntryType), nullable=False, default=JournalEntryType.JOURNAL)
    reference_id = Column(String, nullable=True, index=True)  # originating document, e.g. SO-000001
    user_id = Column(String, nullable=True)

    # Relationships
    lines = relationship(
        "JournalEntryLine",
        back_populates="journal_entry",
        cascade="all, delete-orphan",
        order_by="JournalEntryLine.id",
    )
