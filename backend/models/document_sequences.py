from sqlalchemy import Column, Integer, String
from database import Base


class DocumentSequence(Base):
    """Last number handed out per document prefix (JE, SO, PO)."""
    __tablename__ = "document_sequences"

    prefix = Column(String(10), primary_key=True)
    last_value = Column(Integer, nullable=False, default=0)
