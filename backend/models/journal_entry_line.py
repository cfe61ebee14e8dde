from sqlalchemy import Column, Integer, Numeric, ForeignKey, CheckConstraint, String
from sqlalchemy.orm import relationship
from database import Base


class JournalEntryLine(Base):
    __tablename__ = "journal_entry_lines"

    id = Column(Integer, primary_key=True, index=True)
    journal_entry_id = Column(Integer, ForeignKey("journal_entries.id"), nullable=False, index=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    debit = Column(Numeric(18, 2), CheckConstraint('debit >= 0'), nullable=False, default=0)
    credit = Column(Numeric(18, 2), CheckConstraint('credit >= 0'), nullable=False, default=0)
    description = Column(String, nullable=True)

    # Relationships
    journal_entry = relationship("JournalEntry", back_populates="lines")
    account = relationship("Account", back_populates="lines")

    __table_args__ = (
        CheckConstraint(
            '(debit > 0 AND credit = 0) OR (debit = 0 AND credit > 0)',
            name='check_debit_or_credit_exclusive'
        ),
    )
