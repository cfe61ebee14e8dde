from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
import datetime as dt
from models.journal_entry import JournalEntryType
from schemas.common import Money, MoneyOut


class JournalEntryLineCreate(BaseModel):
    account_id: int
    debit: Money = Field(default=Decimal("0.00"))
    credit: Money = Field(default=Decimal("0.00"))
    description: Optional[str] = None


class JournalEntryCreate(BaseModel):
    date: Optional[dt.date] = None
    description: str = Field(..., min_length=1)
    entry_type: JournalEntryType = JournalEntryType.JOURNAL
    reference_id: Optional[str] = None
    lines: List[JournalEntryLineCreate] = Field(..., min_length=2)

    @field_validator('description')
    @classmethod
    def description_not_blank(cls, v):
        if not v.strip():
            raise ValueError('description must not be blank')
        return v.strip()


class JournalEntryLine(BaseModel):
    id: int
    account_id: int
    debit: MoneyOut
    credit: MoneyOut
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class JournalEntry(BaseModel):
    id: int
    entry_number: str
    date: dt.date
    description: str
    entry_type: JournalEntryType
    reference_id: Optional[str] = None
    user_id: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    lines: List[JournalEntryLine] = []

    model_config = ConfigDict(from_attributes=True)
