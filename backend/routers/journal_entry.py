from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
import logging

from database import get_db
from models.journal_entry import JournalEntryType
from schemas.journal_entry import JournalEntry, JournalEntryCreate
from crud import journal_entry as crud_journal
from crud.activity_log import record_activity
from utils.auth_utils import get_current_user, get_user_identifier, require_role, ACCOUNTING_ROLES

router = APIRouter(prefix="/journal-entries", tags=["Journal Entries"])
logger = logging.getLogger("journal_entry")


@router.post("/", response_model=JournalEntry, status_code=status.HTTP_201_CREATED)
def create_journal_entry(
    entry: JournalEntryCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ACCOUNTING_ROLES)),
):
    """Post a manual journal entry. Debits must equal credits."""
    user_id = get_user_identifier(user)
    db_entry = crud_journal.post_journal_entry(db, entry, user_id)
    record_activity(db, user_id, "CREATE", "JournalEntry", db_entry.id, f"Posted {db_entry.entry_number}")
    return db_entry


@router.get("/", response_model=List[JournalEntry])
def read_journal_entries(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    entry_type: Optional[JournalEntryType] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    return crud_journal.get_journal_entries(
        db, start_date=start_date, end_date=end_date, entry_type=entry_type, skip=skip, limit=limit
    )


@router.get("/{entry_id}", response_model=JournalEntry)
def read_journal_entry(entry_id: int, db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    db_entry = crud_journal.get_journal_entry(db, entry_id)
    if db_entry is None:
        raise HTTPException(status_code=404, detail="Journal entry not found")
    return db_entry
