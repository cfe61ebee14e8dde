from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
import json
import logging

from database import get_db
from models.accounts import AccountType
from schemas.accounts import (
    Account as AccountSchema,
    AccountCreate,
    AccountUpdate,
    ReconciliationRow,
    TrialBalance,
)
from crud import chart_of_accounts as crud_accounts
from crud import journal_entry as crud_journal
from crud.activity_log import record_activity
from utils import sqlalchemy_to_dict
from utils.auth_utils import get_current_user, get_user_identifier, require_role, ACCOUNTING_ROLES, ADMIN

router = APIRouter(prefix="/accounts", tags=["Chart of Accounts"])
logger = logging.getLogger("accounts")


@router.get("/", response_model=List[AccountSchema])
def read_accounts(
    account_type: Optional[AccountType] = None,
    include_inactive: bool = False,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    return crud_accounts.get_accounts(db, account_type=account_type, include_inactive=include_inactive, skip=skip, limit=limit)


@router.get("/trial-balance", response_model=TrialBalance)
def read_trial_balance(db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    return crud_journal.get_trial_balance(db)


@router.get("/reconciliation", response_model=List[ReconciliationRow])
def read_reconciliation(db: Session = Depends(get_db), user: dict = Depends(require_role(ACCOUNTING_ROLES))):
    """Accounts whose cached balance differs from their journal history."""
    return crud_journal.reconcile_account_balances(db, fix=False)


@router.post("/reconciliation/fix", response_model=List[ReconciliationRow])
def fix_reconciliation(db: Session = Depends(get_db), user: dict = Depends(require_role([ADMIN]))):
    """Rewrite every drifted account balance from journal history."""
    user_id = get_user_identifier(user)
    fixed = crud_journal.reconcile_account_balances(db, fix=True, user_id=user_id)
    if fixed:
        record_activity(db, user_id, "RECONCILE", "Account", None, f"{len(fixed)} balances rewritten")
    return fixed


@router.get("/{account_id}", response_model=AccountSchema)
def read_account(account_id: int, db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    db_account = crud_accounts.get_account(db, account_id)
    if db_account is None:
        raise HTTPException(status_code=404, detail="Account not found")
    return db_account


@router.post("/", response_model=AccountSchema, status_code=status.HTTP_201_CREATED)
def create_account(
    account: AccountCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ACCOUNTING_ROLES)),
):
    user_id = get_user_identifier(user)
    db_account = crud_accounts.create_account(db, account, user_id)
    record_activity(db, user_id, "CREATE", "Account", db_account.id, json.dumps(sqlalchemy_to_dict(db_account)))
    return db_account


@router.patch("/{account_id}", response_model=AccountSchema)
def update_account(
    account_id: int,
    account: AccountUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(ACCOUNTING_ROLES)),
):
    if crud_accounts.get_account(db, account_id) is None:
        raise HTTPException(status_code=404, detail="Account not found")
    user_id = get_user_identifier(user)
    db_account = crud_accounts.update_account(db, account_id, account, user_id)
    record_activity(db, user_id, "UPDATE", "Account", account_id, account.model_dump_json(exclude_unset=True))
    return db_account
