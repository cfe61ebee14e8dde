from pydantic import BaseModel, ConfigDict
from typing import Optional, List
from datetime import datetime
from models.accounts import AccountType
from schemas.common import MoneyOut


class AccountBase(BaseModel):
    code: str
    name: str
    account_type: AccountType
    description: Optional[str] = None
    parent_id: Optional[int] = None


class AccountCreate(AccountBase):
    pass


class AccountUpdate(BaseModel):
    name: Optional[str] = None
    account_type: Optional[AccountType] = None
    description: Optional[str] = None
    parent_id: Optional[int] = None
    is_active: Optional[bool] = None


class Account(AccountBase):
    id: int
    balance: MoneyOut
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TrialBalanceRow(BaseModel):
    account_id: int
    code: str
    name: str
    account_type: AccountType
    debit: MoneyOut
    credit: MoneyOut


class TrialBalance(BaseModel):
    accounts: List[TrialBalanceRow]
    total_debit: MoneyOut
    total_credit: MoneyOut
    balanced: bool


class ReconciliationRow(BaseModel):
    account_id: int
    code: str
    cached_balance: MoneyOut
    computed_balance: MoneyOut
    difference: MoneyOut
