import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from config import POSTING_ACCOUNT_CODES
from database import transaction
from exceptions import (
    AccountHierarchyError,
    AccountInUseError,
    DuplicateCodeError,
    PostingConfigurationError,
    UnknownAccountError,
)
from models.accounts import Account, AccountType
from models.journal_entry_line import JournalEntryLine
from schemas.accounts import AccountCreate, AccountUpdate

logger = logging.getLogger("chart_of_accounts")

# Default chart: (code, name, type, parent code)
DEFAULT_ACCOUNTS = [
    ("1000", "Assets", AccountType.ASSET, None),
    ("1100", "Cash and Bank", AccountType.ASSET, "1000"),
    ("1200", "Accounts Receivable", AccountType.ASSET, "1000"),
    ("1300", "Inventory", AccountType.ASSET, "1000"),
    ("1400", "Prepaid Expenses", AccountType.ASSET, "1000"),
    ("1500", "Fixed Assets", AccountType.ASSET, "1000"),
    ("1510", "Equipment", AccountType.ASSET, "1500"),
    ("1520", "Vehicles", AccountType.ASSET, "1500"),
    ("1530", "Buildings", AccountType.ASSET, "1500"),
    ("2000", "Liabilities", AccountType.LIABILITY, None),
    ("2100", "Accounts Payable", AccountType.LIABILITY, "2000"),
    ("2200", "Short-term Loans", AccountType.LIABILITY, "2000"),
    ("2300", "Long-term Loans", AccountType.LIABILITY, "2000"),
    ("2400", "Accrued Expenses", AccountType.LIABILITY, "2000"),
    ("3000", "Equity", AccountType.EQUITY, None),
    ("3100", "Owner's Equity", AccountType.EQUITY, "3000"),
    ("3200", "Retained Earnings", AccountType.EQUITY, "3000"),
    ("3300", "Current Year Earnings", AccountType.EQUITY, "3000"),
    ("4000", "Revenue", AccountType.REVENUE, None),
    ("4100", "Sales Revenue", AccountType.REVENUE, "4000"),
    ("4200", "Service Revenue", AccountType.REVENUE, "4000"),
    ("4900", "Other Income", AccountType.REVENUE, "4000"),
    ("5000", "Expenses", AccountType.EXPENSE, None),
    ("5100", "Cost of Goods Sold", AccountType.EXPENSE, "5000"),
    ("5200", "Salaries and Wages", AccountType.EXPENSE, "5000"),
    ("5300", "Rent Expense", AccountType.EXPENSE, "5000"),
    ("5400", "Utilities Expense", AccountType.EXPENSE, "5000"),
    ("5500", "Marketing and Advertising", AccountType.EXPENSE, "5000"),
    ("5600", "Office Supplies", AccountType.EXPENSE, "5000"),
    ("5700", "Insurance Expense", AccountType.EXPENSE, "5000"),
    ("5800", "Depreciation Expense", AccountType.EXPENSE, "5000"),
    ("5900", "Miscellaneous Expenses", AccountType.EXPENSE, "5000"),
]


def get_account(db: Session, account_id: int):
    return db.query(Account).filter(Account.id == account_id).first()


def get_account_by_code(db: Session, code: str):
    return db.query(Account).filter(Account.code == code).first()


def get_accounts(db: Session, account_type: AccountType = None, include_inactive: bool = False, skip: int = 0, limit: int = 100):
    query = db.query(Account)
    if not include_inactive:
        query = query.filter(Account.is_active == True)
    if account_type:
        query = query.filter(Account.account_type == account_type)
    return query.order_by(Account.code).offset(skip).limit(limit).all()


def _check_parent(db: Session, account_id: Optional[int], parent_id: int):
    """Raise if parent_id is missing, or if it sits below account_id in the tree."""
    parent = get_account(db, parent_id)
    if parent is None:
        raise UnknownAccountError(parent_id)
    if account_id is None:
        return parent

    seen = set()
    node = parent
    while node is not None and node.id not in seen:
        if node.id == account_id:
            raise AccountHierarchyError(account_id, parent_id)
        seen.add(node.id)
        node = node.parent
    return parent


def _in_use_reason(db: Session, account: Account) -> Optional[str]:
    if account.code in POSTING_ACCOUNT_CODES.values():
        return "it is configured as an automatic posting account"
    has_lines = db.query(JournalEntryLine.id).filter(JournalEntryLine.account_id == account.id).first()
    if has_lines:
        return "it has journal entry lines"
    return None


def create_account(db: Session, account: AccountCreate, user_id: str = None) -> Account:
    with transaction(db):
        if get_account_by_code(db, account.code):
            raise DuplicateCodeError("Account code", account.code)
        if account.parent_id is not None:
            _check_parent(db, None, account.parent_id)

        db_account = Account(**account.model_dump(), created_by=user_id)
        db.add(db_account)
        db.flush()

    db.refresh(db_account)
    logger.info(f"Account {db_account.code} ({db_account.name}) created by user {user_id}")
    return db_account


def update_account(db: Session, account_id: int, account_update: AccountUpdate, user_id: str = None) -> Account:
    """
    Update name, type, parent or active flag of an account.

    The type of an account drives the sign of every posting already made to
    it, so type changes and deactivation are refused once the account has
    journal lines or is one of the automatic posting accounts.
    """
    with transaction(db):
        db_account = db.query(Account).filter(Account.id == account_id).with_for_update().first()
        if db_account is None:
            raise UnknownAccountError(account_id)

        update_data = account_update.model_dump(exclude_unset=True)

        if "parent_id" in update_data and update_data["parent_id"] is not None:
            _check_parent(db, db_account.id, update_data["parent_id"])

        type_changes = (
            update_data.get("account_type") is not None
            and update_data["account_type"] != db_account.account_type
        )
        deactivates = update_data.get("is_active") is False and db_account.is_active
        if type_changes or deactivates:
            reason = _in_use_reason(db, db_account)
            if reason:
                logger.warning(f"Refused to change account {db_account.code}: {reason}")
                raise AccountInUseError(db_account.code, reason)

        for key, value in update_data.items():
            if value is None and key in ("name", "account_type", "is_active"):
                continue
            setattr(db_account, key, value)
        db_account.updated_by = user_id

    db.refresh(db_account)
    logger.info(f"Account {db_account.code} updated by user {user_id}: {update_data}")
    return db_account


def initialize_default_accounts(db: Session):
    """Seed the default chart of accounts. Existing codes are left untouched."""
    created = 0
    with transaction(db):
        for code, name, account_type, parent_code in DEFAULT_ACCOUNTS:
            if get_account_by_code(db, code):
                continue
            parent = get_account_by_code(db, parent_code) if parent_code else None
            db.add(Account(
                code=code,
                name=name,
                account_type=account_type,
                parent_id=parent.id if parent else None,
                balance=0,
                is_active=True,
            ))
            db.flush()
            created += 1
    if created:
        logger.info(f"Seeded {created} default accounts")
    return created


def verify_posting_accounts(db: Session) -> List[str]:
    """Return the configured posting codes that are missing from the chart."""
    missing = []
    for key, code in POSTING_ACCOUNT_CODES.items():
        if get_account_by_code(db, code) is None:
            missing.append(code)
    return missing


def get_posting_accounts(db: Session, *keys: str) -> Dict[str, Account]:
    """
    Resolve automatic-posting accounts by their config key ("cash", "sales", ...).

    Raises PostingConfigurationError naming every missing code; documents are
    never recorded without their journal entry.
    """
    accounts = {}
    missing = []
    for key in keys:
        code = POSTING_ACCOUNT_CODES[key]
        account = get_account_by_code(db, code)
        if account is None:
            missing.append(code)
        else:
            accounts[key] = account
    if missing:
        logger.error(f"Posting accounts missing from chart: {missing}")
        raise PostingConfigurationError(missing)
    return accounts
