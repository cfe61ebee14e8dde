import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from database import transaction
from exceptions import (
    AccountInactiveError,
    UnbalancedEntryError,
    UnknownAccountError,
    ValidationError,
)
from models.accounts import Account, AccountType, DEBIT_NORMAL_TYPES
from models.audit_mixin import now_local
from models.journal_entry import JournalEntry, JournalEntryType
from models.journal_entry_line import JournalEntryLine
from schemas.journal_entry import JournalEntryCreate
from crud.sequences import next_document_number, JOURNAL_PREFIX
from utils.money import ZERO, as_money, money_sum, to_decimal

logger = logging.getLogger("journal_entry")


def balance_delta(account_type: AccountType, debit: Decimal, credit: Decimal) -> Decimal:
    """Change in an account's balance caused by one journal line."""
    if account_type in DEBIT_NORMAL_TYPES:
        return debit - credit
    return credit - debit


def _validated_lines(entry: JournalEntryCreate):
    if len(entry.lines) < 2:
        raise ValidationError("A journal entry needs at least two lines")

    lines = []
    for line in entry.lines:
        debit = to_decimal(line.debit)
        credit = to_decimal(line.credit)
        if debit > 0 and credit > 0:
            raise ValidationError(f"Line for account {line.account_id} has both a debit and a credit")
        if debit == 0 and credit == 0:
            raise ValidationError(f"Line for account {line.account_id} has neither a debit nor a credit")
        lines.append((line, debit, credit))

    total_debit = money_sum(debit for _, debit, _ in lines)
    total_credit = money_sum(credit for _, _, credit in lines)
    if total_debit != total_credit:
        raise UnbalancedEntryError(total_debit, total_credit)
    return lines, total_debit


def write_journal_entry(db: Session, entry: JournalEntryCreate, user_id: str = None) -> JournalEntry:
    """
    Persist a balanced journal entry and move the affected account balances.

    Flushes but does not commit; the caller owns the transaction. Everything is
    validated before the first write, so a rejected entry leaves no trace once
    the caller rolls back.
    """
    lines, total = _validated_lines(entry)

    # Lock in id order so two postings touching the same accounts cannot deadlock
    accounts = {}
    for account_id in sorted({line.account_id for line, _, _ in lines}):
        account = db.query(Account).filter(Account.id == account_id).with_for_update().first()
        if account is None:
            raise UnknownAccountError(account_id)
        if not account.is_active:
            logger.warning(f"Refused posting to inactive account {account.code}")
            raise AccountInactiveError(account.code)
        accounts[account_id] = account

    entry_number = next_document_number(db, JOURNAL_PREFIX)
    db_entry = JournalEntry(
        entry_number=entry_number,
        date=entry.date or now_local().date(),
        description=entry.description,
        entry_type=entry.entry_type,
        reference_id=entry.reference_id,
        user_id=user_id,
        created_by=user_id,
    )
    db.add(db_entry)
    db.flush()

    for line, debit, credit in lines:
        account = accounts[line.account_id]
        db.add(JournalEntryLine(
            journal_entry_id=db_entry.id,
            account_id=account.id,
            debit=debit,
            credit=credit,
            description=line.description,
        ))
        account.balance = as_money(account.balance) + balance_delta(account.account_type, debit, credit)

    db.flush()
    logger.info(f"Journal entry {entry_number} posted for {total} ({entry.entry_type.value}) by user {user_id}")
    return db_entry


def post_journal_entry(db: Session, entry: JournalEntryCreate, user_id: str = None) -> JournalEntry:
    with transaction(db):
        db_entry = write_journal_entry(db, entry, user_id)
    db.refresh(db_entry)
    return db_entry


def get_journal_entry(db: Session, entry_id: int):
    return db.query(JournalEntry).filter(JournalEntry.id == entry_id).first()


def get_journal_entries(
    db: Session,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    entry_type: Optional[JournalEntryType] = None,
    skip: int = 0,
    limit: int = 100
):
    query = db.query(JournalEntry)

    if start_date:
        query = query.filter(JournalEntry.date >= start_date)
    if end_date:
        query = query.filter(JournalEntry.date <= end_date)
    if entry_type:
        query = query.filter(JournalEntry.entry_type == entry_type)

    return query.order_by(JournalEntry.date.desc(), JournalEntry.id.desc()).offset(skip).limit(limit).all()


def get_trial_balance(db: Session):
    """
    Every active account with its balance on its normal side.

    A balance that has gone against the account's polarity (e.g. an overdrawn
    bank account) is shown on the opposite side.
    """
    rows = []
    total_debit = ZERO
    total_credit = ZERO

    for account in db.query(Account).filter(Account.is_active == True).order_by(Account.code).all():
        balance = as_money(account.balance)
        if account.is_debit_normal == (balance >= 0):
            debit, credit = abs(balance), ZERO
        else:
            debit, credit = ZERO, abs(balance)
        total_debit += debit
        total_credit += credit
        rows.append({
            "account_id": account.id,
            "code": account.code,
            "name": account.name,
            "account_type": account.account_type,
            "debit": debit,
            "credit": credit,
        })

    return {
        "accounts": rows,
        "total_debit": total_debit,
        "total_credit": total_credit,
        "balanced": total_debit == total_credit,
    }


def compute_account_balance(db: Session, account_id: int) -> Decimal:
    """Rebuild an account balance from its journal lines."""
    account = db.query(Account).filter(Account.id == account_id).first()
    if account is None:
        raise UnknownAccountError(account_id)

    debit_total, credit_total = db.query(
        func.coalesce(func.sum(JournalEntryLine.debit), 0),
        func.coalesce(func.sum(JournalEntryLine.credit), 0),
    ).filter(JournalEntryLine.account_id == account_id).one()

    return balance_delta(account.account_type, as_money(debit_total), as_money(credit_total))


def reconcile_account_balances(db: Session, fix: bool = False, user_id: str = None):
    """
    Compare each cached account balance with the one implied by line history.

    Returns the accounts that differ. With fix=True the cached balances are
    rewritten from history in a single transaction.
    """
    mismatches = []
    with transaction(db):
        for account in db.query(Account).order_by(Account.code).all():
            computed = compute_account_balance(db, account.id)
            cached = as_money(account.balance)
            if computed == cached:
                continue
            mismatches.append({
                "account_id": account.id,
                "code": account.code,
                "cached_balance": cached,
                "computed_balance": computed,
                "difference": cached - computed,
            })
            if fix:
                logger.warning(f"Rewriting balance of account {account.code} from {cached} to {computed}")
                account.balance = computed
                account.updated_by = user_id

    if mismatches and not fix:
        logger.warning(f"{len(mismatches)} account balances differ from journal history")
    return mismatches
