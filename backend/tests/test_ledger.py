from decimal import Decimal

import pytest

from crud.chart_of_accounts import update_account
from crud.journal_entry import (
    balance_delta,
    compute_account_balance,
    get_journal_entries,
    get_trial_balance,
    post_journal_entry,
    reconcile_account_balances,
    write_journal_entry,
)
from database import run_in_transaction
from exceptions import (
    AccountInactiveError,
    UnbalancedEntryError,
    UnknownAccountError,
    ValidationError,
)
from models.accounts import AccountType
from models.journal_entry import JournalEntry, JournalEntryType
from models.journal_entry_line import JournalEntryLine
from schemas.accounts import AccountUpdate
from schemas.journal_entry import JournalEntryCreate, JournalEntryLineCreate
from helpers import account, balance, entry


@pytest.mark.parametrize("account_type,debit,credit,expected", [
    (AccountType.ASSET, "100.00", "0.00", "100.00"),
    (AccountType.ASSET, "0.00", "40.00", "-40.00"),
    (AccountType.EXPENSE, "25.00", "0.00", "25.00"),
    (AccountType.LIABILITY, "0.00", "100.00", "100.00"),
    (AccountType.LIABILITY, "30.00", "0.00", "-30.00"),
    (AccountType.EQUITY, "0.00", "10.00", "10.00"),
    (AccountType.REVENUE, "0.00", "52.00", "52.00"),
    (AccountType.REVENUE, "100.00", "0.00", "-100.00"),
])
def test_balance_delta_follows_account_polarity(account_type, debit, credit, expected):
    assert balance_delta(account_type, Decimal(debit), Decimal(credit)) == Decimal(expected)


def test_post_balanced_entry_moves_balances(db):
    posted = post_journal_entry(db, entry(
        db, "Owner investment",
        ("1100", "100.00", "0"),
        ("3100", "0", "100.00"),
    ), "tester")

    assert posted.entry_number == "JE-000001"
    assert posted.entry_type == JournalEntryType.JOURNAL
    assert len(posted.lines) == 2
    assert balance(db, "1100") == Decimal("100.00")
    assert balance(db, "3100") == Decimal("100.00")


def test_expense_and_revenue_polarity(db):
    post_journal_entry(db, entry(db, "Rent", ("5300", "50.00", "0"), ("1100", "0", "50.00")))
    post_journal_entry(db, entry(db, "Service", ("1100", "80.00", "0"), ("4200", "0", "80.00")))
    post_journal_entry(db, entry(db, "Loan", ("1100", "500.00", "0"), ("2200", "0", "500.00")))

    assert balance(db, "5300") == Decimal("50.00")
    assert balance(db, "4200") == Decimal("80.00")
    assert balance(db, "2200") == Decimal("500.00")
    assert balance(db, "1100") == Decimal("530.00")


def test_unbalanced_entry_is_rejected_without_side_effects(db):
    with pytest.raises(UnbalancedEntryError) as exc_info:
        post_journal_entry(db, entry(db, "Oops", ("1100", "100.00", "0"), ("3100", "0", "99.99")))

    assert exc_info.value.total_debit == Decimal("100.00")
    assert exc_info.value.total_credit == Decimal("99.99")
    assert db.query(JournalEntry).count() == 0
    assert db.query(JournalEntryLine).count() == 0
    assert balance(db, "1100") == Decimal("0.00")

    # The rejected attempt does not consume a number
    posted = post_journal_entry(db, entry(db, "Fixed", ("1100", "100.00", "0"), ("3100", "0", "100.00")))
    assert posted.entry_number == "JE-000001"


def test_line_with_both_sides_is_rejected(db):
    with pytest.raises(ValidationError):
        post_journal_entry(db, entry(
            db, "Both sides",
            ("1100", "10.00", "10.00"),
            ("3100", "0", "0.01"),
            ("5300", "0.01", "0"),
        ))


def test_line_with_no_amount_is_rejected(db):
    with pytest.raises(ValidationError):
        post_journal_entry(db, entry(
            db, "Empty line",
            ("1100", "10.00", "0"),
            ("3100", "0", "10.00"),
            ("5300", "0", "0"),
        ))


def test_unknown_account_rejects_whole_entry(db):
    bad = JournalEntryCreate(description="Ghost", lines=[
        JournalEntryLineCreate(account_id=account(db, "1100").id, debit="10.00"),
        JournalEntryLineCreate(account_id=99999, credit="10.00"),
    ])
    with pytest.raises(UnknownAccountError):
        post_journal_entry(db, bad)

    assert db.query(JournalEntry).count() == 0
    assert balance(db, "1100") == Decimal("0.00")


def test_inactive_account_cannot_be_posted_to(db):
    misc = account(db, "5900")
    update_account(db, misc.id, AccountUpdate(is_active=False))

    with pytest.raises(AccountInactiveError) as exc_info:
        post_journal_entry(db, entry(db, "Misc", ("5900", "5.00", "0"), ("1100", "0", "5.00")))
    assert exc_info.value.account_code == "5900"


def test_entry_numbers_are_sequential(db):
    numbers = [
        post_journal_entry(db, entry(db, f"Entry {i}", ("1100", "1.00", "0"), ("3100", "0", "1.00"))).entry_number
        for i in range(3)
    ]
    assert numbers == ["JE-000001", "JE-000002", "JE-000003"]


def test_many_line_entry_balances_exactly(db):
    # 0.10 + 0.20 summed as binary floats would not equal 0.30
    post_journal_entry(db, entry(
        db, "Split",
        ("1100", "0.10", "0"),
        ("1200", "0.20", "0"),
        ("3100", "0", "0.30"),
    ))
    assert balance(db, "3100") == Decimal("0.30")


def test_trial_balance_stays_balanced(db):
    post_journal_entry(db, entry(db, "Investment", ("1100", "1000.00", "0"), ("3100", "0", "1000.00")))
    post_journal_entry(db, entry(db, "Rent", ("5300", "1200.00", "0"), ("1100", "0", "1200.00")))
    post_journal_entry(db, entry(db, "Sale", ("1200", "300.00", "0"), ("4100", "0", "300.00")))

    report = get_trial_balance(db)

    assert report["balanced"] is True
    assert report["total_debit"] == report["total_credit"] == Decimal("1500.00")
    cash = next(row for row in report["accounts"] if row["code"] == "1100")
    # Overdrawn cash shows on the credit side
    assert cash["debit"] == Decimal("0.00")
    assert cash["credit"] == Decimal("200.00")


def test_reconciliation_detects_and_fixes_drift(db):
    post_journal_entry(db, entry(db, "Investment", ("1100", "250.00", "0"), ("3100", "0", "250.00")))
    assert reconcile_account_balances(db) == []

    cash = account(db, "1100")
    cash.balance = Decimal("999.00")
    db.commit()

    report = reconcile_account_balances(db)
    assert len(report) == 1
    assert report[0]["code"] == "1100"
    assert report[0]["computed_balance"] == Decimal("250.00")
    assert report[0]["difference"] == Decimal("749.00")
    assert balance(db, "1100") == Decimal("999.00")

    reconcile_account_balances(db, fix=True, user_id="auditor")
    assert balance(db, "1100") == Decimal("250.00")
    assert compute_account_balance(db, cash.id) == Decimal("250.00")
    assert reconcile_account_balances(db) == []


def test_journal_entries_filter_by_type(db):
    post_journal_entry(db, entry(db, "Manual", ("1100", "1.00", "0"), ("3100", "0", "1.00")))
    post_journal_entry(db, entry(
        db, "Adjust", ("5900", "2.00", "0"), ("1100", "0", "2.00"), entry_type=JournalEntryType.ADJUSTMENT
    ))

    adjustments = get_journal_entries(db, entry_type=JournalEntryType.ADJUSTMENT)
    assert [e.description for e in adjustments] == ["Adjust"]
    assert len(get_journal_entries(db)) == 2


def _write_pair(db, second_credit):
    write_journal_entry(db, entry(db, "First", ("1100", "20.00", "0"), ("3100", "0", "20.00")))
    return write_journal_entry(db, entry(db, "Second", ("1100", "5.00", "0"), ("3100", "0", second_credit)))


def test_run_in_transaction_commits_all_writes_together(db):
    second = run_in_transaction(db, _write_pair, "5.00")

    assert second.entry_number == "JE-000002"
    assert db.query(JournalEntry).count() == 2
    assert balance(db, "1100") == Decimal("25.00")


def test_run_in_transaction_rolls_back_earlier_writes(db):
    with pytest.raises(UnbalancedEntryError):
        run_in_transaction(db, _write_pair, "4.00")

    assert db.query(JournalEntry).count() == 0
    assert balance(db, "1100") == Decimal("0.00")
    posted = post_journal_entry(db, entry(db, "After", ("1100", "1.00", "0"), ("3100", "0", "1.00")))
    assert posted.entry_number == "JE-000001"
