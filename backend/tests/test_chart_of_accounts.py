import pytest

from crud import chart_of_accounts
from crud.chart_of_accounts import (
    create_account,
    get_accounts,
    initialize_default_accounts,
    update_account,
    verify_posting_accounts,
)
from crud.journal_entry import post_journal_entry
from database import transaction
from crud.sequences import next_document_number
from exceptions import AccountHierarchyError, AccountInUseError, DuplicateCodeError, UnknownAccountError
from models.accounts import AccountType
from schemas.accounts import AccountCreate, AccountUpdate
from helpers import account, entry


def test_default_chart_is_seeded_once(db):
    assert account(db, "1100").name == "Cash and Bank"
    assert account(db, "1510").parent.code == "1500"
    assert initialize_default_accounts(db) == 0
    assert len(get_accounts(db, account_type=AccountType.REVENUE)) == 4


def test_posting_accounts_present_after_seed(db, monkeypatch):
    assert verify_posting_accounts(db) == []
    monkeypatch.setitem(chart_of_accounts.POSTING_ACCOUNT_CODES, "cash", "1999")
    assert verify_posting_accounts(db) == ["1999"]


def test_create_account_under_parent(db):
    created = create_account(db, AccountCreate(
        code="1110", name="Petty Cash", account_type=AccountType.ASSET, parent_id=account(db, "1100").id
    ), "accountant")
    assert created.parent.code == "1100"
    assert created.created_by == "accountant"


def test_duplicate_code_and_unknown_parent(db):
    with pytest.raises(DuplicateCodeError):
        create_account(db, AccountCreate(code="1100", name="Again", account_type=AccountType.ASSET))
    with pytest.raises(UnknownAccountError):
        create_account(db, AccountCreate(code="1999", name="Orphan", account_type=AccountType.ASSET, parent_id=9999))


def test_parent_cycles_are_rejected(db):
    assets = account(db, "1000")
    fixed = account(db, "1500")
    equipment = account(db, "1510")

    with pytest.raises(AccountHierarchyError):
        update_account(db, assets.id, AccountUpdate(parent_id=equipment.id))
    with pytest.raises(AccountHierarchyError):
        update_account(db, fixed.id, AccountUpdate(parent_id=fixed.id))

    moved = update_account(db, equipment.id, AccountUpdate(parent_id=assets.id))
    assert moved.parent_id == assets.id


def test_type_change_blocked_once_account_has_lines(db):
    rent = account(db, "5300")
    post_journal_entry(db, entry(db, "Rent", ("5300", "10.00", "0"), ("1100", "0", "10.00")))

    with pytest.raises(AccountInUseError):
        update_account(db, rent.id, AccountUpdate(account_type=AccountType.ASSET))
    with pytest.raises(AccountInUseError):
        update_account(db, rent.id, AccountUpdate(is_active=False))
    assert account(db, "5300").account_type == AccountType.EXPENSE


def test_posting_accounts_cannot_be_deactivated(db):
    with pytest.raises(AccountInUseError):
        update_account(db, account(db, "4000").id, AccountUpdate(is_active=False))


def test_unused_account_can_change(db):
    updated = update_account(db, account(db, "5600").id, AccountUpdate(name="Stationery", account_type=AccountType.ASSET))
    assert updated.name == "Stationery"
    assert updated.account_type == AccountType.ASSET


def test_document_numbers_roll_back_with_their_transaction(db):
    with pytest.raises(RuntimeError):
        with transaction(db):
            assert next_document_number(db, "SO") == "SO-000001"
            raise RuntimeError("boom")

    with transaction(db):
        assert next_document_number(db, "SO") == "SO-000001"
        assert next_document_number(db, "SO") == "SO-000002"
    with transaction(db):
        assert next_document_number(db, "XFER") == "XFER-000001"
