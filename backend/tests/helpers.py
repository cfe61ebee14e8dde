from decimal import Decimal

from models.accounts import Account
from models.stock import Stock
from schemas.journal_entry import JournalEntryCreate, JournalEntryLineCreate


def account(db, code) -> Account:
    db.expire_all()
    return db.query(Account).filter(Account.code == code).one()


def balance(db, code) -> Decimal:
    return account(db, code).balance


def stock_quantity(db, product_id, warehouse_id) -> int:
    db.expire_all()
    row = db.query(Stock).filter(Stock.product_id == product_id, Stock.warehouse_id == warehouse_id).first()
    return row.quantity if row else 0


def entry(db, description, *lines, **kwargs) -> JournalEntryCreate:
    """Build an entry from (account code, debit, credit) tuples."""
    return JournalEntryCreate(
        description=description,
        lines=[
            JournalEntryLineCreate(account_id=account(db, code).id, debit=debit, credit=credit)
            for code, debit, credit in lines
        ],
        **kwargs
    )
