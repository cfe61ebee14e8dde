from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from exceptions import InvalidAmountError
from schemas.journal_entry import JournalEntryLineCreate
from crud.order_totals import line_total, order_totals
from utils.money import MAX_AMOUNT, as_money, format_money, quantize, to_decimal


def test_to_decimal_parses_strings_and_ints():
    assert to_decimal("10.5") == Decimal("10.50")
    assert to_decimal(7) == Decimal("7.00")
    assert to_decimal(" 1234.50 ") == Decimal("1234.50")
    assert to_decimal(None) == Decimal("0.00")


def test_to_decimal_accepts_trailing_zeros_beyond_cents():
    assert to_decimal("1.500") == Decimal("1.50")


@pytest.mark.parametrize("value,reason", [
    (10.5, "float"),
    (True, "float"),
    ("1.005", "decimal places"),
    ("abc", "not a number"),
    ("NaN", "finite"),
    ("-1.00", "negative"),
    ("1e30", "maximum"),
    ("10000000000000000.00", "maximum"),
])
def test_to_decimal_rejects(value, reason):
    with pytest.raises(InvalidAmountError) as exc_info:
        to_decimal(value)
    assert reason in exc_info.value.reason


def test_negative_allowed_when_asked():
    assert to_decimal("-12.30", allow_negative=True) == Decimal("-12.30")


def test_quantize_rounds_half_up():
    assert quantize(Decimal("2.345")) == Decimal("2.35")
    assert quantize(Decimal("2.344")) == Decimal("2.34")


def test_format_and_storage_helpers():
    assert format_money(Decimal("52")) == "52.00"
    assert format_money(None) == "0.00"
    assert as_money(52.0) == Decimal("52.00")
    assert as_money(None) == Decimal("0.00")


def test_schema_rejects_float_amounts():
    with pytest.raises(PydanticValidationError):
        JournalEntryLineCreate(account_id=1, debit=10.5)


def test_schema_serialises_money_as_string():
    line = JournalEntryLineCreate(account_id=1, debit="10.5")
    assert line.model_dump(mode="json")["debit"] == "10.50"


def test_largest_storable_amount_is_accepted():
    assert to_decimal("9999999999999999.99") == MAX_AMOUNT
    assert to_decimal("-9999999999999999.99", allow_negative=True) == -MAX_AMOUNT


def test_schema_rejects_oversized_amounts():
    with pytest.raises(PydanticValidationError):
        JournalEntryLineCreate(account_id=1, debit="1e30")


def test_computed_totals_beyond_column_size_are_refused():
    with pytest.raises(InvalidAmountError):
        line_total(10 ** 12, Decimal("100000.00"))
    with pytest.raises(InvalidAmountError):
        order_totals([MAX_AMOUNT], "0", "0.01")
