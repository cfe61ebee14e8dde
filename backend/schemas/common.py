from decimal import Decimal
from typing import Annotated

from pydantic import BeforeValidator, PlainSerializer

from exceptions import InvalidAmountError
from utils.money import to_decimal, format_money


def _parse_money(value):
    try:
        return to_decimal(value)
    except InvalidAmountError as e:
        raise ValueError(e.reason)


# Non-negative amount with at most two decimal places; floats are refused.
# Serialised as a string such as "1234.50".
Money = Annotated[Decimal, BeforeValidator(_parse_money), PlainSerializer(format_money, return_type=str)]

# Read-side money: balances may be negative, always rendered with two places.
MoneyOut = Annotated[Decimal, PlainSerializer(format_money, return_type=str)]


def _parse_signed_money(value):
    try:
        return to_decimal(value, allow_negative=True)
    except InvalidAmountError as e:
        raise ValueError(e.reason)


# Signed amount, used only for administrative balance corrections.
SignedMoney = Annotated[Decimal, BeforeValidator(_parse_signed_money), PlainSerializer(format_money, return_type=str)]
