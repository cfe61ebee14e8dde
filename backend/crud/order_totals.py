from decimal import Decimal
from typing import List, Tuple

from exceptions import ValidationError
from utils.money import check_bounds, money_sum, quantize, to_decimal


def line_total(quantity: int, unit_price: Decimal) -> Decimal:
    return quantize(unit_price * quantity)


def order_totals(line_totals: List[Decimal], discount, tax) -> Tuple[Decimal, Decimal, Decimal, Decimal]:
    """
    Return (total_amount, discount, tax, grand_total) for an order.

    grand_total = total_amount - discount + tax, and may not drop below zero.
    """
    discount = to_decimal(discount)
    tax = to_decimal(tax)
    total_amount = check_bounds(money_sum(line_totals))
    grand_total = total_amount - discount + tax
    if grand_total < 0:
        raise ValidationError(f"Discount {discount} exceeds order total {total_amount} plus tax {tax}")
    return total_amount, discount, tax, check_bounds(grand_total)
