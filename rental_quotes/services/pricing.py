# rental_quotes/services/pricing.py
"""
Quotation pricing.

Pure roll-up functions over items, sections and quotations. Everything is
``Decimal``; values are quantized to cents only when they are about to be
stored, so repeated recomputation never drifts.
"""
from datetime import date
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Iterable, NamedTuple, Optional

CENTS = Decimal("0.01")
HUNDRED = Decimal("100")
# largest value a Numeric(12, 2) column holds
MAX_MONEY = Decimal("9999999999.99")

QUOTATION_NUMBER_PREFIX = "QL"
SEQUENCE_WIDTH = 4


class QuotationTotals(NamedTuple):
    subtotal: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    total: Decimal


def to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    # str() keeps floats like 0.1 from dragging binary noise along
    return Decimal(str(value))


def quantize_money(value) -> Decimal:
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


# --------------------------
# Item / section / quotation roll-ups
# --------------------------
def compute_item_total(item) -> Decimal:
    """quantity * price_per_day * days; ``days`` counts as 1 when unset."""
    days = item.days if item.days is not None else 1
    quantity = item.quantity or 0
    with localcontext() as ctx:
        # room for Integer quantity and days times a Numeric(12, 2) price
        ctx.prec = 40
        return quantize_money(to_decimal(quantity) * to_decimal(item.price_per_day) * to_decimal(days))


def compute_section_subtotal(items: Iterable) -> Decimal:
    return quantize_money(sum((to_decimal(item.total) for item in items), Decimal("0")))


def compute_quotation_totals(items: Iterable, tax=0, discount=0) -> QuotationTotals:
    """
    Subtotal covers every item of the quotation, sectioned or not. Tax and
    discount are percentages of the subtotal.
    """
    subtotal = sum((to_decimal(item.total) for item in items), Decimal("0"))
    tax_amount = subtotal * to_decimal(tax) / HUNDRED
    discount_amount = subtotal * to_decimal(discount) / HUNDRED
    total = subtotal + tax_amount - discount_amount
    return QuotationTotals(
        subtotal=quantize_money(subtotal),
        tax_amount=quantize_money(tax_amount),
        discount_amount=quantize_money(discount_amount),
        total=quantize_money(total),
    )


def exceeds_money_limit(value) -> bool:
    return abs(to_decimal(value)) > MAX_MONEY


# --------------------------
# Quotation numbers
# --------------------------
def quotation_number_prefix(today: date) -> str:
    return f"{QUOTATION_NUMBER_PREFIX}{today.year:04d}{today.month:02d}"


def _sequence_of(number: str, prefix: str) -> Optional[int]:
    if not number or not number.startswith(prefix):
        return None
    suffix = number[len(prefix):]
    if not suffix.isdigit():
        return None
    return int(suffix)


def generate_quotation_number(existing_numbers: Iterable[str], today: date) -> str:
    """
    Next number for ``today``'s month: ``QL`` + YYYY + MM + a zero-padded
    sequence one above the highest sequence already used that month.
    """
    prefix = quotation_number_prefix(today)
    sequences = [s for s in (_sequence_of(n, prefix) for n in existing_numbers) if s is not None]
    next_sequence = max(sequences, default=0) + 1
    return f"{prefix}{next_sequence:0{SEQUENCE_WIDTH}d}"
