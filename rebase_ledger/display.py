"""
display.py - Human-Readable Amounts

Adapters between raw ledger integers and strings for people:

    format_units(10_300_000)      -> "10.300000"
    format_cents(1_545_000)       -> "$15,450.00"
    dollars_to_cents("$1,234.50") -> 123450

Nothing in the ledger core depends on this module. Parsing fails loudly on
malformed input; it never substitutes a default.
"""

from __future__ import annotations
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN
from typing import List, Union

from .core import SCALE, DECIMAL_PLACES, Address
from .rebasing import RebasingLedger
from .wrapper import WrapperLedger


def format_units(raw: int) -> str:
    """Format raw units as a fixed six-decimal string."""
    sign = "-" if raw < 0 else ""
    whole, frac = divmod(abs(raw), SCALE)
    return f"{sign}{whole}.{frac:0{DECIMAL_PLACES}d}"


def format_cents(cents: int) -> str:
    """Format cents as a dollar string with thousands separators."""
    sign = "-" if cents < 0 else ""
    dollars, rem = divmod(abs(cents), 100)
    return f"{sign}${dollars:,}.{rem:02d}"


def dollars_to_cents(dollars: Union[str, int, Decimal, float]) -> int:
    """
    Parse a dollar amount into integer cents.

    Strings may carry surrounding whitespace, a leading "$" and thousands
    separators. Sub-cent amounts are rounded half-even.

    Raises:
        ValueError: If the value cannot be parsed or is not finite
        TypeError: If the value has an unsupported type
    """
    if isinstance(dollars, bool):
        raise TypeError("Unsupported type for dollar amount: bool")
    if isinstance(dollars, str):
        text = dollars.strip()
        if text.startswith("$"):
            text = text[1:]
        text = text.replace(",", "")
        try:
            value = Decimal(text)
        except InvalidOperation:
            raise ValueError(f"Invalid dollar amount: {dollars!r}") from None
    elif isinstance(dollars, Decimal):
        value = dollars
    elif isinstance(dollars, int):
        value = Decimal(dollars)
    elif isinstance(dollars, float):
        value = Decimal(str(dollars))
    else:
        raise TypeError(f"Unsupported type for dollar amount: {type(dollars).__name__}")

    if not value.is_finite():
        raise ValueError(f"Dollar amount must be finite, got {dollars!r}")
    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_EVEN))


def value_cents(raw: int, share_price_cents: int) -> int:
    """Dollar value, in cents, of raw underlying units at a share price."""
    return raw * share_price_cents // SCALE


def wrapped_value_cents(wrapped_raw: int, share_price_cents: int, exchange_rate: int) -> int:
    """Dollar value, in cents, of raw wrapped units at a share price and rate."""
    return wrapped_raw * share_price_cents * exchange_rate // (SCALE * SCALE)


def balance_report(
    ledger: RebasingLedger,
    wrapper: WrapperLedger,
    user: Address,
    contract: Address,
) -> List[str]:
    """
    Describe a user's holdings, the custody pool and a contract's wrapped position.

    Returns one line per figure, for printing.
    """
    price = ledger.share_price_cents
    user_raw = ledger.balance_of(user)
    custody_raw = ledger.balance_of(wrapper.custody_address)
    contract_raw = wrapper.balance_of(contract)
    rate = wrapper.exchange_rate

    return [
        f"Share price: {format_cents(price)}",
        f"{ledger.symbol} balance of {user}: {format_units(user_raw)} tokens "
        f"({format_cents(value_cents(user_raw, price))})",
        f"{ledger.symbol} balance in wrapper: {format_units(custody_raw)} tokens "
        f"({format_cents(value_cents(custody_raw, price))})",
        f"{wrapper.symbol} balance of {contract}: {format_units(contract_raw)} tokens "
        f"({format_cents(wrapped_value_cents(contract_raw, price, rate))})",
        f"Exchange rate: {format_units(rate)}",
    ]
