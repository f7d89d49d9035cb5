"""
Amount in words for invoices, Indian numbering (crore / lakh / thousand).

    convert_to_words(300)    -> "Three Hundred Rupees Only"
    convert_to_words(100.5)  -> "One Hundred Rupees and Fifty Paise Only"
    convert_to_words(100000) -> "One Lakh Rupees Only"
"""
from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

ONES = [
    "", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine", "Ten",
    "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen", "Sixteen", "Seventeen", "Eighteen", "Nineteen",
]
TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]

CRORE = 10_000_000
LAKH = 100_000
THOUSAND = 1_000
TWO_PLACES = Decimal("0.01")


def _below_hundred(n: int) -> str:
    if n < 20:
        return ONES[n]
    t, u = divmod(n, 10)
    return TENS[t] + (f" {ONES[u]}" if u else "")


def _below_thousand(n: int) -> str:
    if n < 100:
        return _below_hundred(n)
    h, r = divmod(n, 100)
    words = f"{ONES[h]} Hundred"
    if r:
        words += f" and {_below_hundred(r)}"
    return words


def integer_to_words(n: int) -> str:
    """Whole number in Indian grouping. Zero groups are skipped; returns '' for 0."""
    parts: list[str] = []
    crore, n = divmod(n, CRORE)
    lakh, n = divmod(n, LAKH)
    thousand, n = divmod(n, THOUSAND)

    # crore count can itself exceed 999 (e.g. "One Thousand Crore")
    if crore:
        parts.append(f"{integer_to_words(crore)} Crore")
    if lakh:
        parts.append(f"{_below_hundred(lakh)} Lakh")
    if thousand:
        parts.append(f"{_below_hundred(thousand)} Thousand")
    if n:
        parts.append(_below_thousand(n))
    return " ".join(parts).strip()


def _to_decimal(amount: Any) -> Decimal:
    if isinstance(amount, bool):
        raise ValueError(f"Not a currency amount: {amount!r}")
    try:
        value = Decimal(str(amount).strip())
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Not a currency amount: {amount!r}") from e
    if not value.is_finite():
        raise ValueError(f"Not a currency amount: {amount!r}")
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def convert_to_words(amount: Any) -> str:
    """
    Render a currency amount as invoice text.
    Rounded to two decimals; paise (0-99) appended as "and <words> Paise".
    Raises ValueError for non-numeric input.
    """
    value = _to_decimal(amount)
    if value < 0:
        return "Minus " + convert_to_words(-value)
    if value == 0:
        return "Zero"

    rupees = int(value)
    paise = int((value - rupees) * 100)

    words = integer_to_words(rupees) or "Zero"
    if paise > 0:
        return f"{words} Rupees and {_below_hundred(paise)} Paise Only"
    return f"{words} Rupees Only"
