"""Phone number helpers for the bill form."""

from __future__ import annotations

import re

_NON_DIGITS = re.compile(r"\D")


def digits_only(phone: str) -> str:
    return _NON_DIGITS.sub("", phone or "")


def validate_phone_number(phone: str) -> bool:
    """True if the number has exactly 10 digits once separators are removed."""
    return len(digits_only(phone)) == 10


def format_phone_number(phone: str) -> str:
    """(XXX) XXX-XXXX for 10-digit numbers; anything else is returned unchanged."""
    d = digits_only(phone)
    if len(d) != 10:
        return phone
    return f"({d[:3]}) {d[3:6]}-{d[6:]}"
