"""
Client-side validation for bill drafts.
All applicable errors are collected in a fixed order; an empty list means the draft may be submitted.
"""
from __future__ import annotations

import logging
import math
import re
from typing import Any, Mapping

from core.exceptions import BillValidationError
from core.schema import BILL_STATUSES, CHARGE_TYPES

logger = logging.getLogger(__name__)

PHONE_10_DIGITS = re.compile(r"[0-9]{10}")

PATIENT_NAME_REQUIRED = "Patient name is required"
AMOUNT_NOT_POSITIVE = "Amount must be a positive number"
PHONE_NOT_10_DIGITS = "Phone number must be 10 digits"
INVALID_CHARGE_TYPE = f"Invalid charge type. Must be one of: {', '.join(CHARGE_TYPES)}"
INVALID_STATUS = f"Invalid status. Must be one of: {', '.join(BILL_STATUSES)}"


def parse_amount(value: Any) -> float | None:
    """Amount as a finite float, or None when missing / non-numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        amount = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            amount = float(text)
        except ValueError:
            return None
    if not math.isfinite(amount):
        return None
    return amount


def validate_bill(draft: Mapping[str, Any]) -> list[str]:
    """
    Validate a bill draft (camelCase keys as submitted by the form).

    - patientName present and not blank
    - amount numeric and > 0
    - phone, if present, exactly 10 digits
    - chargeType, if present, one of CHARGE_TYPES
    - status, if present, one of BILL_STATUSES
    """
    errors: list[str] = []

    name = draft.get("patientName")
    if name is None or not str(name).strip():
        errors.append(PATIENT_NAME_REQUIRED)

    amount = parse_amount(draft.get("amount"))
    if amount is None or amount <= 0:
        errors.append(AMOUNT_NOT_POSITIVE)

    phone = draft.get("phone")
    if phone and not PHONE_10_DIGITS.fullmatch(str(phone)):
        errors.append(PHONE_NOT_10_DIGITS)

    charge_type = draft.get("chargeType")
    if charge_type and charge_type not in CHARGE_TYPES:
        errors.append(INVALID_CHARGE_TYPE)

    status = draft.get("status")
    if status and status not in BILL_STATUSES:
        errors.append(INVALID_STATUS)

    if errors:
        logger.debug("Bill draft rejected: %s", errors)
    return errors


def ensure_valid(draft: Mapping[str, Any]) -> None:
    """Raise BillValidationError carrying every message if the draft is invalid."""
    errors = validate_bill(draft)
    if errors:
        raise BillValidationError(errors)
