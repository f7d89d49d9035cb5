"""
Bill drafts: the form state of "Add bill" and its conversion to the wire payload.
The serial shown on the form is a hint only; the backend assigns the real one.
"""
from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import Any, Mapping

from billing.validator import parse_amount
from core.schema import (
    DEFAULT_ADDRESS,
    DEFAULT_CHARGE_TYPE,
    DEFAULT_STATUS,
    SERVER_DEFAULT_CHARGE_TYPE,
)

DEFAULT_AMOUNT = "300"
OPTIONAL_TEXT_FIELDS = ("guardianName", "phone")
FORM_ONLY_FIELDS = ("serialNo",)


def next_serial_hint(existing_count: int) -> str:
    """count + 1, zero-padded to 3 digits."""
    return str(existing_count + 1).zfill(3)


def new_bill_draft(
    existing_count: int,
    *,
    address: str = DEFAULT_ADDRESS,
    today: date | None = None,
) -> dict[str, Any]:
    today = today or date.today()
    return {
        "serialNo": next_serial_hint(existing_count),
        "patientName": "",
        "guardianName": "",
        "phone": "",
        "address": address,
        "billDate": today.isoformat(),
        "chargeType": DEFAULT_CHARGE_TYPE,
        "status": DEFAULT_STATUS,
        "amount": DEFAULT_AMOUNT,
    }


def prepare_bill_payload(draft: Mapping[str, Any], now: datetime | None = None) -> dict[str, Any]:
    """
    Wire payload for POST /bills. Call after validation.
    amount -> float; billDate defaults to now; chargeType to "Other"; status to "Pending".
    """
    payload = {k: v for k, v in draft.items() if k not in FORM_ONLY_FIELDS}
    for key in OPTIONAL_TEXT_FIELDS:
        if not payload.get(key):
            payload.pop(key, None)
        else:
            payload[key] = str(payload[key]).strip()
    if isinstance(payload.get("patientName"), str):
        payload["patientName"] = payload["patientName"].strip()
    payload["amount"] = parse_amount(draft.get("amount"))
    payload["billDate"] = draft.get("billDate") or (now or datetime.now(timezone.utc)).isoformat()
    payload["chargeType"] = draft.get("chargeType") or SERVER_DEFAULT_CHARGE_TYPE
    payload["status"] = draft.get("status") or DEFAULT_STATUS
    if not payload.get("id"):
        payload["id"] = uuid.uuid4().hex
    return payload
