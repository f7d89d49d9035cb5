"""
Local JSON-file bills backend. Same contract as the REST API; useful offline and in tests.
Serial numbers are assigned here, inside the single write path, as max(existing) + 1.
"""

from __future__ import annotations

import json
import logging
import os
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from billing.validator import validate_bill
from core.exceptions import ApiRequestError, NotFoundError
from core.models import ApiError
from core.schema import (
    DEFAULT_STATUS,
    SERVER_DEFAULT_CHARGE_TYPE,
    Bill,
    bill_key,
)
from providers.base import BaseBillProvider

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class LocalBillProvider(BaseBillProvider):
    """Bills kept in one JSON array on disk. Calls may arrive from worker threads."""

    def __init__(self, path: str | Path = "bills.json") -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    # -- storage ----------------------------------------------------------

    def _read(self) -> list[dict[str, Any]]:
        if not self._path.exists():
            self._write([])
            return []
        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.error("Failed to read bills from %s: %s", self._path, e)
            raise ApiRequestError(ApiError(message=f"Failed to read bills store: {e}", status=500)) from e
        if not isinstance(data, list):
            raise ApiRequestError(ApiError(message=f"Invalid bills store: {self._path}", status=500))
        return data

    def _write(self, bills: list[dict[str, Any]]) -> None:
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(bills, f, indent=2, ensure_ascii=False)
            os.replace(tmp, self._path)
        except OSError as e:
            logger.error("Failed to write bills to %s: %s", self._path, e)
            raise ApiRequestError(ApiError(message=f"Failed to write bills store: {e}", status=500)) from e

    @staticmethod
    def _index_of(bills: list[dict[str, Any]], bill_id: str) -> int:
        for i, b in enumerate(bills):
            if bill_id in (b.get("_id"), b.get("id")):
                return i
        raise NotFoundError(ApiError(message="Bill not found", status=404))

    @staticmethod
    def _check(payload: dict[str, Any]) -> None:
        # "Other" is this backend's own default for a missing charge type
        draft = dict(payload)
        if draft.get("chargeType") == SERVER_DEFAULT_CHARGE_TYPE:
            draft.pop("chargeType")
        errors = validate_bill(draft)
        if errors:
            raise ApiRequestError(ApiError(message="Validation failed", errors=errors, status=400))

    # -- IBillApi ---------------------------------------------------------

    def list_bills(self) -> list[Bill]:
        with self._lock:
            return self.to_bills(self._read())

    def get_bill(self, bill_id: str) -> Bill:
        with self._lock:
            bills = self._read()
            return self.to_bill(bills[self._index_of(bills, bill_id)])

    def create_bill(self, payload: dict[str, Any]) -> Bill:
        self._check(payload)
        with self._lock:
            bills = self._read()
            record = dict(payload)
            now = _now()
            record["_id"] = uuid.uuid4().hex
            record["serialNumber"] = max((int(b.get("serialNumber") or 0) for b in bills), default=0) + 1
            record["amount"] = float(record["amount"])
            record["chargeType"] = record.get("chargeType") or SERVER_DEFAULT_CHARGE_TYPE
            record["status"] = record.get("status") or DEFAULT_STATUS
            record["billDate"] = record.get("billDate") or now
            record.setdefault("createdAt", now)
            record["updatedAt"] = now
            # nothing reaches disk unless it reads back as a Bill
            bill = self.to_bill(record)
            bills.append(record)
            self._write(bills)
        logger.info("Created bill %s (serial %s)", record["_id"], record["serialNumber"])
        return bill

    def update_bill(self, bill_id: str, payload: dict[str, Any]) -> Bill:
        self._check(payload)
        with self._lock:
            bills = self._read()
            i = self._index_of(bills, bill_id)
            old = bills[i]
            record = dict(payload)
            record["amount"] = float(record["amount"])
            # identity and bookkeeping survive a full replacement
            for key in ("_id", "serialNumber", "createdAt"):
                if key in old:
                    record[key] = old[key]
            record["updatedAt"] = _now()
            bill = self.to_bill(record)
            bills[i] = record
            self._write(bills)
        return bill

    def delete_bill(self, bill_id: str) -> None:
        with self._lock:
            bills = self._read()
            del bills[self._index_of(bills, bill_id)]
            self._write(bills)
        logger.info("Deleted bill %s", bill_id)

    def bulk_print(self, bill_ids: list[str]) -> list[Bill]:
        wanted = set(bill_ids)
        with self._lock:
            return self.to_bills([b for b in self._read() if bill_key(b) in wanted])
