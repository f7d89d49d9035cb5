"""Immutable state of the bills store."""

from __future__ import annotations

from dataclasses import dataclass, field

from core.models import ApiError, OpStatus
from core.schema import Bill
from store.actions import OPERATIONS


def _idle() -> dict[str, OpStatus]:
    return {op: OpStatus.IDLE for op in OPERATIONS.values()}


@dataclass(frozen=True)
class BillState:
    """Authoritative in-memory mirror of the backend plus UI selection. Replaced, never mutated."""

    bills: tuple[Bill, ...] = ()
    current_bill: Bill | None = None
    selected: frozenset[str] = frozenset()
    bulk_print_bills: tuple[Bill, ...] = ()
    bulk_print_loading: bool = False
    bulk_print_error: ApiError | None = None
    loading: bool = False
    error: ApiError | None = None
    status: dict[str, OpStatus] = field(default_factory=_idle)

    def find(self, bill_id: str) -> Bill | None:
        for bill in self.bills:
            if bill_id in (bill.mongo_id, bill.id):
                return bill
        return None
