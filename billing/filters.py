"""
Bill filtering and selection.

- Date and amount ranges for the bill list (inclusive; an absent bound is unconstrained).
- Serial-number range for bulk print, which auto-selects what it keeps.
- Selection toggling and preparation of the ordered bulk-print list.
"""
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Iterable, Sequence

from core.exceptions import EmptySelectionError, FilterRangeError
from core.schema import Bill

logger = logging.getLogger(__name__)

SERIAL_RANGE_INVERTED = "Start serial number must be less than or equal to end serial number"
NOTHING_SELECTED = "Please select at least one invoice to print"


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


def parse_instant(value: Any) -> datetime | None:
    """
    ISO date or datetime as an aware UTC instant.
    Date-only strings are midnight UTC; naive datetimes are taken as UTC.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _parse_bound(value: Any) -> float | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _parse_serial_bound(value: Any) -> int | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def serial_of(bill: Bill) -> int:
    """Serial used for range comparison; bills without one count as 0."""
    return bill.serial_number or 0


# ---------------------------------------------------------------------------
# Bill list filters
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BillFilters:
    """Filter form of the bill list. Strings as typed or parsed values."""

    start_date: Any = None
    end_date: Any = None
    min_amount: Any = None
    max_amount: Any = None


def filter_by_date_range(bills: Iterable[Bill], start_date: Any = None, end_date: Any = None) -> list[Bill]:
    start = parse_instant(start_date)
    end = parse_instant(end_date)
    if start is None and end is None:
        return list(bills)
    out: list[Bill] = []
    for bill in bills:
        when = parse_instant(bill.bill_date)
        if when is None:
            continue
        if start is not None and when < start:
            continue
        if end is not None and when > end:
            continue
        out.append(bill)
    return out


def filter_by_amount_range(bills: Iterable[Bill], min_amount: Any = None, max_amount: Any = None) -> list[Bill]:
    low = _parse_bound(min_amount)
    high = _parse_bound(max_amount)
    return [
        b
        for b in bills
        if (low is None or b.amount >= low) and (high is None or b.amount <= high)
    ]


def apply_bill_filters(bills: Iterable[Bill], filters: BillFilters) -> list[Bill]:
    """Date range then amount range; input order is preserved."""
    result = filter_by_date_range(bills, filters.start_date, filters.end_date)
    return filter_by_amount_range(result, filters.min_amount, filters.max_amount)


# ---------------------------------------------------------------------------
# Serial range + selection (bulk print)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SerialFilterResult:
    """Filtered bills and the selection that replaces the current one."""

    bills: list[Bill]
    selection: frozenset[str]
    cleared: bool = False


def filter_by_serial_range(bills: Sequence[Bill], start_serial: Any = None, end_serial: Any = None) -> SerialFilterResult:
    """
    Keep bills with start <= serial <= end and select all of them.
    No bounds: full collection, selection cleared. start > end: FilterRangeError.
    """
    start_raw = _parse_serial_bound(start_serial)
    end_raw = _parse_serial_bound(end_serial)
    if start_raw is None and end_raw is None:
        return SerialFilterResult(bills=list(bills), selection=frozenset(), cleared=True)

    start = start_raw if start_raw is not None else 0
    end = end_raw if end_raw is not None else sys.maxsize
    if start > end:
        raise FilterRangeError(SERIAL_RANGE_INVERTED)

    filtered = [b for b in bills if start <= serial_of(b) <= end]
    selection = frozenset(b.key for b in filtered if b.key)
    logger.info("Serial filter %s..%s selected %d bill(s)", start, end, len(filtered))
    return SerialFilterResult(bills=filtered, selection=selection)


def toggle_selection(selection: Iterable[str], bill_id: str) -> frozenset[str]:
    current = frozenset(selection)
    if bill_id in current:
        return current - {bill_id}
    return current | {bill_id}


def prepare_bulk_print(selection: Iterable[str], filtered: Sequence[Bill]) -> list[Bill]:
    """Selected bills in the filtered collection's order. EmptySelectionError if nothing is selected."""
    chosen = frozenset(selection)
    if not chosen:
        raise EmptySelectionError(NOTHING_SELECTED)
    return [b for b in filtered if b.key in chosen]


@dataclass
class BulkPrintSession:
    """View state of the bulk-print screen: all bills, the filtered view and the selection."""

    bills: list[Bill] = field(default_factory=list)
    filtered: list[Bill] = field(default_factory=list)
    selection: frozenset[str] = frozenset()

    @classmethod
    def from_bills(cls, bills: Sequence[Bill]) -> BulkPrintSession:
        return cls(bills=list(bills), filtered=list(bills))

    def reset_bills(self, bills: Sequence[Bill]) -> None:
        """New collection from the store; the filtered view follows it."""
        self.bills = list(bills)
        self.filtered = list(bills)

    def apply_serial_filter(self, start_serial: Any = None, end_serial: Any = None) -> SerialFilterResult:
        # raises before touching state when the range is inverted
        result = filter_by_serial_range(self.bills, start_serial, end_serial)
        self.filtered = result.bills
        self.selection = result.selection
        return result

    def toggle(self, bill_id: str) -> None:
        self.selection = toggle_selection(self.selection, bill_id)

    def clear_selection(self) -> None:
        self.selection = frozenset()

    def prepare(self) -> list[Bill]:
        return prepare_bulk_print(self.selection, self.filtered)
