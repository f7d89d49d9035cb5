"""Dashboard counters over the bill collection."""

from __future__ import annotations

from typing import Iterable

from core.models import BillSummary
from core.schema import Bill

PAID = "Paid"


def summarize_bills(bills: Iterable[Bill]) -> BillSummary:
    summary = BillSummary()
    for bill in bills:
        summary.total_bills += 1
        if bill.status == PAID:
            summary.paid_count += 1
        summary.total_revenue += bill.amount or 0.0
    return summary
