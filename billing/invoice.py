"""
Plain-text invoice rendering for single and bulk printing.
Two invoices per page in bulk output; pages are separated by a form feed.
"""
from __future__ import annotations

from typing import Any, Sequence

from billing.amount_words import convert_to_words
from billing.filters import parse_instant
from core.schema import Bill

HSN_CODE = "9993"
DEFAULT_DESCRIPTION = "Medical Services"
INVOICES_PER_PAGE = 2
PAGE_BREAK = "\f"
WIDTH = 64
RULE = "-" * WIDTH


def format_serial(bill: Bill) -> str:
    if not bill.serial_number:
        return "N/A"
    return str(bill.serial_number).zfill(3)


def format_amount(amount: float) -> str:
    return f"₹{amount:.2f}"


def format_bill_date(value: Any) -> str:
    """d/m/yyyy (Indian locale short date); unparseable input is shown as-is."""
    when = parse_instant(value)
    if when is None:
        return str(value or "")
    return f"{when.day}/{when.month}/{when.year}"


def _row(description: str, code: str, amount: str) -> str:
    return f"{description:<32}{code:^12}{amount:>20}"


def render_invoice(bill: Bill, title: str = "INVOICE") -> str:
    left = f"S.No. {format_serial(bill)}"
    right = f"Bill Date: {format_bill_date(bill.bill_date)}"
    lines = [
        title.center(WIDTH).rstrip(),
        f"{left}{right:>{WIDTH - len(left)}}",
        f"Patient Name: {bill.patient_name}",
    ]
    if bill.guardian_name:
        lines.append(f"Father/Husband Name: {bill.guardian_name}")
    if bill.address:
        lines.append(f"Address: {bill.address}")
    lines += [
        RULE,
        _row("Description", "HSN Code", "Amount (₹)"),
        RULE,
        _row(bill.charge_type or DEFAULT_DESCRIPTION, HSN_CODE, format_amount(bill.amount)),
        _row("Total", "-", format_amount(bill.amount)),
        RULE,
        f"Amount in words: {convert_to_words(bill.amount)}",
    ]
    return "\n".join(lines) + "\n"


def render_bulk_invoices(bills: Sequence[Bill], per_page: int = INVOICES_PER_PAGE) -> str:
    pages: list[str] = []
    for i in range(0, len(bills), per_page):
        chunk = bills[i : i + per_page]
        pages.append("\n\n".join(render_invoice(b) for b in chunk))
    return PAGE_BREAK.join(pages)
