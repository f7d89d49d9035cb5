"""Billing logic: amount in words, validation, filters, drafts, invoices, phone numbers, summary."""

from billing.amount_words import convert_to_words
from billing.validator import validate_bill, ensure_valid
from billing.filters import (
    BillFilters,
    BulkPrintSession,
    SerialFilterResult,
    apply_bill_filters,
    filter_by_serial_range,
    prepare_bulk_print,
    toggle_selection,
)
from billing.drafts import new_bill_draft, prepare_bill_payload
from billing.invoice import render_invoice, render_bulk_invoices
from billing.phone import format_phone_number, validate_phone_number
from billing.summary import summarize_bills

__all__ = [
    "convert_to_words",
    "validate_bill",
    "ensure_valid",
    "BillFilters",
    "BulkPrintSession",
    "SerialFilterResult",
    "apply_bill_filters",
    "filter_by_serial_range",
    "prepare_bulk_print",
    "toggle_selection",
    "new_bill_draft",
    "prepare_bill_payload",
    "render_invoice",
    "render_bulk_invoices",
    "format_phone_number",
    "validate_phone_number",
    "summarize_bills",
]
