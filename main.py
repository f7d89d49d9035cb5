"""
Clinic billing command-line entry point.

Usage:
  python main.py [--config FILE] [--backend rest|local] [--api-url URL] <command> ...

Commands:
  login / register / logout     session against /auth (token kept in the session file)
  list                          bills, optionally filtered by --start-date/--end-date/--min-amount/--max-amount
  add                           create a bill (validated locally before anything is sent)
  show ID | print ID            bill detail / printable invoice
  bulk-print                    invoices for a serial range (--start/--end) or explicit --ids, two per page
  delete ID                     remove a bill
  summary                       dashboard counters (total bills, paid, revenue)
"""
from __future__ import annotations

import argparse
import asyncio
import getpass
import sys
from pathlib import Path
from typing import Any, Sequence

from billing.drafts import new_bill_draft
from billing.filters import BillFilters, BulkPrintSession
from billing.invoice import format_amount, format_bill_date, format_serial, render_bulk_invoices, render_invoice
from billing.phone import format_phone_number
from billing.summary import summarize_bills
from core.exceptions import BillingError
from core.interfaces import IBillApi
from core.models import Action
from core.schema import BILL_STATUSES, CHARGE_TYPES, Bill
from providers.factory import create_auth_service, create_bill_api, create_token_storage
from store import BillStore, add_bill, delete_bill, fetch_bill_by_id, fetch_bills, fetch_bulk_print_bills
from utils.config import AppConfig, load_config
from utils.logger import setup_logging


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------


def _fail(action: Action) -> int:
    err = action.error
    message = err.message if err else "Failed to load"
    print(f"Error: {message}", file=sys.stderr)
    for e in (err.errors if err else []):
        print(f"  - {e}", file=sys.stderr)
    return 1


def _emit(text: str, output: str | None) -> None:
    if output:
        Path(output).write_text(text, encoding="utf-8")
        print(f"Wrote {output}")
    else:
        sys.stdout.write(text)


def _bill_table(bills: Sequence[Bill]) -> str:
    lines = [f"{'S.No.':<6}{'Patient':<24}{'Date':<12}{'Type':<14}{'Mobile':<16}{'Status':<9}{'Amount':>12}  ID"]
    for b in bills:
        lines.append(
            f"{format_serial(b):<6}{b.patient_name[:23]:<24}{format_bill_date(b.bill_date):<12}"
            f"{(b.charge_type or '')[:13]:<14}{format_phone_number(b.phone or ''):<16}"
            f"{b.status:<9}{format_amount(b.amount):>12}  {b.key or ''}"
        )
    return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


async def cmd_list(args: argparse.Namespace, store: BillStore, api: IBillApi) -> int:
    action = await fetch_bills(store, api)
    if action.rejected:
        return _fail(action)
    filters = BillFilters(
        start_date=args.start_date,
        end_date=args.end_date,
        min_amount=args.min_amount,
        max_amount=args.max_amount,
    )
    bills = store.filtered_bills(filters)
    sys.stdout.write(_bill_table(bills))
    return 0


async def cmd_add(args: argparse.Namespace, store: BillStore, api: IBillApi, config: AppConfig) -> int:
    loaded = await fetch_bills(store, api)
    draft = new_bill_draft(len(store.state.bills) if loaded.fulfilled else 0, address=config.default_address)
    overrides = {
        "patientName": args.name,
        "guardianName": args.guardian,
        "phone": args.phone,
        "address": args.address,
        "billDate": args.date,
        "chargeType": args.charge_type,
        "status": args.status,
        "amount": args.amount,
    }
    draft.update({k: v for k, v in overrides.items() if v is not None})
    action = await add_bill(store, api, draft)
    if action.rejected:
        return _fail(action)
    bill = action.payload
    print(f"Created bill S.No. {format_serial(bill)} ({bill.key}) for {bill.patient_name}: {format_amount(bill.amount)}")
    return 0


async def cmd_show(args: argparse.Namespace, store: BillStore, api: IBillApi) -> int:
    action = await fetch_bill_by_id(store, api, args.bill_id)
    if action.rejected:
        return _fail(action)
    bill = store.state.current_bill
    sys.stdout.write(_bill_table([bill]))
    return 0


async def cmd_print(args: argparse.Namespace, store: BillStore, api: IBillApi) -> int:
    action = await fetch_bill_by_id(store, api, args.bill_id)
    if action.rejected:
        return _fail(action)
    _emit(render_invoice(store.state.current_bill), args.output)
    return 0


async def cmd_bulk_print(args: argparse.Namespace, store: BillStore, api: IBillApi) -> int:
    action = await fetch_bills(store, api)
    if action.rejected:
        return _fail(action)
    session = BulkPrintSession.from_bills(store.state.bills)
    try:
        if args.start is not None or args.end is not None:
            result = session.apply_serial_filter(args.start, args.end)
            if not result.cleared:
                print(f"Auto-selected {len(result.bills)} bills in the specified range", file=sys.stderr)
        for bill_id in args.ids or []:
            session.toggle(bill_id)
        selected = session.prepare()
    except BillingError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    if args.fetch:
        action = await fetch_bulk_print_bills(store, api, [b.key for b in selected if b.key])
        if action.rejected:
            return _fail(action)
        selected = list(store.state.bulk_print_bills)
    _emit(render_bulk_invoices(selected), args.output)
    return 0


async def cmd_delete(args: argparse.Namespace, store: BillStore, api: IBillApi) -> int:
    action = await delete_bill(store, api, args.bill_id)
    if action.rejected:
        return _fail(action)
    print(f"Deleted bill {args.bill_id}")
    return 0


async def cmd_summary(args: argparse.Namespace, store: BillStore, api: IBillApi) -> int:
    action = await fetch_bills(store, api)
    if action.rejected:
        return _fail(action)
    s = summarize_bills(store.state.bills)
    print(f"Total bills:   {s.total_bills}")
    print(f"Paid bills:    {s.paid_count}")
    print(f"Total revenue: {format_amount(s.total_revenue)}")
    return 0


def cmd_auth(args: argparse.Namespace, config: AppConfig) -> int:
    auth = create_auth_service(config)
    if args.command == "logout":
        auth.logout()
        print("Logged out")
        return 0
    password = args.password or getpass.getpass("Password: ")
    user_data: dict[str, Any] = {"email": args.email, "password": password}
    try:
        if args.command == "register":
            user_data["name"] = args.name
            user = auth.register(user_data)
        else:
            user = auth.login(user_data)
    except BillingError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    print(f"Logged in as {user.get('name') or user.get('email') or args.email}")
    return 0


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Clinic billing: bills, invoices and bulk printing")
    parser.add_argument("--config", default=None, help="YAML config file (default: config.yaml)")
    parser.add_argument("--backend", choices=("rest", "local"), default=None, help="Override backend")
    parser.add_argument("--api-url", default=None, help="Override API base URL")
    parser.add_argument("--store", default=None, help="Local backend JSON file")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("login", help="Log in and store the session token")
    p.add_argument("--email", required=True)
    p.add_argument("--password", default=None)
    p = sub.add_parser("register", help="Create an account and store the session token")
    p.add_argument("--name", required=True)
    p.add_argument("--email", required=True)
    p.add_argument("--password", default=None)
    sub.add_parser("logout", help="Forget the stored session")

    p = sub.add_parser("list", help="List bills")
    p.add_argument("--start-date", default=None)
    p.add_argument("--end-date", default=None)
    p.add_argument("--min-amount", default=None)
    p.add_argument("--max-amount", default=None)

    p = sub.add_parser("add", help="Create a bill")
    p.add_argument("--name", required=True, help="Patient name")
    p.add_argument("--guardian", default=None, help="Father/Husband name")
    p.add_argument("--phone", default=None)
    p.add_argument("--address", default=None)
    p.add_argument("--date", default=None, help="Bill date (YYYY-MM-DD)")
    p.add_argument("--charge-type", default=None, help=" | ".join(CHARGE_TYPES))
    p.add_argument("--status", default=None, help=" | ".join(BILL_STATUSES))
    p.add_argument("--amount", default=None)

    for name in ("show", "print"):
        p = sub.add_parser(name, help=f"{name.capitalize()} one bill")
        p.add_argument("bill_id")
        if name == "print":
            p.add_argument("--output", "-o", default=None)

    p = sub.add_parser("bulk-print", help="Print several invoices")
    p.add_argument("--start", default=None, help="Start serial number")
    p.add_argument("--end", default=None, help="End serial number")
    p.add_argument("--ids", nargs="*", default=None, help="Toggle these bill ids in the selection")
    p.add_argument("--fetch", action="store_true", help="Fetch records from the bulk-print endpoint")
    p.add_argument("--output", "-o", default=None)

    p = sub.add_parser("delete", help="Delete a bill")
    p.add_argument("bill_id")

    sub.add_parser("summary", help="Dashboard counters")
    return parser


async def run(args: argparse.Namespace, config: AppConfig) -> int:
    api = create_bill_api(config, create_token_storage(config))
    store = BillStore()
    if args.command == "list":
        return await cmd_list(args, store, api)
    if args.command == "add":
        return await cmd_add(args, store, api, config)
    if args.command == "show":
        return await cmd_show(args, store, api)
    if args.command == "print":
        return await cmd_print(args, store, api)
    if args.command == "bulk-print":
        return await cmd_bulk_print(args, store, api)
    if args.command == "delete":
        return await cmd_delete(args, store, api)
    return await cmd_summary(args, store, api)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = load_config(args.config).with_overrides(
            backend=args.backend,
            local_store_path=args.store,
            log_level=args.log_level,
            api={"base_url": args.api_url} if args.api_url else None,
        )
    except BillingError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 2
    setup_logging(config.log_level)

    if args.command in ("login", "register", "logout"):
        return cmd_auth(args, config)
    return asyncio.run(run(args, config))


if __name__ == "__main__":
    sys.exit(main())
