"""Action types and creators for the bills store (pending / fulfilled / rejected per async op)."""

from __future__ import annotations

from typing import Any

from core.models import Action, ApiError

FETCH_BILLS = "bills/fetchBills"
FETCH_BILL_BY_ID = "bills/fetchBillById"
ADD_BILL = "bills/addBill"
UPDATE_BILL = "bills/updateBill"
DELETE_BILL = "bills/deleteBill"
FETCH_BULK_PRINT_BILLS = "bills/fetchBulkPrintBills"

SELECT_BILL = "bills/selectBill"
UNSELECT_BILL = "bills/unselectBill"
TOGGLE_BILL = "bills/toggleBill"
SET_SELECTED_BILLS = "bills/setSelectedBills"
CLEAR_SELECTED_BILLS = "bills/clearSelectedBills"

PENDING = "pending"
FULFILLED = "fulfilled"
REJECTED = "rejected"

# async action type -> operation name used in BillState.status
OPERATIONS = {
    FETCH_BILLS: "fetch_all",
    FETCH_BILL_BY_ID: "fetch_by_id",
    ADD_BILL: "create",
    UPDATE_BILL: "update",
    DELETE_BILL: "delete",
    FETCH_BULK_PRINT_BILLS: "bulk_print",
}


def pending(base: str, arg: Any = None) -> Action:
    return Action(type=f"{base}/{PENDING}", payload=arg)


def fulfilled(base: str, payload: Any) -> Action:
    return Action(type=f"{base}/{FULFILLED}", payload=payload)


def rejected(base: str, error: ApiError) -> Action:
    return Action(type=f"{base}/{REJECTED}", error=error)


def select_bill(bill_id: str) -> Action:
    return Action(type=SELECT_BILL, payload=bill_id)


def unselect_bill(bill_id: str) -> Action:
    return Action(type=UNSELECT_BILL, payload=bill_id)


def toggle_bill(bill_id: str) -> Action:
    return Action(type=TOGGLE_BILL, payload=bill_id)


def set_selected_bills(bill_ids: Any) -> Action:
    return Action(type=SET_SELECTED_BILLS, payload=frozenset(bill_ids))


def clear_selected_bills() -> Action:
    return Action(type=CLEAR_SELECTED_BILLS)
