"""
Pure transitions for the bills store: reduce(state, action) -> new state.
Records are matched by identifier only, so effects may complete in any order.
"""
from __future__ import annotations

from dataclasses import replace

from core.models import Action, OpStatus
from core.schema import Bill, to_bill
from store import actions as A
from store.state import BillState


def _matches(bill: Bill, ident: str | None) -> bool:
    return ident is not None and ident in (bill.mongo_id, bill.id)


def _with_status(state: BillState, base: str, phase: str) -> BillState:
    op = A.OPERATIONS.get(base)
    if op is None:
        return state
    status = dict(state.status)
    status[op] = OpStatus(phase)
    return replace(state, status=status)


def _reduce_selection(state: BillState, action: Action) -> BillState | None:
    if action.type == A.SELECT_BILL:
        return replace(state, selected=state.selected | {action.payload})
    if action.type == A.UNSELECT_BILL:
        return replace(state, selected=state.selected - {action.payload})
    if action.type == A.TOGGLE_BILL:
        if action.payload in state.selected:
            return replace(state, selected=state.selected - {action.payload})
        return replace(state, selected=state.selected | {action.payload})
    if action.type == A.SET_SELECTED_BILLS:
        return replace(state, selected=frozenset(action.payload))
    if action.type == A.CLEAR_SELECTED_BILLS:
        return replace(state, selected=frozenset())
    return None


def reduce(state: BillState, action: Action) -> BillState:
    """Return the state after `action`. Unknown actions return `state` unchanged."""
    selected = _reduce_selection(state, action)
    if selected is not None:
        return selected

    base, _, phase = action.type.rpartition("/")
    if base not in A.OPERATIONS or phase not in (A.PENDING, A.FULFILLED, A.REJECTED):
        return state
    state = _with_status(state, base, phase)

    # -- fetch all -----------------------------------------------------------
    if base == A.FETCH_BILLS:
        if phase == A.PENDING:
            return replace(state, loading=True, error=None)
        if phase == A.FULFILLED:
            return replace(state, loading=False, bills=tuple(to_bill(b) for b in action.payload))
        return replace(state, loading=False, error=action.error)

    # -- fetch one -----------------------------------------------------------
    if base == A.FETCH_BILL_BY_ID:
        if phase == A.PENDING:
            # stale detail must not show while the new one loads
            return replace(state, loading=True, error=None, current_bill=None)
        if phase == A.FULFILLED:
            return replace(state, loading=False, current_bill=to_bill(action.payload))
        return replace(state, loading=False, error=action.error)

    # -- create --------------------------------------------------------------
    if base == A.ADD_BILL:
        if phase == A.FULFILLED:
            return replace(state, bills=state.bills + (to_bill(action.payload),))
        if phase == A.REJECTED:
            return replace(state, error=action.error)
        return state

    # -- update --------------------------------------------------------------
    if base == A.UPDATE_BILL:
        if phase == A.FULFILLED:
            updated = to_bill(action.payload)
            ident = updated.key
            if not any(_matches(b, ident) for b in state.bills):
                return state
            bills = tuple(updated if _matches(b, ident) else b for b in state.bills)
            current = state.current_bill
            if current is not None and _matches(current, ident):
                current = updated
            return replace(state, bills=bills, current_bill=current)
        if phase == A.REJECTED:
            return replace(state, error=action.error)
        return state

    # -- delete --------------------------------------------------------------
    if base == A.DELETE_BILL:
        if phase == A.PENDING:
            return replace(state, loading=True, error=None)
        if phase == A.FULFILLED:
            ident = action.payload
            return replace(
                state,
                loading=False,
                bills=tuple(b for b in state.bills if not _matches(b, ident)),
                selected=state.selected - {ident},
            )
        return replace(state, loading=False, error=action.error)

    # -- bulk print ----------------------------------------------------------
    if phase == A.PENDING:
        return replace(state, bulk_print_loading=True, bulk_print_error=None, bulk_print_bills=())
    if phase == A.FULFILLED:
        return replace(
            state,
            bulk_print_loading=False,
            bulk_print_bills=tuple(to_bill(b) for b in action.payload),
        )
    return replace(state, bulk_print_loading=False, bulk_print_error=action.error)
