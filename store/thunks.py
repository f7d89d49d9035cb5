"""
Async effects for the bills store.
Each effect dispatches pending, runs the blocking backend call off the event loop,
then dispatches fulfilled or rejected. Backend errors never escape; they become rejected actions.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Mapping, Sequence

from billing.drafts import prepare_bill_payload
from billing.validator import validate_bill
from core.exceptions import ApiRequestError, BillingError
from core.interfaces import IBillApi
from core.models import Action, ApiError
from store import actions as A
from store.bill_store import BillStore
from utils.logger import log_structured

logger = logging.getLogger(__name__)


def _to_api_error(e: BillingError) -> ApiError:
    if isinstance(e, ApiRequestError):
        return e.error
    return ApiError(message=e.message)


async def _run(store: BillStore, base: str, call: Callable[[], Any], arg: Any = None) -> Action:
    store.dispatch(A.pending(base, arg))
    try:
        result = await asyncio.to_thread(call)
    except BillingError as e:
        err = _to_api_error(e)
        log_structured(
            logger, logging.WARNING, f"{base} rejected: {err.message}", op=base, status=err.status
        )
        return store.dispatch(A.rejected(base, err))
    return store.dispatch(A.fulfilled(base, result))


async def fetch_bills(store: BillStore, api: IBillApi) -> Action:
    return await _run(store, A.FETCH_BILLS, api.list_bills)


async def fetch_bill_by_id(store: BillStore, api: IBillApi, bill_id: str) -> Action:
    return await _run(store, A.FETCH_BILL_BY_ID, lambda: api.get_bill(bill_id), arg=bill_id)


async def add_bill(store: BillStore, api: IBillApi, draft: Mapping[str, Any]) -> Action:
    """Validate first; an invalid draft is rejected with status 400 and never reaches the backend."""
    errors = validate_bill(draft)
    if errors:
        store.dispatch(A.pending(A.ADD_BILL, dict(draft)))
        return store.dispatch(
            A.rejected(A.ADD_BILL, ApiError(message="Validation failed", errors=errors, status=400))
        )
    payload = prepare_bill_payload(draft)
    return await _run(store, A.ADD_BILL, lambda: api.create_bill(payload), arg=payload)


async def update_bill(store: BillStore, api: IBillApi, bill_id: str, bill_data: Mapping[str, Any]) -> Action:
    payload = dict(bill_data)
    return await _run(store, A.UPDATE_BILL, lambda: api.update_bill(bill_id, payload), arg=bill_id)


async def delete_bill(store: BillStore, api: IBillApi, bill_id: str) -> Action:
    def call() -> str:
        api.delete_bill(bill_id)
        return bill_id

    return await _run(store, A.DELETE_BILL, call, arg=bill_id)


async def fetch_bulk_print_bills(store: BillStore, api: IBillApi, bill_ids: Sequence[str]) -> Action:
    ids = list(bill_ids)
    logger.info("Bulk print attempt for %d bill(s)", len(ids))
    return await _run(store, A.FETCH_BULK_PRINT_BILLS, lambda: api.bulk_print(ids), arg=ids)
