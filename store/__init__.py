"""Bills store: immutable state, pure reducer, container and async effects."""

from store.state import BillState
from store.reducer import reduce
from store.bill_store import BillStore
from store.thunks import (
    fetch_bills,
    fetch_bill_by_id,
    add_bill,
    update_bill,
    delete_bill,
    fetch_bulk_print_bills,
)

__all__ = [
    "BillState",
    "reduce",
    "BillStore",
    "fetch_bills",
    "fetch_bill_by_id",
    "add_bill",
    "update_bill",
    "delete_bill",
    "fetch_bulk_print_bills",
]
