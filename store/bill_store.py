"""Single owned container for BillState. dispatch() is the only way state changes."""

from __future__ import annotations

import logging
from typing import Callable

from billing.filters import BillFilters, apply_bill_filters
from core.models import Action
from core.schema import Bill
from store.reducer import reduce
from store.state import BillState

logger = logging.getLogger(__name__)

Listener = Callable[[BillState, Action], None]


class BillStore:
    """Holds the current state and notifies subscribers after every transition."""

    def __init__(self, initial: BillState | None = None) -> None:
        self._state = initial or BillState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> BillState:
        return self._state

    def dispatch(self, action: Action) -> Action:
        self._state = reduce(self._state, action)
        logger.debug("dispatch %s", action.type)
        for listener in list(self._listeners):
            listener(self._state, action)
        return action

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # selectors

    def bills(self) -> list[Bill]:
        return list(self._state.bills)

    def filtered_bills(self, filters: BillFilters) -> list[Bill]:
        return apply_bill_filters(self._state.bills, filters)

    def selected_bills(self) -> list[Bill]:
        """Selected records in collection order."""
        return [b for b in self._state.bills if b.key in self._state.selected]
