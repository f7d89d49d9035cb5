"""Fallback strategy: try bulk-print endpoint candidates in order; only 'not found' moves on."""

from __future__ import annotations

import logging
from typing import Any, Callable, Sequence

from core.exceptions import ApiRequestError, NoValidEndpointError, NotFoundError

logger = logging.getLogger(__name__)

NO_VALID_ENDPOINT = "No valid bulk print endpoint found"


def extract_bill_list(data: Any) -> list[Any] | None:
    """Array body, or an object wrapping it under 'bills' or 'data'. None for any other shape."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        if isinstance(data.get("bills"), list):
            return data["bills"]
        if isinstance(data.get("data"), list):
            return data["data"]
    return None


class EndpointFallbackChain:
    """Ordered candidates; a classified failure short-circuits the chain."""

    def __init__(
        self,
        candidates: Sequence[str],
        extract: Callable[[Any], list[Any] | None] = extract_bill_list,
    ) -> None:
        self._candidates = tuple(candidates)
        self._extract = extract

    @property
    def candidates(self) -> tuple[str, ...]:
        return self._candidates

    def should_fallback(self, error: ApiRequestError) -> bool:
        return isinstance(error, NotFoundError)

    def run(self, call: Callable[[str], Any]) -> list[Any]:
        """
        call(candidate) for each candidate until one returns a usable list.
        Not-found or an unexpected body shape -> next candidate; any other error propagates.
        """
        for candidate in self._candidates:
            try:
                data = call(candidate)
            except ApiRequestError as e:
                if not self.should_fallback(e):
                    raise
                logger.warning("Endpoint %s failed with status %s; trying next", candidate, e.status)
                continue
            items = self._extract(data)
            if items is None:
                logger.warning("Endpoint %s returned unexpected response format", candidate)
                continue
            return items
        raise NoValidEndpointError(NO_VALID_ENDPOINT)
