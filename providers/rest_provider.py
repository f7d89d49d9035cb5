"""REST bills backend (GET/POST/PUT/DELETE /bills) over requests."""

from __future__ import annotations

import logging
from typing import Any, Sequence
from urllib.parse import quote

from core.exceptions import ApiRequestError
from core.interfaces import ITokenStorage
from core.models import ApiError
from core.schema import Bill
from providers.base import BaseBillProvider
from providers.fallback import EndpointFallbackChain, extract_bill_list
from providers.http import HttpTransport
from utils.config import DEFAULT_BULK_PRINT_ENDPOINTS

logger = logging.getLogger(__name__)
DEFAULT_API_BASE = "http://localhost:5000/api"


class RestBillProvider(BaseBillProvider):
    """Authenticated REST client for the external bills API."""

    def __init__(
        self,
        base_url: str | None = None,
        token_storage: ITokenStorage | None = None,
        timeout_sec: float = 30.0,
        bills_path: str = "/bills",
        bulk_print_endpoints: Sequence[str] = DEFAULT_BULK_PRINT_ENDPOINTS,
        transport: HttpTransport | None = None,
    ) -> None:
        self._http = transport or HttpTransport(
            base_url or DEFAULT_API_BASE, token_storage=token_storage, timeout_sec=timeout_sec
        )
        self._bills_path = "/" + bills_path.strip("/")
        self._bulk_chain = EndpointFallbackChain(bulk_print_endpoints)

    def _bill_path(self, bill_id: str) -> str:
        return f"{self._bills_path}/{quote(str(bill_id), safe='')}"

    def list_bills(self) -> list[Bill]:
        data = self._http.request("GET", self._bills_path)
        items = extract_bill_list(data)
        if items is None:
            raise ApiRequestError(ApiError(message="Unexpected response format", data=data))
        return self.to_bills(items)

    def get_bill(self, bill_id: str) -> Bill:
        return self.to_bill(self._http.request("GET", self._bill_path(bill_id)))

    def create_bill(self, payload: dict[str, Any]) -> Bill:
        return self.to_bill(self._http.request("POST", self._bills_path, json=payload))

    def update_bill(self, bill_id: str, payload: dict[str, Any]) -> Bill:
        return self.to_bill(self._http.request("PUT", self._bill_path(bill_id), json=payload))

    def delete_bill(self, bill_id: str) -> None:
        self._http.request("DELETE", self._bill_path(bill_id))

    def bulk_print(self, bill_ids: list[str]) -> list[Bill]:
        logger.info(
            "Bulk print for %d bill(s); candidates: %s",
            len(bill_ids),
            [f"{self._bills_path}{e}" for e in self._bulk_chain.candidates],
        )
        body = {"billIds": list(bill_ids)}
        items = self._bulk_chain.run(
            lambda endpoint: self._http.request("POST", f"{self._bills_path}{endpoint}", json=body)
        )
        return self.to_bills(items)
