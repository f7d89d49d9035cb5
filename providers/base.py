"""
Abstract base for all bill backends.
The store depends only on this interface; no concrete provider imports in store/.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import ValidationError

from core.exceptions import ApiRequestError
from core.interfaces import IBillApi
from core.models import ApiError
from core.schema import Bill, to_bill


class BaseBillProvider(IBillApi, ABC):
    """Abstract bill backend. Subclasses implement the six REST operations."""

    @abstractmethod
    def list_bills(self) -> list[Bill]:
        ...

    @abstractmethod
    def get_bill(self, bill_id: str) -> Bill:
        ...

    @abstractmethod
    def create_bill(self, payload: dict[str, Any]) -> Bill:
        ...

    @abstractmethod
    def update_bill(self, bill_id: str, payload: dict[str, Any]) -> Bill:
        ...

    @abstractmethod
    def delete_bill(self, bill_id: str) -> None:
        ...

    @abstractmethod
    def bulk_print(self, bill_ids: list[str]) -> list[Bill]:
        ...

    @staticmethod
    def to_bill(data: Any) -> Bill:
        """Parse one bill record; a malformed record becomes ApiRequestError."""
        if not isinstance(data, (dict, Bill)):
            raise ApiRequestError(ApiError(message="Unexpected response format", data=data))
        try:
            return to_bill(data)
        except ValidationError as e:
            raise ApiRequestError(ApiError(message=f"Invalid bill in response: {e.error_count()} error(s)", data=data)) from e

    @classmethod
    def to_bills(cls, items: list[Any]) -> list[Bill]:
        return [cls.to_bill(item) for item in items]
