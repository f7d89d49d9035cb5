"""
Abstract interfaces for the billing app.
Every external dependency is behind an interface; the store never depends on a concrete backend.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from core.schema import Bill


class IBillApi(ABC):
    """Bills backend: REST service or local file. All calls are blocking; the store runs them off-loop."""

    @abstractmethod
    def list_bills(self) -> list[Bill]:
        """GET /bills. Server ordering is preserved."""
        ...

    @abstractmethod
    def get_bill(self, bill_id: str) -> Bill:
        """GET /bills/{id}. Raises NotFoundError if missing."""
        ...

    @abstractmethod
    def create_bill(self, payload: dict[str, Any]) -> Bill:
        """POST /bills. Server assigns identifier, serial and defaults."""
        ...

    @abstractmethod
    def update_bill(self, bill_id: str, payload: dict[str, Any]) -> Bill:
        """PUT /bills/{id} with the full record."""
        ...

    @abstractmethod
    def delete_bill(self, bill_id: str) -> None:
        """DELETE /bills/{id}."""
        ...

    @abstractmethod
    def bulk_print(self, bill_ids: list[str]) -> list[Bill]:
        """Fetch the full records for a bulk print run."""
        ...


class ITokenStorage(ABC):
    """Durable client-side storage for the logged-in user (token included)."""

    @abstractmethod
    def load(self) -> dict[str, Any] | None:
        ...

    @abstractmethod
    def save(self, user: dict[str, Any]) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...

    def token(self) -> str | None:
        """Bearer credential of the stored user, if any."""
        user = self.load()
        if not user:
            return None
        tok = user.get("token")
        return str(tok) if tok else None
