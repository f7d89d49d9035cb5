"""
Data models for the billing store and API boundary.
Uses dataclasses for DTOs; the pydantic Bill schema lives in core.schema.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class OpStatus(str, Enum):
    """Lifecycle of one async operation."""

    IDLE = "idle"
    PENDING = "pending"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"


@dataclass(frozen=True)
class ApiError:
    """Structured error produced at the API boundary (one shape for every failure)."""

    message: str
    errors: list[str] = field(default_factory=list)
    status: int | None = None
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Export for logging/serialization."""
        out: dict[str, Any] = {"message": self.message, "status": self.status}
        if self.errors:
            out["errors"] = list(self.errors)
        return out


@dataclass(frozen=True)
class Action:
    """Event fed to the reducer: type like 'bills/fetchBills/fulfilled' plus payload."""

    type: str
    payload: Any = None
    error: ApiError | None = None

    @property
    def rejected(self) -> bool:
        return self.type.endswith("/rejected")

    @property
    def fulfilled(self) -> bool:
        return self.type.endswith("/fulfilled")


@dataclass
class BillSummary:
    """Dashboard counters."""

    total_bills: int = 0
    paid_count: int = 0
    total_revenue: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_bills": self.total_bills,
            "paid_count": self.paid_count,
            "total_revenue": round(self.total_revenue, 2),
        }
