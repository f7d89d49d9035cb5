"""Custom exceptions for the clinic billing app. No generic Exception usage."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.models import ApiError


class BillingError(Exception):
    """Base exception for billing failures."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class BillValidationError(BillingError):
    """Client-side validation failed; never reaches the network."""

    def __init__(self, errors: list[str], message: str = "Validation failed") -> None:
        self.errors = list(errors)
        super().__init__(message)


class FilterRangeError(BillingError):
    """Serial-number range is inverted (start > end)."""

    pass


class EmptySelectionError(BillingError):
    """Bulk print requested with nothing selected."""

    pass


class ConfigError(BillingError):
    """Invalid or missing configuration."""

    pass


class ApiRequestError(BillingError):
    """Request to the bills backend failed. Carries the normalized ApiError."""

    def __init__(self, error: ApiError) -> None:
        self.error = error
        super().__init__(error.message)

    @property
    def status(self) -> int | None:
        return self.error.status


class NotFoundError(ApiRequestError):
    """Backend answered 404. Drives the bulk-print endpoint fallback."""

    pass


class NotAuthenticatedError(ApiRequestError):
    """No stored credential, or the backend rejected it (401)."""

    pass


class NoValidEndpointError(BillingError):
    """Every bulk-print endpoint candidate was exhausted."""

    pass
