"""Core layer: interfaces, models, schema, exceptions."""

from core.interfaces import IBillApi, ITokenStorage
from core.models import ApiError, Action, BillSummary, OpStatus
from core.schema import Bill, bill_key, to_bill
from core.exceptions import (
    BillingError,
    BillValidationError,
    FilterRangeError,
    EmptySelectionError,
    ConfigError,
    ApiRequestError,
    NotFoundError,
    NotAuthenticatedError,
    NoValidEndpointError,
)

__all__ = [
    "IBillApi",
    "ITokenStorage",
    "ApiError",
    "Action",
    "BillSummary",
    "OpStatus",
    "Bill",
    "bill_key",
    "to_bill",
    "BillingError",
    "BillValidationError",
    "FilterRangeError",
    "EmptySelectionError",
    "ConfigError",
    "ApiRequestError",
    "NotFoundError",
    "NotAuthenticatedError",
    "NoValidEndpointError",
]
