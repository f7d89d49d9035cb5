"""Bill backends: abstract base, REST and local implementations, auth session."""

from providers.base import BaseBillProvider
from providers.rest_provider import RestBillProvider
from providers.local_provider import LocalBillProvider
from providers.fallback import EndpointFallbackChain
from providers.auth import AuthService, FileTokenStorage
from providers.factory import create_bill_api, create_auth_service, create_token_storage

__all__ = [
    "BaseBillProvider",
    "RestBillProvider",
    "LocalBillProvider",
    "EndpointFallbackChain",
    "AuthService",
    "FileTokenStorage",
    "create_bill_api",
    "create_auth_service",
    "create_token_storage",
]
