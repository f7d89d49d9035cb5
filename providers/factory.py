"""Factory for creating bill backends and the auth session from config."""

from __future__ import annotations

from core.exceptions import ConfigError
from core.interfaces import IBillApi, ITokenStorage
from providers.auth import AuthService, FileTokenStorage
from providers.http import HttpTransport
from providers.local_provider import LocalBillProvider
from providers.rest_provider import RestBillProvider
from utils.config import AppConfig


def create_token_storage(config: AppConfig) -> ITokenStorage:
    return FileTokenStorage(config.session_path, key=config.session_key)


def create_bill_api(config: AppConfig, token_storage: ITokenStorage | None = None) -> IBillApi:
    """Create a bills backend by config.backend (rest | local)."""
    name = (config.backend or "rest").strip().lower()
    if name == "rest":
        transport = HttpTransport(
            config.api.base_url,
            token_storage=token_storage or create_token_storage(config),
            timeout_sec=config.api.timeout_sec,
        )
        return RestBillProvider(
            bills_path=config.api.bills_path,
            bulk_print_endpoints=config.api.bulk_print_endpoints,
            transport=transport,
        )
    if name == "local":
        return LocalBillProvider(config.local_store_path)
    raise ConfigError(f"Unknown backend: {config.backend}. Use rest or local.")


def create_auth_service(config: AppConfig, token_storage: ITokenStorage | None = None) -> AuthService:
    storage = token_storage or create_token_storage(config)
    transport = HttpTransport(config.api.base_url, token_storage=storage, timeout_sec=config.api.timeout_sec)
    return AuthService(transport, storage, auth_path=config.api.auth_path)
