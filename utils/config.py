"""
Configuration loader: YAML + env overrides.
No hardcoded endpoints in the store or CLI; all from config.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from core.exceptions import ConfigError

BACKENDS = ("rest", "local")
DEFAULT_BULK_PRINT_ENDPOINTS = ("/bulk-print", "/print/bulk", "/invoices/bulk-print")


def _coerce_float(s: Any, default: float) -> float:
    if s is None or s == "":
        return default
    try:
        return float(s)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class ApiConfig:
    """Bills backend endpoint."""

    base_url: str = "http://localhost:5000/api"
    bills_path: str = "/bills"
    auth_path: str = "/auth"
    timeout_sec: float = 30.0
    bulk_print_endpoints: tuple[str, ...] = DEFAULT_BULK_PRINT_ENDPOINTS


@dataclass(frozen=True)
class AppConfig:
    """Immutable application configuration. Built from YAML + env."""

    backend: str = "rest"  # rest | local
    local_store_path: str = "bills.json"
    session_path: str = ".clinic_billing/session.json"
    session_key: str = "user"
    default_address: str = "Mainpuri"
    log_level: str = "INFO"
    api: ApiConfig = field(default_factory=ApiConfig)

    def with_overrides(self, **overrides: Any) -> AppConfig:
        """Return new config with replaced keys; None values are ignored. `api` accepts a dict of its fields."""
        top: dict[str, Any] = {}
        for k, v in overrides.items():
            if v is None:
                continue
            if k == "api" and isinstance(v, dict):
                top["api"] = replace(self.api, **v)
            elif k in self.__dataclass_fields__:
                top[k] = v
        cfg = replace(self, **top)
        _check(cfg)
        return cfg


def _check(cfg: AppConfig) -> None:
    if cfg.backend not in BACKENDS:
        raise ConfigError(f"Unknown backend: {cfg.backend}. Use rest or local.")
    if cfg.backend == "rest" and not cfg.api.base_url:
        raise ConfigError("api.base_url is required for the rest backend")


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e
    return data if isinstance(data, dict) else {}


def _config_from_dict(data: dict[str, Any]) -> AppConfig:
    """Build AppConfig from nested dict. Env overrides applied in load_config."""
    api_data = data.get("api") or {}
    endpoints = api_data.get("bulk_print_endpoints") or DEFAULT_BULK_PRINT_ENDPOINTS
    defaults = ApiConfig()
    return AppConfig(
        backend=str(data.get("backend", "rest")).strip().lower(),
        local_store_path=str(data.get("local_store_path", "bills.json")),
        session_path=str(data.get("session_path", ".clinic_billing/session.json")),
        session_key=str(data.get("session_key", "user")),
        default_address=str(data.get("default_address", "Mainpuri")),
        log_level=str(data.get("log_level", "INFO")),
        api=ApiConfig(
            base_url=str(api_data.get("base_url", defaults.base_url)),
            bills_path=str(api_data.get("bills_path", defaults.bills_path)),
            auth_path=str(api_data.get("auth_path", defaults.auth_path)),
            timeout_sec=_coerce_float(api_data.get("timeout_sec"), defaults.timeout_sec),
            bulk_print_endpoints=tuple(str(e) for e in endpoints),
        ),
    )


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """
    Load config from YAML file, then apply env overrides.
    Env vars: BILLING_BACKEND, BILLING_API_URL, BILLING_API_TIMEOUT, BILLING_LOCAL_STORE,
    BILLING_SESSION_FILE, BILLING_DEFAULT_ADDRESS, LOG_LEVEL.
    """
    path = Path(config_path) if config_path else Path("config.yaml")
    cfg = _config_from_dict(_load_yaml(path))
    api: dict[str, Any] = {}
    if os.getenv("BILLING_API_URL"):
        api["base_url"] = os.getenv("BILLING_API_URL", "").strip()
    if os.getenv("BILLING_API_TIMEOUT"):
        api["timeout_sec"] = _coerce_float(os.getenv("BILLING_API_TIMEOUT"), cfg.api.timeout_sec)
    return cfg.with_overrides(
        backend=(os.getenv("BILLING_BACKEND") or "").strip().lower() or None,
        local_store_path=os.getenv("BILLING_LOCAL_STORE") or None,
        session_path=os.getenv("BILLING_SESSION_FILE") or None,
        default_address=os.getenv("BILLING_DEFAULT_ADDRESS") or None,
        log_level=os.getenv("LOG_LEVEL") or None,
        api=api or None,
    )
