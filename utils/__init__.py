"""Shared utilities: config, logger."""

from utils.config import AppConfig, ApiConfig, load_config
from utils.logger import BillingFormatter, setup_logging, log_structured

__all__ = [
    "AppConfig",
    "ApiConfig",
    "load_config",
    "BillingFormatter",
    "setup_logging",
    "log_structured",
]
