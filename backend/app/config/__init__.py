"""Config package exporting loader helpers."""

from .loader import (
    ConfigurationError,
    DatabaseConfig,
    HttpConfig,
    LoggingConfig,
    MailConfig,
    Settings,
    UploadsConfig,
    ensure_required_settings,
    load_settings,
)

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "HttpConfig",
    "LoggingConfig",
    "MailConfig",
    "Settings",
    "UploadsConfig",
    "ensure_required_settings",
    "load_settings",
]
