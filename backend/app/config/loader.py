"""Configuration loader: YAML profile first, environment variables on top."""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

import yaml

DEFAULT_ENVIRONMENT = "dev"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 5000
DEFAULT_CLIENT_ORIGIN = "http://localhost:3000"
DEFAULT_UPLOADS_DIR = "uploads"
DEFAULT_SMTP_HOST = "smtp.gmail.com"
DEFAULT_SMTP_PORT = 587
DEFAULT_SMTP_TIMEOUT = 30.0
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_CONFIRMATION_SUBJECT = "Thanks for getting in touch, $name"
DEFAULT_CONFIRMATION_BODY = """Hi $name,

Thank you for contacting us. We have received your message and will get back
to you at $email or $phone shortly.

Your message:
$message

Place: $place
"""
DEFAULT_PROFILE_DICT: dict[str, Any] = {
    "environment": DEFAULT_ENVIRONMENT,
    "database": {"create_schema": False},
    "http": {
        "host": DEFAULT_HOST,
        "port": DEFAULT_PORT,
        "client_origin": DEFAULT_CLIENT_ORIGIN,
    },
    "uploads": {"directory": DEFAULT_UPLOADS_DIR},
    "mail": {"enabled": False},
    "logging": {"level": DEFAULT_LOG_LEVEL, "json": False},
}
CONFIG_PROFILE_ENV = "CONTACT_DESK_CONFIG_PROFILE"
CONFIG_DIR_ENV = "CONTACT_DESK_CONFIG_DIR"
ENVIRONMENT_ENV = "CONTACT_DESK_ENVIRONMENT"
DEFAULT_PROFILE = "dev"
DEFAULT_CONFIG_ROOT = Path(__file__).resolve().parents[3] / "config" / "profiles"
CONFIG_EXTENSIONS = (".yaml", ".yml")
TRUTHY = {"1", "true", "yes", "on"}


class ConfigurationError(RuntimeError):
    """Raised at startup when required settings are missing or invalid."""

    def __init__(self, message: str, *, missing: List[str] | None = None) -> None:
        super().__init__(message)
        self.missing = list(missing or [])


@dataclass
class DatabaseConfig:
    url: Optional[str] = None
    create_schema: bool = False
    echo: bool = False


@dataclass
class HttpConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    client_origin: str = DEFAULT_CLIENT_ORIGIN
    base_url: Optional[str] = None
    legacy_image_routes: bool = True


@dataclass
class UploadsConfig:
    directory: str = DEFAULT_UPLOADS_DIR


@dataclass
class MailConfig:
    enabled: bool = False
    host: str = DEFAULT_SMTP_HOST
    port: int = DEFAULT_SMTP_PORT
    username: Optional[str] = None
    password: Optional[str] = None
    sender: Optional[str] = None
    use_tls: bool = False
    start_tls: bool = True
    timeout_seconds: float = DEFAULT_SMTP_TIMEOUT
    confirmation_subject: str = DEFAULT_CONFIRMATION_SUBJECT
    confirmation_body: str = DEFAULT_CONFIRMATION_BODY


@dataclass
class LoggingConfig:
    level: str = DEFAULT_LOG_LEVEL
    json: bool = False


@dataclass
class Settings:
    environment: str = DEFAULT_ENVIRONMENT
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    uploads: UploadsConfig = field(default_factory=UploadsConfig)
    mail: MailConfig = field(default_factory=MailConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def database_url(self) -> Optional[str]:
        return self.database.url


def load_settings(
    profile: str | None = None, config_dir: str | Path | None = None
) -> Settings:
    """Load settings from the requested profile, then apply env overrides."""

    profile_name = profile or os.getenv(CONFIG_PROFILE_ENV, DEFAULT_PROFILE)
    config_root = Path(
        config_dir or os.getenv(CONFIG_DIR_ENV, DEFAULT_CONFIG_ROOT)
    ).expanduser()
    config_data = _load_profile_dict(profile_name, config_root)
    if not config_data:
        config_data = copy.deepcopy(DEFAULT_PROFILE_DICT)

    return Settings(
        environment=_env_str(
            ENVIRONMENT_ENV, config_data.get("environment", DEFAULT_ENVIRONMENT)
        )
        or DEFAULT_ENVIRONMENT,
        database=_build_database_config(config_data.get("database")),
        http=_build_http_config(config_data.get("http")),
        uploads=_build_uploads_config(config_data.get("uploads")),
        mail=_build_mail_config(config_data.get("mail")),
        logging=_build_logging_config(config_data.get("logging")),
        raw=config_data,
    )


def ensure_required_settings(settings: Settings) -> Settings:
    """Fail fast when settings the service cannot run without are absent."""

    missing: List[str] = []
    if not settings.database.url:
        missing.append("database.url (DATABASE_URL)")
    if settings.mail.enabled:
        if not settings.mail.host:
            missing.append("mail.host (MAIL_HOST)")
        if not settings.mail.username:
            missing.append("mail.username (MAIL_USER)")
        if not settings.mail.password:
            missing.append("mail.password (MAIL_PASSWORD)")
    if missing:
        raise ConfigurationError(
            f"Missing required settings: {', '.join(missing)}",
            missing=missing,
        )
    if not 1 <= settings.http.port <= 65535:
        raise ConfigurationError(f"http.port out of range: {settings.http.port}")
    return settings


def _load_profile_dict(profile_name: str, config_root: Path) -> dict[str, Any]:
    """Load the YAML profile if available, otherwise return an empty dict."""

    if not config_root.exists():
        return {}

    for extension in CONFIG_EXTENSIONS:
        candidate = config_root / f"{profile_name}{extension}"
        if not candidate.exists():
            continue
        try:
            with candidate.open("r", encoding="utf-8") as handle:
                loaded = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(
                f"Failed to parse config profile {candidate}: {exc}"
            ) from exc
        if not isinstance(loaded, dict):
            raise ConfigurationError(
                f"Config profile {candidate} must be a mapping at the root"
            )
        return loaded

    return {}


def _build_database_config(cfg: dict[str, Any] | None) -> DatabaseConfig:
    cfg = cfg or {}
    return DatabaseConfig(
        url=_env_str("DATABASE_URL", cfg.get("url")),
        create_schema=_env_bool(
            "DATABASE_CREATE_SCHEMA", bool(cfg.get("create_schema", False))
        ),
        echo=bool(cfg.get("echo", False)),
    )


def _build_http_config(cfg: dict[str, Any] | None) -> HttpConfig:
    cfg = cfg or {}
    return HttpConfig(
        host=_env_str("HOST", cfg.get("host")) or DEFAULT_HOST,
        port=_env_int("PORT", cfg.get("port", DEFAULT_PORT)),
        client_origin=_env_str("CLIENT_URL", cfg.get("client_origin"))
        or DEFAULT_CLIENT_ORIGIN,
        base_url=_env_str("BASE_URL", cfg.get("base_url")),
        legacy_image_routes=_env_bool(
            "ENABLE_LEGACY_IMAGE_ROUTES", bool(cfg.get("legacy_image_routes", True))
        ),
    )


def _build_uploads_config(cfg: dict[str, Any] | None) -> UploadsConfig:
    cfg = cfg or {}
    return UploadsConfig(
        directory=_env_str("UPLOADS_DIR", cfg.get("directory")) or DEFAULT_UPLOADS_DIR
    )


def _build_mail_config(cfg: dict[str, Any] | None) -> MailConfig:
    cfg = cfg or {}
    return MailConfig(
        enabled=_env_bool("MAIL_ENABLED", bool(cfg.get("enabled", False))),
        host=_env_str("MAIL_HOST", cfg.get("host")) or DEFAULT_SMTP_HOST,
        port=_env_int("MAIL_PORT", cfg.get("port", DEFAULT_SMTP_PORT)),
        username=_env_str("MAIL_USER", cfg.get("username")),
        password=_env_str("MAIL_PASSWORD", cfg.get("password")),
        sender=_env_str("MAIL_SENDER", cfg.get("sender")),
        use_tls=_env_bool("MAIL_USE_TLS", bool(cfg.get("use_tls", False))),
        start_tls=_env_bool("MAIL_START_TLS", bool(cfg.get("start_tls", True))),
        timeout_seconds=_env_float(
            "MAIL_TIMEOUT", cfg.get("timeout_seconds"), DEFAULT_SMTP_TIMEOUT
        ),
        confirmation_subject=str(
            cfg.get("confirmation_subject") or DEFAULT_CONFIRMATION_SUBJECT
        ),
        confirmation_body=str(cfg.get("confirmation_body") or DEFAULT_CONFIRMATION_BODY),
    )


def _build_logging_config(cfg: dict[str, Any] | None) -> LoggingConfig:
    cfg = cfg or {}
    return LoggingConfig(
        level=(_env_str("LOG_LEVEL", cfg.get("level")) or DEFAULT_LOG_LEVEL).upper(),
        json=_env_bool("LOG_JSON", bool(cfg.get("json", False))),
    )


def _env_str(name: str, fallback: Any = None) -> Optional[str]:
    value = os.getenv(name)
    if value is not None and value.strip():
        return value.strip()
    if fallback is None or fallback == "":
        return None
    return str(fallback)


def _env_bool(name: str, fallback: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return fallback
    return value.strip().lower() in TRUTHY


def _env_int(name: str, fallback: Any) -> int:
    raw = _env_str(name, fallback)
    try:
        return int(raw) if raw is not None else 0
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc


def _env_float(name: str, fallback: Any, default: float) -> float:
    raw = _env_str(name, fallback)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc
