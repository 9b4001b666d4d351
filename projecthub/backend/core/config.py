"""
Configuration Management.

Loads secrets from config/.env and settings from config/settings/*.yaml.
No hardcoded values in code; all configuration comes from these sources.

Secrets (.env or process environment):
    STORE_URL, STORE_API_KEY, SESSION_JWT_SECRET

Settings (YAML):
    application.yaml - App identity and environment
    database.yaml    - Connection pool settings for the store
    logging.yaml     - Logging configuration
    security.yaml    - Session token settings, store key shape
    export.yaml      - Export metadata and PDF page geometry
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url

from projecthub.backend.core.config_schema import (
    ApplicationSchema,
    DatabaseSchema,
    ExportSchema,
    LoggingSchema,
    SecuritySchema,
)


def find_project_root() -> Path:
    """Find project root by looking for .project_root marker file."""
    current = Path.cwd()
    while current != current.parent:
        if (current / ".project_root").exists():
            return current
        current = current.parent
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def validate_project_root() -> Path:
    """
    Validate that the project root can be found.

    Raises SystemExit with a clear message if .project_root is not found.
    Use this in entry scripts before any configuration loading.
    """
    try:
        return find_project_root()
    except RuntimeError as e:
        raise SystemExit(f"Error: {e}") from e


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from config/settings/."""
    project_root = find_project_root()
    config_path = project_root / "config" / "settings" / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Secrets loaded from config/.env. Store location, keys and token secrets."""

    store_url: str
    store_api_key: str
    session_jwt_secret: str | None = None

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Application configuration loaded from YAML files.

    Each YAML file is validated against its Pydantic schema at load time.
    Missing keys, wrong types, or unknown fields raise a clear error
    immediately instead of causing cryptic KeyErrors later.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._database = _load_validated(DatabaseSchema, "database.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")
        self._security = _load_validated(SecuritySchema, "security.yaml")
        self._export = _load_validated(ExportSchema, "export.yaml")

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def database(self) -> DatabaseSchema:
        """Store connection pool settings."""
        return self._database

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging

    @property
    def security(self) -> SecuritySchema:
        """Security settings."""
        return self._security

    @property
    def export(self) -> ExportSchema:
        """Export settings (metadata, PDF geometry)."""
        return self._export


@lru_cache
def get_settings() -> Settings:
    """Get cached secrets instance. Resolves .env path from project root."""
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def build_store_url(store_url: str, api_key: str) -> URL:
    """
    Build the SQLAlchemy URL for the store.

    The API key is used as the connection credential when the configured
    URL does not already carry a password.

    Raises:
        sqlalchemy.exc.ArgumentError: If the URL cannot be parsed
    """
    url = make_url(store_url)
    if url.password is None and url.get_backend_name() != "sqlite":
        url = url.set(password=api_key)
    return url


def get_database_url() -> URL:
    """Construct the store URL from secrets."""
    settings = get_settings()
    return build_store_url(settings.store_url, settings.store_api_key)
