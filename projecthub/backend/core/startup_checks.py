"""
Startup Environment Validation.

Checks that the store location and API key are present and look sane
before the application is considered operational. Missing values are
fatal; malformed values block startup with a clear operator message.
"""

from dataclasses import dataclass, field

from pydantic import ValidationError
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from projecthub.backend.core.config import get_app_config, get_settings
from projecthub.backend.core.config_schema import StoreKeySchema
from projecthub.backend.core.logging import get_logger

logger = get_logger(__name__)

REQUIRED_VARIABLES = ("STORE_URL", "STORE_API_KEY")


class StartupConfigError(RuntimeError):
    """Raised when the environment fails validation."""

    pass


@dataclass
class EnvironmentReport:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def validate_environment() -> EnvironmentReport:
    """Validate required secrets and their shape. Never raises for bad values."""
    report = EnvironmentReport()
    app_config = get_app_config()

    try:
        settings = get_settings()
    except ValidationError as e:
        missing = {str(err["loc"][0]).upper() for err in e.errors() if err["type"] == "missing"}
        for name in REQUIRED_VARIABLES:
            if name in missing:
                report.errors.append(f"Missing required environment variable: {name}")
        if not report.errors:
            report.errors.append(f"Invalid environment configuration: {e}")
        return report

    is_production = app_config.application.environment == "production"

    _check_store_url(settings.store_url, is_production, report)
    _check_store_key(settings.store_api_key, app_config.security.store_key, report)

    if is_production and app_config.application.debug:
        report.warnings.append("debug is true in production environment")

    return report


def run_startup_checks() -> EnvironmentReport:
    """
    Validate the environment and refuse to start when it is invalid.

    Raises:
        StartupConfigError: If any check fails
    """
    report = validate_environment()

    if not report.is_valid:
        for error in report.errors:
            logger.error("Environment check failed", extra={"check": error})
        raise StartupConfigError(
            f"Startup blocked, {len(report.errors)} environment check(s) failed:\n"
            + "\n".join(f"  - {e}" for e in report.errors)
        )

    for warning in report.warnings:
        logger.warning("Environment warning", extra={"check": warning})

    logger.info("Environment checks passed", extra={"warnings": len(report.warnings)})
    return report


def _check_store_url(value: str, is_production: bool, report: EnvironmentReport) -> None:
    """Validate that STORE_URL parses and names a reachable host."""
    if not value:
        report.errors.append("Missing required environment variable: STORE_URL")
        return
    try:
        url = make_url(value)
    except ArgumentError:
        report.errors.append(f"Invalid URL format for STORE_URL: {value}")
        return

    if url.get_backend_name() != "sqlite" and not url.host:
        report.errors.append(f"STORE_URL has no host: {value}")
        return

    if is_production and url.host in ("localhost", "127.0.0.1"):
        report.warnings.append(
            "Production mode detected but STORE_URL points at localhost"
        )


def _check_store_key(value: str, key_rules: StoreKeySchema, report: EnvironmentReport) -> None:
    """Validate that STORE_API_KEY has the expected token shape."""
    if not value:
        report.errors.append("Missing required environment variable: STORE_API_KEY")
        return
    if not value.startswith(key_rules.prefix) or len(value) <= key_rules.min_length:
        report.errors.append("Invalid key format for STORE_API_KEY")
