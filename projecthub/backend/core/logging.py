"""
Centralized Logging Configuration.

Every module logs through structlog on top of stdlib logging. Levels,
renderer and handlers come from config/settings/logging.yaml (validated
as LoggingSchema); arguments to setup_logging override them.

JSON records carry timestamp, level, logger, event, func_name and lineno,
plus any fields passed as extra kwargs or bound with log_context().
The 'source' field names the entry point (cli, services, export, internal).

Usage:
    from projecthub.backend.core.logging import get_logger, log_context, setup_logging

    setup_logging()
    logger = get_logger(__name__)

    with log_context(source="cli", project_id=project_id):
        logger.info("Export started")
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import Processor

from projecthub.backend.core.config import find_project_root, get_app_config
from projecthub.backend.core.config_schema import FileHandlerSchema, LoggingSchema

VALID_SOURCES = frozenset({
    "cli",
    "services",
    "export",
    "internal",
    "unknown",
})

# Third-party loggers that are noisy at INFO.
_QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncio")


def _load_logging_config() -> LoggingSchema:
    return get_app_config().logging


def _resolve_log_path(configured_path: str) -> Path:
    """Resolve the log file path relative to project root."""
    return find_project_root() / configured_path


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]


def _json_formatter(pre_chain: list[Processor]) -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        foreign_pre_chain=pre_chain,
    )


def _console_handler(format_type: str, pre_chain: list[Processor]) -> logging.Handler:
    """Stderr handler; stdout stays free for command output."""
    if format_type == "console":
        formatter = structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
            foreign_pre_chain=pre_chain,
        )
    else:
        formatter = _json_formatter(pre_chain)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    return handler


def _file_handler(file_config: FileHandlerSchema, pre_chain: list[Processor]) -> logging.Handler:
    """Rotating JSONL handler at the configured path, creating its directory."""
    log_path = _resolve_log_path(file_config.path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=str(log_path),
        maxBytes=file_config.max_bytes,
        backupCount=file_config.backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(_json_formatter(pre_chain))
    return handler


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structured logging for the process.

    Args:
        level: Log level name. Overrides config.
        format_type: 'json' or 'console'. Overrides config.
        enable_console: Whether to log to stderr. Overrides config.
        enable_file_logging: Whether to write the JSONL file. Overrides config.

    Raises:
        AttributeError: If level is not a logging level name
    """
    config = _load_logging_config()
    handlers = config.handlers

    log_level = getattr(logging, (level or config.level).upper())
    format_type = format_type or config.format
    console_enabled = handlers.console.enabled if enable_console is None else enable_console
    file_enabled = handlers.file.enabled if enable_file_logging is None else enable_file_logging

    pre_chain = _shared_processors()
    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if console_enabled:
        root_logger.addHandler(_console_handler(format_type, pre_chain))
    if file_enabled:
        root_logger.addHandler(_file_handler(handlers.file, pre_chain))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


def get_logger(name: str) -> Any:
    """Return a structlog logger named after the calling module."""
    return structlog.get_logger(name)


@contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """
    Bind fields to every record logged inside the block.

    Raises:
        ValueError: If a 'source' field is not one of VALID_SOURCES
    """
    source = fields.get("source")
    if source is not None and source not in VALID_SOURCES:
        raise ValueError(f"Unknown log source: {source}")
    with structlog.contextvars.bound_contextvars(**fields):
        yield


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log a single message with an explicit source.

    Raises:
        AttributeError: If level is not a valid log level

    Example:
        log_with_source(logger, "cli", "info", "Export written", path="out.pdf")
    """
    log_method = getattr(logger, level.lower())
    log_method(message, source=source, **kwargs)
