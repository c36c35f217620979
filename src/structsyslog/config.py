"""Structlog configuration for RFC 5424 syslog output.

Configures structlog so that every record, whether logged through
:mod:`structlog` or the standard :mod:`logging` module, is rendered as one
RFC 5424 line:

- ``PRI`` from the record's level (``severity`` key, RFC 5424 §6.2.1).
- ``TIMESTAMP``: RFC 3339 in UTC (``Z`` suffix).
- ``APP-NAME``: the ``app_name`` passed here, or the executable name.
- ``MSG``: the log message.
- Everything else as parameters of one structured-data element.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Sequence
from logging.handlers import RotatingFileHandler
from typing import Any

import structlog
from structlog.contextvars import merge_contextvars

from structsyslog.defaults import DEFAULT_APP_NAME
from structsyslog.errors import ConfigurationError
from structsyslog.levels import Facility, lookup_facility
from structsyslog.processors import (
    add_app_name,
    add_syslog_severity,
    ensure_event_is_str,
    normalize_level,
)
from structsyslog.renderer import RFC5424Renderer
from structsyslog.settings import configure, settings_from_env


def _to_logging_level(level_name: str) -> int:
    """Convert a human-readable level name to its :mod:`logging` constant."""
    upper_level = level_name.upper()
    if upper_level == "WARN":
        return logging.WARNING
    result: int = getattr(logging, upper_level, logging.INFO)
    return result


def _build_shared_processors(
    app_name: str,
) -> list[structlog.types.Processor]:
    """Build the shared processor chain used by both structlog and stdlib records."""
    processors: list[structlog.types.Processor] = [
        merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        normalize_level,  # type: ignore[list-item]
        add_syslog_severity,  # type: ignore[list-item]
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
        add_app_name(app_name),  # type: ignore[list-item]
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        ensure_event_is_str,  # type: ignore[list-item]
        structlog.processors.EventRenamer("message"),
    ]
    return processors


def _build_formatter_processors(
    renderer: structlog.types.Processor,
) -> list[structlog.types.Processor]:
    """Build the ``ProcessorFormatter`` processor chain (final rendering stage)."""
    return [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
        structlog.processors.format_exc_info,
        renderer,
    ]


def configure_structlog(
    *,
    app_name: str | None = None,
    level: str = "INFO",
    facility: Facility = Facility.USER,
    stream: Any = None,
    clear_handlers: bool = True,
    allow_long_sd_names: bool | None = None,
) -> None:
    """Configure structlog and the root logger to emit RFC 5424 lines.

    Parameters
    ----------
    app_name:
        APP-NAME of every message.  Defaults to the executable name.
    level:
        Minimum log level (e.g. ``"DEBUG"``, ``"INFO"``).
    facility:
        Syslog facility of every message.
    stream:
        Output stream.  Defaults to ``sys.stdout``.
    clear_handlers:
        If ``True`` (default), remove all existing root logger handlers before
        adding the syslog handler.
    allow_long_sd_names:
        If not ``None``, update the process-wide SD-NAME length setting.

    Raises
    ------
    ConfigurationError
        If *app_name* is not a valid APP-NAME.  Nothing is configured in
        that case.
    """
    if stream is None:
        stream = sys.stdout
    if app_name is None:
        app_name = DEFAULT_APP_NAME
    renderer = RFC5424Renderer(app_name=app_name, facility=facility)
    if allow_long_sd_names is not None:
        configure(allow_long_sd_names=allow_long_sd_names)

    shared_processors = _build_shared_processors(app_name)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(
            _to_logging_level(level),
        ),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=_build_formatter_processors(renderer),
        foreign_pre_chain=shared_processors,
    )

    root = logging.getLogger()
    if clear_handlers:
        root.handlers.clear()
    root.setLevel(_to_logging_level(level))

    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)
    root.addHandler(handler)


def setup_structlog(
    *,
    app_name: str | None = None,
    suppress_loggers: Sequence[str] = (),
) -> None:
    """Application-level logging setup.

    Reads environment variables:

    - ``LOG_LEVEL`` (default: ``"INFO"``)
    - ``SYSLOG_FACILITY`` (facility name, default: ``"user"``)
    - ``SYSLOG_ALLOW_LONG_SD_NAMES`` (``"1"`` lifts the 32-character SD-NAME cap)
    - ``LOG_PATH`` (optional file sink with 50 MB rotation)

    Parameters
    ----------
    app_name:
        APP-NAME of every message.
    suppress_loggers:
        Logger names to suppress to WARNING level.

    Raises
    ------
    ConfigurationError
        If ``SYSLOG_FACILITY`` names an unknown facility.
    """
    level = os.environ.get("LOG_LEVEL", "INFO")
    facility_name = os.environ.get("SYSLOG_FACILITY", "user")
    facility = lookup_facility(facility_name)
    if facility is None:
        msg = f"Unknown SYSLOG_FACILITY: {facility_name!r}"
        raise ConfigurationError(msg)

    settings = settings_from_env()
    configure_structlog(
        app_name=app_name,
        level=level,
        facility=facility,
        allow_long_sd_names=settings.allow_long_sd_names,
    )

    for name in suppress_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)

    log_path = os.environ.get("LOG_PATH")
    if log_path:
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=50 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_formatter = structlog.stdlib.ProcessorFormatter(
            processors=_build_formatter_processors(
                RFC5424Renderer(app_name=app_name, facility=facility),
            ),
            foreign_pre_chain=_build_shared_processors(app_name or DEFAULT_APP_NAME),
        )
        file_handler.setFormatter(file_formatter)
        logging.getLogger().addHandler(file_handler)
