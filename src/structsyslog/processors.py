"""Structlog processors preparing event dicts for RFC 5424 rendering.

Provides processors that enrich event dicts with standardized fields:
- ``level``: normalized to ``CRITICAL``, ``ERROR``, ``WARN``, ``NOTICE``,
  ``INFO``, ``DEBUG``.
- ``severity``: RFC 5424 syslog severity code (``0``–``7``).
- ``app_name``: application name, used as the syslog APP-NAME.
- ``event``: guaranteed to be a string.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from structsyslog.levels import Severity

_LEVEL_MAP: dict[str, str] = {
    "debug": "DEBUG",
    "info": "INFO",
    "notice": "NOTICE",
    "warning": "WARN",
    "warn": "WARN",
    "error": "ERROR",
    "critical": "CRITICAL",
    "fatal": "CRITICAL",
    "exception": "ERROR",
}

# RFC 5424 syslog severity codes (§6.2.1)
# https://datatracker.ietf.org/doc/html/rfc5424#section-6.2.1
_SEVERITY_MAP: dict[str, Severity] = {
    "DEBUG": Severity.DEBUG,
    "INFO": Severity.INFO,
    "NOTICE": Severity.NOTICE,
    "WARN": Severity.WARNING,
    "ERROR": Severity.ERROR,
    "CRITICAL": Severity.CRITICAL,
}


def severity_for_level(level: Any) -> Severity:
    """Map a level name (raw or canonical) to its syslog :class:`Severity`.

    Unknown levels map to :attr:`Severity.INFO`.
    """
    raw = str(level).lower()
    return _SEVERITY_MAP.get(_LEVEL_MAP.get(raw, raw.upper()), Severity.INFO)


def add_app_name(
    app_name: str,
) -> Callable[[Any, str, dict[str, Any]], dict[str, Any]]:
    """Return a processor that adds an ``app_name`` field to every log record."""

    def _processor(
        _logger: Any,
        _method_name: str,
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        event_dict.setdefault("app_name", app_name)
        return event_dict

    return _processor


def normalize_level(
    _logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Normalize the log level to a canonical string."""
    raw_level = event_dict.get("level", method_name)
    raw_level_str = str(raw_level).lower()
    event_dict["level"] = _LEVEL_MAP.get(raw_level_str, raw_level_str.upper())
    return event_dict


def add_syslog_severity(
    _logger: Any,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Add RFC 5424 syslog ``severity`` code (numeric) to the event.

    Must run **after** :func:`normalize_level`.  An explicit ``severity``
    already present in the event is kept.  Defaults to ``6``
    (Informational) for unknown levels.
    """
    if "severity" not in event_dict:
        level = event_dict.get("level", "INFO")
        event_dict["severity"] = int(_SEVERITY_MAP.get(level, Severity.INFO))
    return event_dict


def ensure_event_is_str(
    _logger: Any,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Ensure the main log message (``event``) is a string."""
    event = event_dict.get("event")
    if event is not None and not isinstance(event, str):
        event_dict["event"] = str(event)
    return event_dict
