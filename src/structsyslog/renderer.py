"""Render structlog event dicts as RFC 5424 syslog lines.

The renderer is the last processor of a chain.  Well-known keys fill the
syslog header; everything else becomes a parameter of a single
structured-data element::

    <14>1 2024-05-01T10:00:00.5Z web01 api 4242 - [0@local logger="app" user="alice"] login

Keys that are not valid SD-NAMEs (for example ones containing spaces) are
skipped.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from structsyslog.defaults import (
    DEFAULT_APP_NAME,
    DEFAULT_HOSTNAME,
    DEFAULT_PROCESS_ID,
    DEFAULT_STRUCTURED_DATA_ID,
)
from structsyslog.encoder import (
    APP_NAME_MAX_LENGTH,
    HOSTNAME_MAX_LENGTH,
    is_printable_us_ascii,
    is_valid_sd_name,
    marshal,
)
from structsyslog.errors import ConfigurationError
from structsyslog.levels import Facility
from structsyslog.message import Message, StructuredDataElement, StructuredDataParam
from structsyslog.processors import severity_for_level
from structsyslog.record import param_value
from structsyslog.settings import get_settings


def _check_header(name: str, value: str, max_length: int) -> str:
    if not isinstance(value, str) or not is_printable_us_ascii(value) or len(value) > max_length:
        msg = f"{name} must be at most {max_length} printable US-ASCII characters, got {value!r}"
        raise ConfigurationError(msg)
    return value


def _to_timestamp(value: Any) -> datetime | int:
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            pass
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            pass
    return datetime.now(timezone.utc)


class RFC5424Renderer:
    """Structlog renderer producing one RFC 5424 line per event.

    Parameters
    ----------
    app_name:
        APP-NAME when the event has no ``app_name`` key.  Defaults to the
        executable name.
    hostname:
        HOSTNAME.  Defaults to the machine's hostname.
    facility:
        Facility of every message.
    sd_id:
        SD-ID of the element holding the event's extra keys.
    allow_long_sd_names:
        Overrides the process-wide setting when not ``None``.

    Header fields read from the event: ``severity`` (or ``level``),
    ``timestamp``, ``app_name``, ``msg_id`` and ``message`` (or ``event``).

    Raises
    ------
    ConfigurationError
        If *app_name* or *hostname* is not printable US-ASCII within its
        length limit, or *sd_id* is not a valid SD-NAME.
    """

    def __init__(
        self,
        *,
        app_name: str | None = None,
        hostname: str | None = None,
        facility: Facility = Facility.USER,
        sd_id: str = DEFAULT_STRUCTURED_DATA_ID,
        allow_long_sd_names: bool | None = None,
    ) -> None:
        self._app_name = _check_header(
            "app_name",
            DEFAULT_APP_NAME if app_name is None else app_name,
            APP_NAME_MAX_LENGTH,
        )
        self._hostname = _check_header(
            "hostname",
            DEFAULT_HOSTNAME if hostname is None else hostname,
            HOSTNAME_MAX_LENGTH,
        )
        self._facility = facility
        self._allow_long = allow_long_sd_names
        if not is_valid_sd_name(sd_id, allow_long=self._allow_long_sd_names()):
            msg = f"sd_id must be a valid SD-NAME, got {sd_id!r}"
            raise ConfigurationError(msg)
        self._sd_id = sd_id

    def _allow_long_sd_names(self) -> bool:
        if self._allow_long is not None:
            return self._allow_long
        return get_settings().allow_long_sd_names

    def __call__(
        self,
        _logger: Any,
        method_name: str,
        event_dict: dict[str, Any],
    ) -> str:
        fields = dict(event_dict)
        level = fields.pop("level", method_name)
        severity = fields.pop("severity", None)
        if isinstance(severity, bool) or not isinstance(severity, int):
            severity = severity_for_level(level)

        body = fields.pop("message", None)
        event = fields.pop("event", None)
        if body is None:
            body = event

        allow_long = self._allow_long_sd_names()
        params = tuple(
            StructuredDataParam(key, param_value(value))
            for key, value in fields.items()
            if key not in ("timestamp", "app_name", "msg_id")
            and is_valid_sd_name(key, allow_long=allow_long)
        )

        message = Message(
            timestamp=_to_timestamp(fields.get("timestamp")),
            severity=severity,
            facility=self._facility,
            hostname=self._hostname,
            app_name=str(fields.get("app_name") or self._app_name),
            process_id=DEFAULT_PROCESS_ID,
            message_id=str(fields.get("msg_id") or ""),
            structured_data=(StructuredDataElement(self._sd_id, params),) if params else (),
            message=b"" if body is None else str(body).encode("utf-8"),
        )
        return marshal(message, allow_long_sd_names=allow_long).decode("utf-8", errors="replace")
