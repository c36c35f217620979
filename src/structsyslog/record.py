"""Build :class:`~structsyslog.message.Message` values from record instances."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import orjson

from structsyslog.defaults import DEFAULT_HOSTNAME, DEFAULT_PROCESS_ID
from structsyslog.encoder import marshal
from structsyslog.errors import ConfigurationError
from structsyslog.message import Message, StructuredDataElement, StructuredDataParam
from structsyslog.reflection import FieldMap, Registry, default_registry


def _is_empty(value: Any) -> bool:
    """Zero, empty and ``None`` values are treated as absent."""
    return value is None or not value


class _RoleReader:
    """Reads header roles off one record, checking their types."""

    def __init__(self, field_map: FieldMap, record: Any) -> None:
        self._field_map = field_map
        self._record = record

    def _read(self, field_name: str | None) -> Any:
        if field_name is None:
            return None
        return getattr(self._record, field_name)

    def _mismatch(self, field_name: str | None, expected: str, value: Any) -> ConfigurationError:
        return ConfigurationError(
            f"{self._field_map.record_type}.{field_name} must be {expected}, "
            f"got {type(value).__name__}"
        )

    def int_role(self, field_name: str | None, default: int) -> int:
        value = self._read(field_name)
        if _is_empty(value):
            return default
        if isinstance(value, bool) or not isinstance(value, int):
            raise self._mismatch(field_name, "an int", value)
        return value

    def str_role(self, field_name: str | None, default: str) -> str:
        value = self._read(field_name)
        if _is_empty(value):
            return default
        if not isinstance(value, str):
            raise self._mismatch(field_name, "a str", value)
        return value

    def timestamp(self) -> datetime | int:
        field_name = self._field_map.timestamp_field
        value = self._read(field_name)
        if _is_empty(value):
            return datetime.now(timezone.utc)
        if isinstance(value, datetime) or (isinstance(value, int) and not isinstance(value, bool)):
            return value
        raise self._mismatch(field_name, "a datetime or int nanoseconds", value)

    def body(self) -> bytes:
        field_name = self._field_map.message_field
        value = self._read(field_name)
        if _is_empty(value):
            return b""
        if isinstance(value, str):
            return value.encode("utf-8")
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value)
        raise self._mismatch(field_name, "str or bytes", value)


def param_value(value: Any) -> str:
    """Render a structured-data field value as a PARAM-VALUE string.

    ``bytes`` are decoded as UTF-8 with ``surrogateescape`` so that invalid
    input is rejected by validation rather than silently replaced.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="surrogateescape")
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return orjson.dumps(value, default=str).decode()


def _structured_data(field_map: FieldMap, record: Any) -> tuple[StructuredDataElement, ...]:
    grouped: dict[str, list[StructuredDataParam]] = {}
    for sd_field in field_map.structured_data_fields:
        value = getattr(record, sd_field.field)
        if sd_field.omit_empty and _is_empty(value):
            continue
        grouped.setdefault(sd_field.sd_id, []).append(
            StructuredDataParam(sd_field.name, param_value(value))
        )
    return tuple(StructuredDataElement(sd_id, tuple(params)) for sd_id, params in grouped.items())


def to_message(record: Any, *, registry: Registry | None = None) -> Message:
    """Build the :class:`Message` for *record*.

    Roles that are missing from the record type, or hold an empty or zero
    value, take the defaults from the type's :class:`FieldMap` (severity,
    facility, app name, message ID) or the process (hostname, process ID,
    current time).

    Raises
    ------
    ConfigurationError
        If the record type is not reflectable or a role field holds a value
        of the wrong type.
    """
    fm = (registry if registry is not None else default_registry).field_map(type(record))
    roles = _RoleReader(fm, record)
    return Message(
        timestamp=roles.timestamp(),
        severity=roles.int_role(fm.severity_field, fm.severity_default),
        facility=roles.int_role(fm.facility_field, fm.facility_default),
        hostname=roles.str_role(fm.hostname_field, DEFAULT_HOSTNAME),
        app_name=roles.str_role(fm.app_name_field, fm.app_name_default),
        process_id=roles.str_role(fm.process_id_field, DEFAULT_PROCESS_ID),
        message_id=roles.str_role(fm.message_id_field, fm.message_id_default),
        structured_data=_structured_data(fm, record),
        message=roles.body(),
    )


def marshal_record(
    record: Any,
    *,
    registry: Registry | None = None,
    allow_long_sd_names: bool | None = None,
) -> bytes:
    """Encode *record* as an RFC 5424 message.

    Raises
    ------
    ConfigurationError
        See :func:`to_message`.
    InvalidValueError
        If the resulting message violates RFC 5424.
    """
    return marshal(to_message(record, registry=registry), allow_long_sd_names=allow_long_sd_names)
