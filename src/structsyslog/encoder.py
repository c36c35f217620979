"""RFC 5424 validation and encoding.

Produces ``<PRI>1 TIMESTAMP HOSTNAME APP-NAME PROCID MSGID SD[ MSG]``:

- Empty header fields and an empty structured-data list are written as the
  nil value ``-``.
- Structured-data parameter values are escaped (``\\``, ``"`` and ``]``).
- ``MSG`` and its leading space are omitted when the body is empty.

https://datatracker.ietf.org/doc/html/rfc5424#section-6
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any

from structsyslog.errors import InvalidValueError
from structsyslog.message import Message, Timestamp
from structsyslog.settings import get_settings

NILVALUE = "-"
SD_NAME_MAX_LENGTH = 32

HOSTNAME_MAX_LENGTH = 255
APP_NAME_MAX_LENGTH = 48
PROCESS_ID_MAX_LENGTH = 128
MESSAGE_ID_MAX_LENGTH = 32

# (property, attribute, max length)
_HEADER_FIELDS: tuple[tuple[str, str, int], ...] = (
    ("Hostname", "hostname", HOSTNAME_MAX_LENGTH),
    ("AppName", "app_name", APP_NAME_MAX_LENGTH),
    ("ProcessID", "process_id", PROCESS_ID_MAX_LENGTH),
    ("MessageID", "message_id", MESSAGE_ID_MAX_LENGTH),
)

_PRINTUSASCII = re.compile(r"[\x21-\x7e]*")
# PRINTUSASCII except '=', ']' and '"'
_SD_NAME = re.compile(r"[\x21\x23-\x3c\x3e-\x5c\x5e-\x7e]+")
_SD_PARAM_SPECIAL = re.compile(r'[\\"\]]')


def _nilify(value: str) -> str:
    return value or NILVALUE


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_printable_us_ascii(value: str) -> bool:
    """Return ``True`` if every character is in the range 33–126."""
    return _PRINTUSASCII.fullmatch(value) is not None


def is_valid_sd_name(value: str, *, allow_long: bool = False) -> bool:
    """Return ``True`` if *value* is a valid SD-NAME.

    SD-NAMEs are 1–32 printable US-ASCII characters other than ``=``,
    ``]`` and ``"``.  *allow_long* lifts the 32-character cap.
    """
    if not isinstance(value, str):
        return False
    if not allow_long and len(value) > SD_NAME_MAX_LENGTH:
        return False
    return _SD_NAME.fullmatch(value) is not None


def _is_valid_utf8(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def escape_sd_param(value: str) -> str:
    """Escape ``\\``, ``"`` and ``]`` in a PARAM-VALUE with a backslash.

    Returns *value* itself when nothing needs escaping.
    """
    if _SD_PARAM_SPECIAL.search(value) is None:
        return value
    return _SD_PARAM_SPECIAL.sub(r"\\\g<0>", value)


def _split_timestamp(timestamp: Any) -> tuple[datetime, int]:
    """Return the aware datetime and nanosecond fraction of *timestamp*."""
    if isinstance(timestamp, datetime):
        dt = timestamp if timestamp.tzinfo is not None else timestamp.replace(tzinfo=timezone.utc)
        return dt, dt.microsecond * 1000
    if not _is_int(timestamp):
        raise InvalidValueError("Timestamp", timestamp)
    seconds, nanos = divmod(timestamp, 1_000_000_000)
    try:
        dt = datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        raise InvalidValueError("Timestamp", timestamp) from None
    return dt, nanos


def format_timestamp(timestamp: Timestamp) -> str:
    """Format *timestamp* as RFC 3339 with up to nanosecond precision.

    Trailing zeros of the fraction are trimmed and the fraction is left out
    entirely when it is zero.  A zero UTC offset is written as ``Z``.
    Naive datetimes are taken to be UTC; integers are nanoseconds since the
    Unix epoch.
    """
    dt, nanos = _split_timestamp(timestamp)

    text = (
        f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}"
        f"T{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}"
    )
    if nanos:
        text += "." + f"{nanos:09d}".rstrip("0")

    offset = dt.utcoffset()
    offset_minutes = int(offset.total_seconds()) // 60 if offset is not None else 0
    if offset_minutes == 0:
        return text + "Z"
    sign = "-" if offset_minutes < 0 else "+"
    hours, minutes = divmod(abs(offset_minutes), 60)
    return f"{text}{sign}{hours:02d}:{minutes:02d}"


def validate(message: Message, *, allow_long_sd_names: bool | None = None) -> None:
    """Check *message* against the RFC 5424 field constraints.

    Raises
    ------
    InvalidValueError
        For the first property that violates its constraint.
    """
    if allow_long_sd_names is None:
        allow_long_sd_names = get_settings().allow_long_sd_names

    if not _is_int(message.severity) or not 0 <= message.severity <= 8:
        raise InvalidValueError("Severity", message.severity)
    if not _is_int(message.facility) or not 0 <= message.facility <= 23:
        raise InvalidValueError("Facility", message.facility)
    _split_timestamp(message.timestamp)

    for prop, attr, max_length in _HEADER_FIELDS:
        value = getattr(message, attr)
        if (
            not isinstance(value, str)
            or not is_printable_us_ascii(value)
            or len(value) > max_length
        ):
            raise InvalidValueError(prop, value)

    for element in message.structured_data:
        if not is_valid_sd_name(element.id, allow_long=allow_long_sd_names):
            raise InvalidValueError("StructuredData/ID", element.id)
        for param in element.parameters:
            if not is_valid_sd_name(param.name, allow_long=allow_long_sd_names):
                raise InvalidValueError("StructuredData/Name", param.name)
            if not _is_valid_utf8(param.value):
                raise InvalidValueError("StructuredData/Value", param.value)

    if not isinstance(message.message, (bytes, bytearray, memoryview)):
        raise InvalidValueError("Message", message.message)


def marshal(message: Message, *, allow_long_sd_names: bool | None = None) -> bytes:
    """Validate *message* and return its RFC 5424 encoding.

    Raises
    ------
    InvalidValueError
        If *message* fails :func:`validate`.  Nothing is encoded in that case.
    """
    validate(message, allow_long_sd_names=allow_long_sd_names)

    parts = [
        f"<{message.priority}>1 {format_timestamp(message.timestamp)} "
        f"{_nilify(message.hostname)} {_nilify(message.app_name)} "
        f"{_nilify(message.process_id)} {_nilify(message.message_id)} "
    ]
    if not message.structured_data:
        parts.append(NILVALUE)
    for element in message.structured_data:
        parts.append(f"[{element.id}")
        for param in element.parameters:
            parts.append(f' {param.name}="{escape_sd_param(param.value)}"')
        parts.append("]")

    encoded = "".join(parts).encode("utf-8")
    if message.message:
        return encoded + b" " + bytes(message.message)
    return encoded
