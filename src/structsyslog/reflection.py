"""Derive a :class:`FieldMap` from a record type's fields and ``log`` tags.

A record type is a dataclass.  Fields named after a syslog header role
(``severity``, ``facility``, ``timestamp``, ``hostname``, ``app_name``,
``process_id``, ``message_id``, ``message``) fill that role.  Every other
public field becomes a structured-data parameter.  The ``log`` entry of a
field's metadata refines this::

    @register
    @dataclass
    class LoginFailed:
        user: str                                               # [0@local user="..."]
        severity: int = log_field("warning", default=0)         # default severity
        message_id: str = log_field("LOGIN", default="")        # default MSGID
        sd_id: str = log_field("auth@32473", default="")        # default SD-ID
        reason: str = log_field(",omitempty", default="")       # [auth@32473 reason="..."]
        origin: str = log_field("1@origin ip", default="")      # [1@origin ip="..."]
        text: str = log_field(",message", default="")

Reflection runs once per type.  :class:`Registry` caches the result so that
adapting many instances of the same type never repeats the analysis.
"""

from __future__ import annotations

import dataclasses
import logging
import re
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, TypeVar

from structsyslog.defaults import (
    DEFAULT_APP_NAME,
    DEFAULT_FACILITY,
    DEFAULT_SEVERITY,
    DEFAULT_STRUCTURED_DATA_ID,
)
from structsyslog.encoder import (
    APP_NAME_MAX_LENGTH,
    MESSAGE_ID_MAX_LENGTH,
    is_printable_us_ascii,
    is_valid_sd_name,
)
from structsyslog.errors import ConfigurationError
from structsyslog.levels import Facility, Severity, lookup_facility, lookup_severity

TAG_KEY = "log"

_ATTR_OMITEMPTY = "omitempty"
_ATTR_MESSAGE = "message"

# "<digits>@<token>" optionally followed by " <param name>"
_SD_TAG = re.compile(r"(\d+@\S+)(?: (.*))?")

_log = logging.getLogger(__name__)

T = TypeVar("T", bound=type)


@dataclass(frozen=True)
class FieldSpec:
    """A declared record field, as seen by :func:`reflect_fields`."""

    name: str
    tag: str = ""
    public: bool = True


@dataclass(frozen=True)
class StructuredDataField:
    """A record field rendered as a structured-data parameter.

    Attributes:
        field: Attribute name on the record.
        sd_id: Element the parameter belongs to.
        name: Parameter name.
        omit_empty: Drop the parameter when the value is empty or zero.
    """

    field: str
    sd_id: str
    name: str
    omit_empty: bool = False


@dataclass(frozen=True)
class FieldMap:
    """Where each syslog role lives on a record type, and its defaults.

    ``*_field`` attributes name the record attribute supplying the role, or
    are ``None`` when the type has no such field.
    """

    record_type: str
    severity_field: str | None = None
    severity_default: Severity = DEFAULT_SEVERITY
    facility_field: str | None = None
    facility_default: Facility = DEFAULT_FACILITY
    timestamp_field: str | None = None
    hostname_field: str | None = None
    app_name_field: str | None = None
    app_name_default: str = DEFAULT_APP_NAME
    process_id_field: str | None = None
    message_id_field: str | None = None
    message_id_default: str = ""
    message_field: str | None = None
    sd_id_default: str = ""
    structured_data_fields: tuple[StructuredDataField, ...] = ()

    def structured_data_field(self, sd_id: str, name: str) -> StructuredDataField | None:
        """Return the field rendered as parameter *name* of element *sd_id*."""
        for sd_field in self.structured_data_fields:
            if sd_field.sd_id == sd_id and sd_field.name == name:
                return sd_field
        return None


def _derive_param_name(field_name: str) -> str:
    return field_name[:1].lower() + field_name[1:]


def _check_sd_name(kind: str, value: str, type_name: str, field_name: str) -> None:
    # the length cap is left to encoding, where the long-name setting applies
    if not is_valid_sd_name(value, allow_long=True):
        msg = f"invalid {kind} {value!r} in log tag of {type_name}.{field_name}"
        raise ConfigurationError(msg)


def _check_header_default(tag: str, max_length: int, type_name: str, field_name: str) -> None:
    if not is_printable_us_ascii(tag) or len(tag) > max_length:
        msg = (
            f"log tag of {type_name}.{field_name} must be at most {max_length} "
            f"printable US-ASCII characters, got {tag!r}"
        )
        raise ConfigurationError(msg)


def reflect_fields(type_name: str, fields: Iterable[FieldSpec]) -> FieldMap:
    """Classify *fields* of the record type *type_name*.

    Raises
    ------
    ConfigurationError
        If a tag names an unknown severity or facility, carries an unknown
        attribute, yields an SD-ID or parameter name that is not a valid
        SD-NAME, or sets an APP-NAME or MSGID default that is not printable
        US-ASCII within its length limit.
    """
    roles: dict[str, Any] = {"message_id_default": type_name}
    sd_id_default = ""
    sd_fields: list[StructuredDataField] = []

    for spec in fields:
        name, tag = spec.name, spec.tag

        if name == "severity":
            roles["severity_field"] = name
            if tag:
                severity = lookup_severity(tag)
                if severity is None:
                    msg = f"unknown severity {tag!r} in log tag of {type_name}.{name}"
                    raise ConfigurationError(msg)
                roles["severity_default"] = severity
        elif name == "facility":
            roles["facility_field"] = name
            if tag:
                facility = lookup_facility(tag)
                if facility is None:
                    msg = f"unknown facility {tag!r} in log tag of {type_name}.{name}"
                    raise ConfigurationError(msg)
                roles["facility_default"] = facility
        elif name in ("timestamp", "hostname", "process_id", "message"):
            roles[f"{name}_field"] = name
        elif name in ("app_name", "message_id"):
            roles[f"{name}_field"] = name
            if tag:
                max_length = APP_NAME_MAX_LENGTH if name == "app_name" else MESSAGE_ID_MAX_LENGTH
                _check_header_default(tag, max_length, type_name, name)
                roles[f"{name}_default"] = tag
        elif name == "sd_id":
            if tag:
                _check_sd_name("SD-ID", tag, type_name, name)
                sd_id_default = tag
        else:
            if not tag and not spec.public:
                continue

            name_part, *attrs = tag.split(",")

            if not name_part and attrs[:1] == [_ATTR_MESSAGE]:
                if len(attrs) > 1:
                    msg = f"unknown log tag attributes {attrs[1:]!r} on {type_name}.{name}"
                    raise ConfigurationError(msg)
                roles["message_field"] = name
                continue

            sd_id = sd_id_default or DEFAULT_STRUCTURED_DATA_ID
            param_name = name_part
            match = _SD_TAG.fullmatch(name_part)
            if match is not None:
                sd_id = match.group(1)
                param_name = match.group(2) or ""
            if not param_name:
                param_name = _derive_param_name(name)
            _check_sd_name("SD-ID", sd_id, type_name, name)
            _check_sd_name("parameter name", param_name, type_name, name)

            omit_empty = False
            for attr in attrs:
                if attr != _ATTR_OMITEMPTY:
                    msg = f"unknown log tag attribute {attr!r} on {type_name}.{name}"
                    raise ConfigurationError(msg)
                omit_empty = True

            sd_fields.append(StructuredDataField(name, sd_id, param_name, omit_empty))

    field_map = FieldMap(
        record_type=type_name,
        sd_id_default=sd_id_default,
        structured_data_fields=tuple(sd_fields),
        **roles,
    )
    _log.debug(
        "Reflected record type %s: %d structured-data field(s)",
        type_name,
        len(sd_fields),
    )
    return field_map


def _tag_of(field: dataclasses.Field[Any], type_name: str) -> str:
    tag = field.metadata.get(TAG_KEY, "")
    if not isinstance(tag, str):
        msg = f"log tag of {type_name}.{field.name} must be a string, got {type(tag).__name__}"
        raise ConfigurationError(msg)
    return tag


def reflect_type(record_type: type) -> FieldMap:
    """Compute the :class:`FieldMap` of a dataclass type, without caching."""
    if not isinstance(record_type, type) or not dataclasses.is_dataclass(record_type):
        msg = f"record type must be a dataclass, got {record_type!r}"
        raise ConfigurationError(msg)
    type_name = record_type.__name__
    specs = [
        FieldSpec(f.name, _tag_of(f, type_name), public=not f.name.startswith("_"))
        for f in dataclasses.fields(record_type)
    ]
    return reflect_fields(type_name, specs)


def log_field(tag: str = "", **kwargs: Any) -> Any:
    """Declare a dataclass field carrying a ``log`` tag.

    Accepts the same keyword arguments as :func:`dataclasses.field`.
    """
    metadata = {**kwargs.pop("metadata", {}), TAG_KEY: tag}
    return dataclasses.field(metadata=metadata, **kwargs)


class Registry:
    """Thread-safe cache of :class:`FieldMap` keyed by record type.

    Two threads may reflect the same type concurrently; the first result
    stored wins and is what every caller receives.  Entries are never
    replaced.
    """

    def __init__(self, reflector: Callable[[type], FieldMap] = reflect_type) -> None:
        self._reflector = reflector
        self._field_maps: dict[type, FieldMap] = {}
        self._lock = threading.Lock()

    def field_map(self, record_type: type) -> FieldMap:
        """Return the cached :class:`FieldMap` for *record_type*, computing it once."""
        cached = self._field_maps.get(record_type)
        if cached is not None:
            return cached
        computed = self._reflector(record_type)
        with self._lock:
            return self._field_maps.setdefault(record_type, computed)

    def register(self, record_type: T) -> T:
        """Reflect *record_type* now so tag errors surface at declaration.

        Returns *record_type*, so this works as a class decorator.
        """
        self.field_map(record_type)
        return record_type

    def clear(self) -> None:
        with self._lock:
            self._field_maps.clear()

    def __contains__(self, record_type: object) -> bool:
        return record_type in self._field_maps

    def __len__(self) -> int:
        return len(self._field_maps)


default_registry = Registry()


def reflect(record_type: type) -> FieldMap:
    """Return the :class:`FieldMap` for *record_type* from the default registry."""
    return default_registry.field_map(record_type)


def register(record_type: T) -> T:
    """Class decorator registering *record_type* with the default registry."""
    return default_registry.register(record_type)
