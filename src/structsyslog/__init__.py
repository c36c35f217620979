"""structsyslog — RFC 5424 syslog encoding for structured log records."""

from structsyslog.config import configure_structlog, setup_structlog
from structsyslog.errors import ConfigurationError, InvalidValueError, StructSyslogError
from structsyslog.levels import FACILITY_NAMES, SEVERITY_NAMES, Facility, Severity
from structsyslog.encoder import escape_sd_param, format_timestamp, marshal, validate
from structsyslog.message import Message, StructuredDataElement, StructuredDataParam
from structsyslog.processors import add_app_name, add_syslog_severity, normalize_level
from structsyslog.record import marshal_record, to_message
from structsyslog.reflection import (
    FieldMap,
    FieldSpec,
    Registry,
    StructuredDataField,
    default_registry,
    log_field,
    reflect,
    reflect_fields,
    reflect_type,
    register,
)
from structsyslog.renderer import RFC5424Renderer
from structsyslog.settings import Settings, configure, get_settings, settings_from_env

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "FACILITY_NAMES",
    "Facility",
    "FieldMap",
    "FieldSpec",
    "InvalidValueError",
    "Message",
    "RFC5424Renderer",
    "Registry",
    "SEVERITY_NAMES",
    "Settings",
    "Severity",
    "StructSyslogError",
    "StructuredDataElement",
    "StructuredDataField",
    "StructuredDataParam",
    "add_app_name",
    "add_syslog_severity",
    "configure",
    "configure_structlog",
    "default_registry",
    "escape_sd_param",
    "format_timestamp",
    "get_settings",
    "log_field",
    "marshal",
    "marshal_record",
    "normalize_level",
    "reflect",
    "reflect_fields",
    "reflect_type",
    "register",
    "settings_from_env",
    "setup_structlog",
    "to_message",
    "validate",
]
