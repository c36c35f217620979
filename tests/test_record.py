"""Tests for structsyslog.record."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import pytest

from structsyslog.defaults import DEFAULT_APP_NAME, DEFAULT_HOSTNAME, DEFAULT_PROCESS_ID
from structsyslog.errors import ConfigurationError, InvalidValueError
from structsyslog.levels import Facility, Severity
from structsyslog.message import Message, StructuredDataElement, StructuredDataParam
from structsyslog.record import marshal_record, param_value, to_message
from structsyslog.reflection import Registry, default_registry, log_field

TS = datetime(2003, 10, 11, 22, 14, 15, 3000, tzinfo=timezone.utc)


@dataclass
class SuFailed:
    severity: int = 0
    facility: int = 0
    timestamp: datetime | None = None
    hostname: str = ""
    app_name: str = ""
    message_id: str = ""
    message: str = ""


@dataclass
class ApplicationEvent:
    timestamp: datetime = TS
    hostname: str = "mymachine.example.com"
    app_name: str = "evntslog"
    process_id: str = "-"
    message_id: str = "ID47"
    sd_id: str = log_field("exampleSDID@32473", default="")
    iut: int = 3
    eventSource: str = "Application"
    eventID: str = "1011"
    text: str = log_field(",message", default="")


@dataclass
class Ordered:
    timestamp: datetime = TS
    b: str = log_field("1@x", default="b-value")
    a: str = log_field("2@y", default="a-value")
    c: str = log_field("1@x", default="c-value")


@dataclass
class Optional_:
    timestamp: datetime = TS
    detail: str = log_field(",omitempty", default="")
    count: int = log_field(",omitempty", default=0)
    always: str = ""


@dataclass
class Escaped:
    timestamp: datetime = TS
    name: str = ""


@dataclass
class Minimal:
    user: str = "alice"


class TestToMessage:
    def test_rfc_example(self) -> None:
        record = SuFailed(
            severity=Severity.CRITICAL,
            facility=Facility.AUTH,
            timestamp=TS,
            hostname="mymachine.example.com",
            app_name="su",
            message_id="ID47",
            message="'su root' failed for lonvick on /dev/pts/8",
        )
        assert marshal_record(record) == (
            b"<34>1 2003-10-11T22:14:15.003Z mymachine.example.com su "
            + DEFAULT_PROCESS_ID.encode()
            + b" ID47 - 'su root' failed for lonvick on /dev/pts/8"
        )

    def test_structured_data_example(self) -> None:
        encoded = marshal_record(ApplicationEvent(text="An application event log entry..."))
        assert b' ID47 [exampleSDID@32473 iut="3" eventSource="Application" eventID="1011"] An' in encoded

    def test_defaults_for_missing_roles(self) -> None:
        message = to_message(Minimal())
        assert message.severity == Severity.INFO
        assert message.facility == Facility.LOCAL0
        assert message.hostname == DEFAULT_HOSTNAME
        assert message.app_name == DEFAULT_APP_NAME
        assert message.process_id == DEFAULT_PROCESS_ID
        assert message.message_id == "Minimal"
        assert message.message == b""
        assert isinstance(message.timestamp, datetime)
        assert message.timestamp.tzinfo is not None
        assert message.structured_data == (
            StructuredDataElement("0@local", (StructuredDataParam("user", "alice"),)),
        )

    def test_zero_values_take_defaults(self) -> None:
        @dataclass
        class Tagged:
            severity: int = log_field("err", default=0)
            facility: int = log_field("mail", default=0)
            app_name: str = log_field("mailer", default="")
            message_id: str = log_field("BOUNCE", default="")

        message = to_message(Tagged())
        assert message.severity == Severity.ERROR
        assert message.facility == Facility.MAIL
        assert message.app_name == "mailer"
        assert message.message_id == "BOUNCE"

        message = to_message(Tagged(severity=Severity.DEBUG, app_name="other"))
        assert message.severity == Severity.DEBUG
        assert message.app_name == "other"

    def test_grouping_preserves_first_seen_order(self) -> None:
        encoded = marshal_record(Ordered())
        assert encoded.endswith(b'[1@x b="b-value" c="c-value"][2@y a="a-value"]')

    def test_omit_empty(self) -> None:
        encoded = marshal_record(Optional_())
        assert encoded.endswith(b'[0@local always=""]')

        encoded = marshal_record(Optional_(detail="disk full", count=2))
        assert encoded.endswith(b'[0@local detail="disk full" count="2" always=""]')

    def test_escaping_through_record(self) -> None:
        assert marshal_record(Escaped(name="back\\slash")).endswith(rb'[0@local name="back\\slash"]')
        assert marshal_record(Escaped(name='quote"')).endswith(rb'[0@local name="quote\""]')
        assert marshal_record(Escaped(name="bracket]")).endswith(rb'[0@local name="bracket\]"]')

    def test_bytes_body(self) -> None:
        @dataclass
        class Raw:
            timestamp: datetime = TS
            message: bytes = b"\x00raw"

        assert marshal_record(Raw()).endswith(b" - \x00raw")

    def test_integer_nanosecond_timestamp(self) -> None:
        @dataclass
        class Nano:
            timestamp: int = 1_065_910_455_003_000_001

        assert b" 2003-10-11T22:14:15.003000001Z " in marshal_record(Nano())

    def test_uses_given_registry(self) -> None:
        registry = Registry()
        to_message(Minimal(), registry=registry)
        assert Minimal in registry
        assert Minimal not in default_registry

    def test_returns_message(self) -> None:
        assert isinstance(to_message(Minimal()), Message)


class TestTypeMismatch:
    @pytest.mark.parametrize(
        ("kwargs", "field_name"),
        [
            ({"severity": "high"}, "severity"),
            ({"severity": True}, "severity"),
            ({"facility": 1.5}, "facility"),
            ({"hostname": 42}, "hostname"),
            ({"timestamp": "now"}, "timestamp"),
            ({"message": 3.0}, "message"),
        ],
    )
    def test_role_type_mismatch(self, kwargs: dict[str, Any], field_name: str) -> None:
        with pytest.raises(ConfigurationError, match=f"SuFailed.{field_name}"):
            to_message(SuFailed(**kwargs))

    def test_non_dataclass_record(self) -> None:
        with pytest.raises(ConfigurationError):
            to_message(object())


class TestValidationAfterAdapting:
    def test_out_of_range_severity(self) -> None:
        with pytest.raises(InvalidValueError, match="Severity"):
            marshal_record(SuFailed(severity=12, timestamp=TS))

    def test_long_default_message_id(self) -> None:
        @dataclass
        class AVeryLongRecordTypeNameThatExceedsLimits:
            timestamp: datetime = TS

        with pytest.raises(InvalidValueError, match="MessageID"):
            marshal_record(AVeryLongRecordTypeNameThatExceedsLimits())

    def test_long_sd_names_toggle(self) -> None:
        @dataclass
        class LongNames:
            timestamp: datetime = TS
            a_parameter_name_longer_than_thirty_two: str = "x"

        with pytest.raises(InvalidValueError, match="StructuredData/Name"):
            marshal_record(LongNames())
        assert marshal_record(LongNames(), allow_long_sd_names=True).endswith(
            b'[0@local a_parameter_name_longer_than_thirty_two="x"]'
        )


class TestParamValue:
    def test_scalars(self) -> None:
        assert param_value("s") == "s"
        assert param_value(None) == ""
        assert param_value(True) == "true"
        assert param_value(False) == "false"
        assert param_value(7) == "7"
        assert param_value(2.5) == "2.5"
        assert param_value(b"caf\xc3\xa9") == "café"

    def test_invalid_utf8_bytes_fail_validation(self) -> None:
        @dataclass
        class Bad:
            timestamp: datetime = TS
            blob: bytes = b"\xff"

        with pytest.raises(InvalidValueError, match="StructuredData/Value"):
            marshal_record(Bad())

    def test_containers_as_json(self) -> None:
        assert param_value({"a": [1, 2]}) == '{"a":[1,2]}'

    def test_unknown_objects_stringified(self) -> None:
        class Thing:
            def __str__(self) -> str:
                return "thing"

        assert param_value(Thing()) == '"thing"'
