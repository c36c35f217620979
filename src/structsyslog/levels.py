"""RFC 5424 severity and facility codes.

https://datatracker.ietf.org/doc/html/rfc5424#section-6.2.1
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import IntEnum
from types import MappingProxyType


class Severity(IntEnum):
    EMERGENCY = 0
    ALERT = 1
    CRITICAL = 2
    ERROR = 3
    WARNING = 4
    NOTICE = 5
    INFO = 6
    DEBUG = 7


class Facility(IntEnum):
    KERN = 0
    USER = 1
    MAIL = 2
    DAEMON = 3
    AUTH = 4
    SYSLOG = 5
    LPR = 6
    NEWS = 7
    UUCP = 8
    CRON = 9
    AUTHPRIV = 10
    FTP = 11
    NTP = 12
    AUDIT = 13
    ALERT = 14
    CLOCK = 15
    LOCAL0 = 16
    LOCAL1 = 17
    LOCAL2 = 18
    LOCAL3 = 19
    LOCAL4 = 20
    LOCAL5 = 21
    LOCAL6 = 22
    LOCAL7 = 23


SEVERITY_NAMES: Mapping[str, Severity] = MappingProxyType(
    {
        **{member.name.lower(): member for member in Severity},
        # syslog(3) keywords
        "emerg": Severity.EMERGENCY,
        "crit": Severity.CRITICAL,
        "err": Severity.ERROR,
        "warn": Severity.WARNING,
    }
)

FACILITY_NAMES: Mapping[str, Facility] = MappingProxyType(
    {
        **{member.name.lower(): member for member in Facility},
        "security": Facility.AUTH,
        "cron2": Facility.CLOCK,
    }
)


def lookup_severity(name: str) -> Severity | None:
    """Return the :class:`Severity` called *name* (case-insensitive), or ``None``."""
    return SEVERITY_NAMES.get(name.strip().lower())


def lookup_facility(name: str) -> Facility | None:
    """Return the :class:`Facility` called *name* (case-insensitive), or ``None``."""
    return FACILITY_NAMES.get(name.strip().lower())
