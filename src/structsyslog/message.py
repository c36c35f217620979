"""The RFC 5424 wire-format value.

These classes are plain data.  Validation and encoding live in
:mod:`structsyslog.encoder`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TypeAlias

Timestamp: TypeAlias = "datetime | int"
"""An aware :class:`~datetime.datetime`, or integer nanoseconds since the epoch (UTC)."""


@dataclass(frozen=True)
class StructuredDataParam:
    """One ``name="value"`` pair of a structured-data element.

    Attributes:
        name: The PARAM-NAME, an SD-NAME.
        value: The unescaped PARAM-VALUE.  Escaping happens on encoding.
    """

    name: str
    value: str


@dataclass(frozen=True)
class StructuredDataElement:
    """A single ``[ID name="value" ...]`` block.

    Attributes:
        id: The SD-ID, e.g. ``exampleSDID@32473``.
        parameters: Parameters in encoding order.
    """

    id: str
    parameters: tuple[StructuredDataParam, ...] = ()


@dataclass(frozen=True)
class Message:
    """An RFC 5424 syslog message.

    Empty ``hostname``, ``app_name``, ``process_id`` and ``message_id`` are
    encoded as the nil value ``-``.  ``message`` is appended verbatim.
    """

    timestamp: Timestamp
    severity: int = 6
    facility: int = 16
    hostname: str = ""
    app_name: str = ""
    process_id: str = ""
    message_id: str = ""
    structured_data: tuple[StructuredDataElement, ...] = ()
    message: bytes = b""

    @property
    def priority(self) -> int:
        """The PRI value, ``severity | facility << 3``."""
        return self.severity | (self.facility << 3)
