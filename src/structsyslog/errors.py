"""Error types raised while reflecting record types and encoding messages.

There are two kinds:

- :class:`InvalidValueError` is raised per message when a field violates an
  RFC 5424 constraint.  The caller can repair the value and retry.
- :class:`ConfigurationError` is raised when a record type is declared
  incorrectly (bad ``log`` tag, unknown severity name, wrong field type).
  It signals a programming mistake and should not be retried.
"""

from __future__ import annotations

from typing import Any


class StructSyslogError(Exception):
    """Base class for every error raised by :mod:`structsyslog`."""


class InvalidValueError(StructSyslogError, ValueError):
    """A message property does not satisfy its RFC 5424 constraint."""

    def __init__(self, property: str, value: Any) -> None:  # noqa: A002
        self.property = property
        self.value = value
        super().__init__(f"Message cannot be serialized because {property} is invalid: {value!r}")


class ConfigurationError(StructSyslogError, TypeError):
    """A record type or its ``log`` tags are declared incorrectly."""
