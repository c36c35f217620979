"""Process-wide encoder settings.

RFC 5424 caps SD-NAMEs (element IDs and parameter names) at 32 characters.
Some collectors accept longer names, so the cap can be lifted explicitly with
``configure(allow_long_sd_names=True)`` or ``SYSLOG_ALLOW_LONG_SD_NAMES=1``.
Doing so produces messages that violate RFC 5424; strict is the default.
"""

from __future__ import annotations

import os
import threading
from collections.abc import Mapping
from dataclasses import dataclass, replace

ALLOW_LONG_SD_NAMES_ENV = "SYSLOG_ALLOW_LONG_SD_NAMES"

_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class Settings:
    """Encoder settings.

    Parameters
    ----------
    allow_long_sd_names:
        Accept SD-NAMEs longer than 32 characters (not RFC 5424 compliant).
    """

    allow_long_sd_names: bool = False


_settings = Settings()
_lock = threading.Lock()


def get_settings() -> Settings:
    """Return the current process-wide :class:`Settings`."""
    return _settings


def configure(*, allow_long_sd_names: bool | None = None) -> Settings:
    """Update the process-wide settings and return the new value.

    Arguments left as ``None`` keep their current value.
    """
    global _settings
    with _lock:
        if allow_long_sd_names is not None:
            _settings = replace(_settings, allow_long_sd_names=allow_long_sd_names)
        return _settings


def settings_from_env(environ: Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from environment variables.

    Reads ``SYSLOG_ALLOW_LONG_SD_NAMES`` (``"1"``/``"true"`` enables).
    """
    env = os.environ if environ is None else environ
    raw = env.get(ALLOW_LONG_SD_NAMES_ENV, "")
    return Settings(allow_long_sd_names=raw.strip().lower() in _TRUTHY)


def reset_settings() -> None:
    """Restore the strict defaults."""
    global _settings
    with _lock:
        _settings = Settings()
