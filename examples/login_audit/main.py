"""Declare audit records as dataclasses and emit them as RFC 5424 lines."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from datetime import datetime, timezone

import structlog

from structsyslog import Severity, configure_structlog, log_field, marshal_record, register

# 1. Application logs go through structlog and come out as syslog lines
configure_structlog(app_name="login-audit", level="DEBUG")
log = structlog.get_logger(__name__)


# 2. Audit records are declared once; bad tags fail at import
@register
@dataclass
class LoginFailed:
    user: str
    severity: int = log_field("warning", default=0)
    facility: int = log_field("authpriv", default=0)
    timestamp: datetime | None = None
    message_id: str = log_field("LOGIN", default="")
    sd_id: str = log_field("auth@32473", default="")
    attempts: int = 1
    reason: str = log_field(",omitempty", default="")
    address: str = log_field("1@origin ip", default="")
    text: str = log_field(",message", default="")


if __name__ == "__main__":
    record = LoginFailed(
        user="alice",
        attempts=3,
        address="192.0.2.10",
        timestamp=datetime.now(timezone.utc),
        text="authentication failure",
    )
    sys.stdout.buffer.write(marshal_record(record) + b"\n")
    sys.stdout.flush()

    log.info("audit record written", user=record.user)
    record.severity = Severity.ALERT
    log.warning("escalated", severity=int(record.severity))
