"""Process-wide default header values.

Resolved once, when this module is imported.  A failure to obtain the
hostname propagates: every record without an explicit hostname depends on
it, so there is nothing sensible to fall back to.
"""

from __future__ import annotations

import os
import socket
import sys

from structsyslog.levels import Facility, Severity

DEFAULT_SEVERITY = Severity.INFO
DEFAULT_FACILITY = Facility.LOCAL0
DEFAULT_STRUCTURED_DATA_ID = "0@local"

DEFAULT_HOSTNAME: str = socket.gethostname()
DEFAULT_APP_NAME: str = os.path.basename(sys.argv[0]) if sys.argv else ""
DEFAULT_PROCESS_ID: str = str(os.getpid())
