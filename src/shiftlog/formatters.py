"""
Log line and header formatting.

Log format:
    SeverityID, [Date Time mSec #pid] SeverityLabel -- ProgName: message

Log sample:
    I, [2026-03-03T02:34:24.895701 #19074]  INFO -- Main: info.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .severity import severity_label

DEFAULT_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S."
HEADER_DATETIME_FORMAT = "%a %b %d %H:%M:%S %Z %Y"
LABEL_WIDTH = 5
MISSING_PROGNAME = "-"


@dataclass(frozen=True)
class LogRecord:
    """One message that passed the threshold, ready to be rendered."""

    severity: int
    timestamp: datetime
    pid: int
    progname: Optional[str]
    payload: str


class LineFormatter:
    """Render LogRecords into newline-terminated lines.

    Args:
        datetime_format: strftime pattern replacing the default
            ``YYYY-MM-DDTHH:MM:SS.uuuuuu`` timestamp. Microseconds are not
            appended to a custom pattern.
    """

    def __init__(self, datetime_format: Optional[str] = None):
        self.datetime_format = datetime_format

    def format_datetime(self, timestamp: datetime) -> str:
        if self.datetime_format is None:
            return timestamp.strftime(DEFAULT_DATETIME_FORMAT) + f"{timestamp.microsecond:06d}"
        return timestamp.strftime(self.datetime_format)

    def format(self, record: LogRecord) -> str:
        label = severity_label(record.severity)
        return "%s, [%s #%d] %*s -- %s: %s\n" % (
            label[0],
            self.format_datetime(record.timestamp),
            record.pid,
            LABEL_WIDTH,
            label,
            MISSING_PROGNAME if record.progname is None else record.progname,
            record.payload,
        )


def format_header(created: datetime, tool: str) -> str:
    """First line of every log file the device creates."""
    if created.tzinfo is None:
        created = created.astimezone()
    return f"# Logfile created on {created.strftime(HEADER_DATETIME_FORMAT)} by {tool}\n"
