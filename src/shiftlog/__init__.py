"""
shiftlog -- severity-gated logging to streams or self-rotating log files.

Log files age by size (numbered generations) or by calendar period (dated
copies). Messages may be deferred behind a producer callable that is only
invoked when the record passes the severity threshold.
"""

__version__ = "1.14.0"

from .core import Logger
from .exceptions import (
    InvalidSinkKind,
    LoggerError,
    RotationConflict,
    RotationError,
    RotationIOFailure,
    WriteAfterClose,
)
from .formatters import LineFormatter, LogRecord
from .rotation import CalendarRotation, Period, RotationPolicy, SizeRotation
from .severity import Severity
from .sinks import LogDevice

__all__ = [
    "Logger",
    "LogDevice",
    "Severity",
    "LineFormatter",
    "LogRecord",
    "RotationPolicy",
    "SizeRotation",
    "CalendarRotation",
    "Period",
    "LoggerError",
    "InvalidSinkKind",
    "RotationError",
    "RotationConflict",
    "RotationIOFailure",
    "WriteAfterClose",
]
