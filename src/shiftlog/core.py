"""
Logger facade.

Composes the severity gate, message resolution, line formatting and the log
device. This is the only class calling code needs.

Usage:
    logger = Logger(sys.stderr)
    logger = Logger("app.log", 10, 102400)      # 10 generations of ~100KB
    logger = Logger("app.log", "daily")          # daily dated copies

    logger.fatal(producer=lambda: "Argument 'foo' not given.")
    logger.add(Severity.ERROR, f"Argument {foo} mismatch.")
    logger.info("initialize", lambda: "Initializing...")
    logger.close()
"""

from __future__ import annotations

import os
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from .encoding import check_encoding, normalize
from .formatters import LineFormatter, LogRecord
from .messages import MessageResolver, Producer, classify
from .rotation import DEFAULT_MAX_BYTES, RotationSpec
from .severity import Severity, passes_threshold
from .sinks import Clock, LogDevice, SinkTarget

if TYPE_CHECKING:
    from .config import LoggerSettings


class Logger:
    """Severity-gated logger writing one line per record.

    Args:
        target: Log file name or writable stream, see ``LogDevice``.
        rotation: Rotation option for file targets, see ``LogDevice``.
        max_bytes: Size threshold for size-based rotation.
        threshold: Records below this severity are dropped.
        progname: Default program name for records.
        datetime_format: strftime pattern for record timestamps.
        encoding: When set, payloads are normalised to this encoding.
    """

    def __init__(
        self,
        target: SinkTarget,
        rotation: RotationSpec = None,
        max_bytes: int = DEFAULT_MAX_BYTES,
        *,
        threshold: int = Severity.DEBUG,
        progname: Optional[str] = None,
        datetime_format: Optional[str] = None,
        encoding: Optional[str] = None,
        clock: Clock = datetime.now,
    ):
        self.threshold = threshold
        self.progname = progname
        self._encoding = check_encoding(encoding)
        self.formatter = LineFormatter(datetime_format)
        self.resolver = MessageResolver()
        self._clock = clock
        self.device: Optional[LogDevice] = LogDevice(target, rotation, max_bytes, clock=clock)

    @classmethod
    def from_settings(cls, settings: Optional["LoggerSettings"] = None, **overrides: Any) -> "Logger":
        """Build a logger from ``LoggerSettings`` (environment by default)."""
        from .config import LoggerSettings

        settings = settings or LoggerSettings()
        kwargs = settings.to_logger_kwargs()
        kwargs.update(overrides)
        return cls(**kwargs)

    @property
    def encoding(self) -> Optional[str]:
        return self._encoding

    @encoding.setter
    def encoding(self, value: Optional[str]) -> None:
        self._encoding = check_encoding(value)

    @property
    def datetime_format(self) -> Optional[str]:
        return self.formatter.datetime_format

    @datetime_format.setter
    def datetime_format(self, value: Optional[str]) -> None:
        self.formatter.datetime_format = value

    def is_enabled(self, severity: int) -> bool:
        return self.device is not None and passes_threshold(severity, self.threshold)

    def add(
        self,
        severity: Optional[int],
        message: Any = None,
        progname: Optional[str] = None,
        producer: Optional[Producer] = None,
    ) -> bool:
        """Log a message if the given severity is severe enough.

        Args:
            severity: A ``Severity`` (``None`` means UNKNOWN).
            message: A string, an exception, or any other value.
            progname: Program name; logged as the message when neither
                ``message`` nor ``producer`` is given.
            producer: Called to get the message when ``message`` is None.
                Never called when the record is dropped.

        Returns:
            True. Dropped records also return True.

        Raises:
            RotationError: the log file could not be shifted.
            WriteAfterClose: the logger was closed.
        """
        if severity is None:
            severity = Severity.UNKNOWN
        if self.device is None or not passes_threshold(severity, self.threshold):
            return True
        if progname is None:
            progname = self.progname

        payload, progname = self.resolver.resolve(classify(message, producer), progname, self.progname)
        payload = normalize(payload, self._encoding)

        record = LogRecord(
            severity=severity,
            timestamp=self._clock(),
            pid=os.getpid(),
            progname=progname,
            payload=payload,
        )
        self.device.write(self.formatter.format(record))
        return True

    log = add

    def debug(self, progname: Optional[str] = None, producer: Optional[Producer] = None) -> bool:
        return self.add(Severity.DEBUG, None, progname, producer)

    def info(self, progname: Optional[str] = None, producer: Optional[Producer] = None) -> bool:
        return self.add(Severity.INFO, None, progname, producer)

    def warn(self, progname: Optional[str] = None, producer: Optional[Producer] = None) -> bool:
        return self.add(Severity.WARN, None, progname, producer)

    def error(self, progname: Optional[str] = None, producer: Optional[Producer] = None) -> bool:
        return self.add(Severity.ERROR, None, progname, producer)

    def caution(self, progname: Optional[str] = None, producer: Optional[Producer] = None) -> bool:
        return self.add(Severity.CAUTION, None, progname, producer)

    def fatal(self, progname: Optional[str] = None, producer: Optional[Producer] = None) -> bool:
        return self.add(Severity.FATAL, None, progname, producer)

    def unknown(self, progname: Optional[str] = None, producer: Optional[Producer] = None) -> bool:
        return self.add(Severity.UNKNOWN, None, progname, producer)

    def set_sink(self, target: SinkTarget, rotation: RotationSpec = None, max_bytes: int = DEFAULT_MAX_BYTES) -> None:
        """Swap the log device, closing the previous one.

        Reopening the file the current device already owns closes it first, so
        the file never has two open handles.
        """
        previous = self.device
        if previous is not None and previous.filename is not None and _same_path(target, previous.filename):
            previous.close()
        self.device = LogDevice(target, rotation, max_bytes, clock=self._clock)
        if previous is not None:
            previous.close()

    def close(self) -> None:
        """Close the logging device."""
        if self.device is not None:
            self.device.close()


def _same_path(target: SinkTarget, filename: str) -> bool:
    if not isinstance(target, (str, os.PathLike)):
        return False
    return os.path.abspath(os.fspath(target)) == os.path.abspath(filename)
