"""
Log device: owns the output sink and ages managed log files.

A device wraps either a caller-owned stream (``sys.stderr``, an open file
object, ``io.StringIO``) or a file it opens by name. Only named files rotate.

The device is serialised by an internal lock, so threads of one process may
share it. There is no file locking: several processes appending to the same
path may interleave their lines.
"""

from __future__ import annotations

import os
import threading
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import IO, Any, Callable, Optional, Union

from . import __version__
from .diagnostics import get_logger
from .exceptions import InvalidSinkKind, RotationError, RotationIOFailure, WriteAfterClose
from .formatters import format_header
from .rotation import DEFAULT_MAX_BYTES, RotationPolicy, RotationSpec, parse_rotation

logger = get_logger("shiftlog.sinks")

PROG_NAME = f"shiftlog/{__version__}"

Clock = Callable[[], datetime]
SinkTarget = Union[str, "os.PathLike[str]", IO[str], Any]


class DeviceState(str, Enum):
    OPEN = "open"
    ROTATING = "rotating"
    CLOSED = "closed"


def _is_stream(target: Any) -> bool:
    return callable(getattr(target, "write", None))


def _flush(dev: Any) -> None:
    # Bare writers without flush() are valid streams.
    flush = getattr(dev, "flush", None)
    if callable(flush):
        flush()


class LogDevice:
    """Output and shifting of a log.

    Args:
        target: File name (``str`` or path-like) of the log, or a writable
            stream such as ``sys.stderr``.
        rotation: ``None``/``0`` for no rotation, a generation count for
            size-based rotation, ``"daily"``/``"weekly"``/``"monthly"`` for
            calendar rotation, or a ``RotationPolicy``. Ignored for streams.
        max_bytes: Size threshold for size-based rotation.
        encoding: Encoding of managed log files.
        clock: Source of the current local time.
    """

    def __init__(
        self,
        target: SinkTarget,
        rotation: RotationSpec = None,
        max_bytes: int = DEFAULT_MAX_BYTES,
        *,
        encoding: str = "utf-8",
        clock: Clock = datetime.now,
    ):
        self._lock = threading.Lock()
        self._encoding = encoding
        self._clock = clock
        self.filename: Optional[str] = None
        self.policy: Optional[RotationPolicy] = None

        if isinstance(target, (str, os.PathLike)):
            self.filename = os.fspath(target)
            self.policy = parse_rotation(rotation, max_bytes)
            self._dev: Optional[IO[str]] = self._open_log_file(self.filename)
            self._owns_dev = True
        elif _is_stream(target):
            self._dev = target
            self._owns_dev = False
        else:
            raise InvalidSinkKind(target=target)

        self.state = DeviceState.OPEN

    @property
    def dev(self) -> Optional[IO[str]]:
        return self._dev

    @property
    def closed(self) -> bool:
        return self.state is DeviceState.CLOSED

    def write(self, message: str) -> None:
        """Log a message, shifting the file first if it is due.

        Raises:
            WriteAfterClose: the device was closed.
            RotationError: shifting failed; the message was not written.
        """
        with self._lock:
            if self.state is DeviceState.CLOSED:
                raise WriteAfterClose(filename=self.filename)
            if self._rotation_due():
                self._rotate()
            self._dev.write(message)
            _flush(self._dev)

    def rotate(self) -> None:
        """Shift the log file now, regardless of the policy's trigger."""
        with self._lock:
            if self.state is DeviceState.CLOSED:
                raise WriteAfterClose(filename=self.filename)
            if self.policy is not None:
                self._rotate()

    def close(self) -> None:
        """Close the logging device. Closing twice is a no-op."""
        with self._lock:
            if self.state is DeviceState.CLOSED:
                return
            dev, self._dev = self._dev, None
            self.state = DeviceState.CLOSED
            if dev is None:
                return
            if self._owns_dev:
                dev.close()
            else:
                _flush(dev)

    # =========================================================================
    # Rotation
    # =========================================================================

    def _rotation_due(self) -> bool:
        if self.policy is None or self.filename is None:
            return False
        stat = os.fstat(self._dev.fileno())
        return self.policy.is_due(stat, self._clock())

    def _rotate(self) -> None:
        # The old handle is always released before anything is renamed.
        self.state = DeviceState.ROTATING
        dev, self._dev = self._dev, None
        if dev is not None:
            dev.close()

        try:
            aged = self.policy.shift(self.filename, self._clock())
            self._dev = self._create_log_file(self.filename)
        except RotationError as exc:
            self._recover(exc)
            raise
        except OSError as exc:
            self._recover(exc)
            raise RotationIOFailure(filename=self.filename, error=exc) from exc
        finally:
            if self._dev is not None:
                self.state = DeviceState.OPEN

        logger.info("log_rotated", path=self.filename, aged_path=aged, policy=repr(self.policy))

    def _recover(self, error: Exception) -> None:
        """Reopen the live path after a failed shift so later writes can proceed."""
        logger.error("log_rotation_failed", path=self.filename, error=str(error))
        try:
            self._dev = self._open_log_file(self.filename)
        except OSError as exc:
            logger.error("log_reopen_failed", path=self.filename, error=str(exc))
            self.state = DeviceState.CLOSED

    # =========================================================================
    # File handling
    # =========================================================================

    def _open_log_file(self, filename: str) -> IO[str]:
        if os.path.exists(filename):
            return open(filename, "a", encoding=self._encoding)
        return self._create_log_file(filename)

    def _create_log_file(self, filename: str) -> IO[str]:
        Path(filename).parent.mkdir(parents=True, exist_ok=True)
        dev = open(filename, "a", encoding=self._encoding)
        dev.write(format_header(self._clock(), PROG_NAME))
        dev.flush()
        logger.debug("log_file_created", path=filename)
        return dev

    def __repr__(self) -> str:
        target = self.filename if self.filename is not None else type(self._dev).__name__
        return f"LogDevice({target!r}, policy={self.policy!r}, state={self.state.value})"
