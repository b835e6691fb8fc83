"""
Unified exception hierarchy for shiftlog.

Only sink lifecycle violations and rotation failures raise; formatting and
message resolution always degrade to a printable line instead.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class LoggerError(Exception):
    """Root of every shiftlog error.

    Catch this to handle any failure coming out of a Logger or LogDevice.
    """

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


class InvalidSinkKind(LoggerError, TypeError):
    """Raised when a device is given neither a file path nor a writable stream."""

    def __init__(self, *, target: Any) -> None:
        super().__init__(
            f"Wrong argument: {target!r} for log.",
            code="INVALID_SINK_KIND",
            details={"target_type": type(target).__name__},
        )


class WriteAfterClose(LoggerError):
    """Raised when writing to a device that has been closed."""

    def __init__(self, *, filename: Optional[str] = None) -> None:
        target = f"'{filename}'" if filename else "stream"
        super().__init__(
            f"Log device for {target} is closed.",
            code="WRITE_AFTER_CLOSE",
            details={"filename": filename},
        )


# ================================
# Rotation errors
# ================================


class RotationError(LoggerError):
    """Shifting a log file aside failed.

    The triggering write is aborted; nothing is retried.
    """

    def __init__(
        self,
        reason: str,
        *,
        filename: str,
        code: str = "ROTATION_FAILED",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        merged = {"filename": filename}
        merged.update(details or {})
        super().__init__(f"Shifting failed. {reason}", code=code, details=merged)
        self.filename = filename


class RotationConflict(RotationError):
    """The dated target of a calendar rotation already exists."""

    def __init__(self, *, filename: str, target: str) -> None:
        super().__init__(
            f"'{target}' already exists.",
            filename=filename,
            code="ROTATION_CONFLICT",
            details={"target": target},
        )
        self.target = target


class RotationIOFailure(RotationError):
    """A rename or file creation failed while rotating."""

    def __init__(self, *, filename: str, error: OSError) -> None:
        super().__init__(
            str(error),
            filename=filename,
            code="ROTATION_IO_FAILURE",
            details={"errno": error.errno},
        )
