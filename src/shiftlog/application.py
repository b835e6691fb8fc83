"""
Application -- add logging support to a program.

Usage:
    class FooApp(Application):
        def __init__(self):
            super().__init__("FooApp")

        def run(self):
            self.log(Severity.WARN, "warning")
            self.logger.error("myMethod2", lambda: "Error!")
            return 0

    status = FooApp().start()
"""

from __future__ import annotations

import sys
from typing import Any, Optional

from .core import Logger
from .messages import Producer, render_error
from .rotation import RotationSpec
from .severity import Severity
from .sinks import SinkTarget

DEFAULT_APP_MAX_BYTES = 102400


class Application:
    """Run a program body with start/end/failure records around it.

    The application holds a Logger (stderr by default) whose program name is
    the application name.
    """

    def __init__(self, app_name: Optional[str] = None, logger: Optional[Logger] = None):
        self.app_name = app_name
        self.logger = logger or Logger(sys.stderr)
        self.logger.progname = app_name
        self.threshold = self.logger.threshold

    def start(self) -> Any:
        """Start the application and return the status ``run`` produced (-1 on failure)."""
        status: Any = -1
        try:
            self.log(Severity.INFO, f"Start of {self.app_name}.")
            status = self.run()
        except Exception as exc:
            self.log(Severity.FATAL, f"Detected an exception. Stopping ... {render_error(exc)}")
        finally:
            self.log(Severity.INFO, f"End of {self.app_name}. (status: {status})")
        return status

    def run(self) -> Any:
        raise NotImplementedError("Method run must be defined in the derived class.")

    def set_log(self, target: SinkTarget, rotation: RotationSpec = None, max_bytes: int = DEFAULT_APP_MAX_BYTES) -> None:
        """Set the log device for this application."""
        self.logger.set_sink(target, rotation, max_bytes)
        self.logger.progname = self.app_name
        self.logger.threshold = self.threshold

    def set_threshold(self, threshold: int) -> None:
        self.threshold = threshold
        self.logger.threshold = threshold

    def log(self, severity: int, message: Any = None, producer: Optional[Producer] = None) -> bool:
        return self.logger.add(severity, message, self.app_name, producer)
