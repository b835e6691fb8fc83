"""
Logger Configuration.

Loaded from ``SHIFTLOG_*`` environment variables or a ``.env`` file:

    SHIFTLOG_SINK=logs/app.log
    SHIFTLOG_ROTATION=daily
    SHIFTLOG_THRESHOLD=INFO
"""

from __future__ import annotations

import sys
from typing import Any, Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .encoding import check_encoding
from .rotation import DEFAULT_MAX_BYTES, parse_rotation
from .severity import Severity

STREAM_SINKS = {"stderr", "stdout"}


class LoggerSettings(BaseSettings):
    """Construction options of a Logger."""

    model_config = SettingsConfigDict(
        env_prefix="SHIFTLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    sink: str = Field(default="stderr", description="'stderr', 'stdout' or a log file path")
    rotation: Optional[str] = Field(
        default=None,
        description="Generation count for size rotation, or daily/weekly/monthly",
    )
    max_bytes: int = Field(default=DEFAULT_MAX_BYTES, ge=0, description="Size rotation threshold in bytes")
    threshold: int = Field(default=Severity.DEBUG, description="Minimum severity (name or integer)")
    progname: Optional[str] = Field(default=None, description="Default program name")
    datetime_format: Optional[str] = Field(default=None, description="strftime pattern for timestamps")
    encoding: Optional[str] = Field(default=None, description="Target encoding for payloads")

    @field_validator("rotation", mode="before")
    @classmethod
    def _check_rotation(cls, value: Any) -> Optional[str]:
        if value is None or value == "":
            return None
        value = str(value).strip().lower()
        parse_rotation(value)
        return value

    @field_validator("encoding")
    @classmethod
    def _check_encoding(cls, value: Optional[str]) -> Optional[str]:
        return check_encoding(value or None)

    @field_validator("threshold", mode="before")
    @classmethod
    def _parse_threshold(cls, value: Any) -> int:
        return int(Severity.parse(value))

    @property
    def is_stream(self) -> bool:
        return self.sink.strip().lower() in STREAM_SINKS

    def resolve_target(self) -> Any:
        """The stream or file path this configuration points at."""
        name = self.sink.strip().lower()
        if name == "stderr":
            return sys.stderr
        if name == "stdout":
            return sys.stdout
        return self.sink

    def to_logger_kwargs(self) -> Dict[str, Any]:
        return {
            "target": self.resolve_target(),
            "rotation": self.rotation,
            "max_bytes": self.max_bytes,
            "threshold": Severity.parse(self.threshold),
            "progname": self.progname,
            "datetime_format": self.datetime_format,
            "encoding": self.encoding,
        }
