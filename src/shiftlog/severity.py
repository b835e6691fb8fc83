"""
Logging severities.

    DEBUG < INFO < WARN < ERROR < CAUTION < FATAL < UNKNOWN
"""

from __future__ import annotations

from enum import IntEnum
from typing import Optional, Union


class Severity(IntEnum):
    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3
    CAUTION = 4
    FATAL = 5
    UNKNOWN = 6

    @classmethod
    def parse(cls, value: Union[str, int, "Severity"]) -> Union["Severity", int]:
        """Accept a member, a name (case-insensitive) or a plain integer.

        Integers outside the enumeration are returned unchanged: they are legal
        thresholds that simply gate everything above or below them.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            text = value.strip()
            if text.lstrip("-").isdigit():
                return cls.parse(int(text))
            try:
                return cls[text.upper()]
            except KeyError:
                raise ValueError(f"Unknown severity: {value!r}") from None
        try:
            return cls(value)
        except ValueError:
            return int(value)


# Severity label for logging (max 5 chars), indexed by severity value.
SEVERITY_LABELS = ("DEBUG", "INFO", "WARN", "ERROR", "CAUTN", "FATAL", "ANY")
UNKNOWN_LABEL = "UNKNOWN"


def severity_label(severity: Optional[int]) -> str:
    if severity is None or not 0 <= severity < len(SEVERITY_LABELS):
        return UNKNOWN_LABEL
    return SEVERITY_LABELS[severity]


def passes_threshold(severity: int, threshold: int) -> bool:
    return severity >= threshold
