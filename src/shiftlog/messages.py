"""
Message argument resolution.

A message handed to ``Logger.add`` can be plain text, an exception, any other
value, or a deferred producer. Each call is classified into one of the tagged
variants below and only resolved to text once the record is known to pass the
severity threshold.
"""

from __future__ import annotations

import builtins
import traceback
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple, Union

Producer = Callable[[], Any]


@dataclass(frozen=True)
class Text:
    value: str


@dataclass(frozen=True)
class ErrorValue:
    error: BaseException


@dataclass(frozen=True)
class AnyValue:
    value: Any


@dataclass(frozen=True)
class Deferred:
    producer: Producer


@dataclass(frozen=True)
class Absent:
    pass


MessageArg = Union[Text, ErrorValue, AnyValue, Deferred, Absent]


def classify(message: Any = None, producer: Optional[Producer] = None) -> MessageArg:
    """Wrap the raw arguments of an ``add`` call into a variant.

    An explicit message always wins over a producer.
    """
    if message is not None:
        return _classify_value(message)
    if producer is not None:
        return Deferred(producer)
    return Absent()


def _classify_value(value: Any) -> MessageArg:
    if isinstance(value, BaseException):
        return ErrorValue(value)
    if isinstance(value, str):
        return Text(value)
    return AnyValue(value)


def error_kind(error: BaseException) -> str:
    """Class name of an exception, module-qualified unless it is a builtin."""
    cls = type(error)
    if cls.__module__ == builtins.__name__:
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


def backtrace(error: BaseException) -> list[str]:
    """Frames of the exception's traceback as ``file:line:in name`` lines.

    The raising frame comes first, the outermost caller last.
    """
    frames = traceback.extract_tb(error.__traceback__)
    return [f"{frame.filename}:{frame.lineno}:in {frame.name}" for frame in reversed(frames)]


def render_error(error: BaseException) -> str:
    return f"{error} ({error_kind(error)})\n" + "\n".join(backtrace(error))


class MessageResolver:
    """Turn a classified message into its final text payload."""

    def resolve(
        self,
        message: MessageArg,
        progname: Optional[str],
        default_progname: Optional[str] = None,
    ) -> Tuple[str, Optional[str]]:
        """Return ``(payload, progname)`` for a record that will be emitted.

        With neither a message nor a producer, the progname argument itself is
        the payload and the record falls back to ``default_progname``.
        """
        if isinstance(message, Absent):
            if progname is None:
                return "", default_progname
            message = _classify_value(progname)
            progname = default_progname
        elif isinstance(message, Deferred):
            produced = message.producer()
            message = _classify_value(produced) if produced is not None else Text("")
        return self.render(message), progname

    def render(self, message: MessageArg) -> str:
        if isinstance(message, Text):
            return message.value
        if isinstance(message, ErrorValue):
            return render_error(message.error)
        if isinstance(message, AnyValue):
            return repr(message.value)
        if isinstance(message, Deferred):
            return self.resolve(message, None)[0]
        return ""
