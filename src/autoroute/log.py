"""Log sinks — where route scanning reports progress and problems.

Every router invocation writes through a :class:`RouteLog`, which fans each
message out to two channels:

- the ``on_log`` callback from the config, which receives every message;
- the default sink (:class:`ConsoleSink` unless another sink is injected),
  which skips ``info`` messages when the config sets ``logging=False``.
  Warnings and errors always reach it.

Sinks are small objects with a ``write(level, message)`` method::

    from autoroute.log import LoggingSink

    await router(app, sink=LoggingSink(logging.getLogger("routes")))

"""

from __future__ import annotations

import logging
import os
import sys
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, TextIO

if TYPE_CHECKING:
    from autoroute._types import LogFn, LogLevel
    from autoroute.config import RouterConfig


class LogSink(Protocol):
    """Destination for router log messages."""

    def write(self, level: LogLevel, message: str) -> None: ...


# ---------------------------------------------------------------------------
# ANSI helpers: respect NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------


def _supports_color(stream: TextIO) -> bool:
    """Return True if *stream* is a terminal that accepts ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(stream, "isatty") and stream.isatty()


_RESET = "\033[0m"
_LEVEL_COLORS: dict[str, str] = {
    "info": "",
    "warn": "\033[33m",
    "error": "\033[31m",
}


class ConsoleSink:
    """Print messages to the terminal.

    ``info`` progress goes to stdout; warnings and errors go to stderr.

    Args:
        stream: Single target stream for every level.  ``None`` resolves
            ``sys.stdout`` / ``sys.stderr`` at write time, so redirection
            after construction is honoured.

    """

    __slots__ = ("_stream",)

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def write(self, level: LogLevel, message: str) -> None:
        if self._stream is not None:
            stream = self._stream
        elif level == "info":
            stream = sys.stdout
        else:
            stream = sys.stderr
        color = _LEVEL_COLORS.get(level, "") if _supports_color(stream) else ""
        if color:
            message = f"{color}{message}{_RESET}"
        print(message, file=stream)


class LoggingSink:
    """Forward messages to a standard library logger."""

    __slots__ = ("_logger",)

    _LEVELS: dict[str, int] = {
        "info": logging.INFO,
        "warn": logging.WARNING,
        "error": logging.ERROR,
    }

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger if logger is not None else logging.getLogger("autoroute")

    def write(self, level: LogLevel, message: str) -> None:
        self._logger.log(self._LEVELS.get(level, logging.INFO), message)


class CallbackSink:
    """Adapt an ``on_log(level, message)`` callable to the sink protocol."""

    __slots__ = ("_callback",)

    def __init__(self, callback: LogFn) -> None:
        self._callback = callback

    def write(self, level: LogLevel, message: str) -> None:
        self._callback(level, message)


# ---------------------------------------------------------------------------
# In-memory sink
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LogRecord:
    """A single captured log message.

    Attributes:
        level: ``info``, ``warn`` or ``error``.
        message: The message text.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    level: LogLevel
    message: str
    timestamp_ns: int


class MemorySink:
    """Bounded, queryable store of log records.

    Records are kept in a ring buffer; the oldest are discarded once
    *max_records* is reached.  All methods are protected by a lock.

    Args:
        max_records: Maximum number of records to retain.

    """

    __slots__ = ("_lock", "_max_records", "_records")

    def __init__(self, max_records: int = 10_000) -> None:
        self._max_records = max_records
        self._records: deque[LogRecord] = deque(maxlen=max_records)
        self._lock = threading.Lock()

    def write(self, level: LogLevel, message: str) -> None:
        record = LogRecord(level=level, message=message, timestamp_ns=time.monotonic_ns())
        with self._lock:
            self._records.append(record)

    def query(self, *, level: LogLevel | None = None, contains: str | None = None) -> list[LogRecord]:
        """Return records in write order, optionally filtered.

        Args:
            level: Only return records at this level.
            contains: Only return records whose message contains this text.

        """
        with self._lock:
            records = list(self._records)
        return [
            r
            for r in records
            if (level is None or r.level == level)
            and (contains is None or contains in r.message)
        ]

    def messages(self, level: LogLevel | None = None) -> list[str]:
        """Return message texts, optionally limited to one level."""
        return [r.message for r in self.query(level=level)]

    def clear(self) -> int:
        """Drop all records and return how many were dropped."""
        with self._lock:
            count = len(self._records)
            self._records.clear()
            return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


# ---------------------------------------------------------------------------
# Per-config logger
# ---------------------------------------------------------------------------


class RouteLog:
    """Logger used for one configuration's scan.

    Args:
        sink: Default output.  Receives warnings and errors always, and
            ``info`` messages only when *logging* is True.
        on_log: Optional callback that receives every message.
        logging: Whether routine ``info`` output reaches *sink*.

    """

    __slots__ = ("_callback", "_logging", "_sink")

    def __init__(
        self,
        sink: LogSink,
        *,
        on_log: LogFn | None = None,
        logging: bool = True,
    ) -> None:
        self._sink = sink
        self._callback = CallbackSink(on_log) if on_log is not None else None
        self._logging = logging

    @classmethod
    def for_config(cls, config: RouterConfig, sink: LogSink | None = None) -> RouteLog:
        """Build the logger for *config*, defaulting to a console sink."""
        return cls(
            sink if sink is not None else ConsoleSink(),
            on_log=config.on_log,
            logging=config.logging,
        )

    def log(self, level: LogLevel, message: str) -> None:
        if self._callback is not None:
            self._callback.write(level, message)
        if level == "info" and not self._logging:
            return
        self._sink.write(level, message)

    def info(self, message: str) -> None:
        self.log("info", message)

    def warn(self, message: str) -> None:
        self.log("warn", message)

    def error(self, message: str) -> None:
        self.log("error", message)
