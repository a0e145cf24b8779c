"""Structured logging for fullshot.

All diagnostics go through loguru. ``LogSpan`` wraps a unit of work and
emits a single record with timing and attributes when it exits.
"""

from __future__ import annotations

import sys
import time
from types import TracebackType
from typing import Any

from loguru import logger

__all__ = ["LogSpan", "configure_logging", "logger"]

_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str = "INFO", sink: Any = None) -> int:
    """Replace loguru's default handler with a single configured sink.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ...)
        sink: Any loguru sink; defaults to stderr

    Returns:
        The loguru handler id
    """
    logger.remove()
    return logger.add(
        sink if sink is not None else sys.stderr,
        level=level.upper(),
        format=_FORMAT,
        backtrace=False,
        diagnose=False,
    )


class LogSpan:
    """A structured logging span with timing and attributes.

    Example:
        >>> with LogSpan(span="cdp.send", cmd="Page.captureScreenshot") as span:
        ...     value = relay.execute(...)
        ...     span.add(size=len(value["data"]))
    """

    def __init__(self, span: str, sink: Any = None, **attrs: Any) -> None:
        self.span = span
        self.attrs: dict[str, Any] = dict(attrs)
        self.error: str | None = None
        self._sink = sink if sink is not None else logger
        self._start = 0.0

    def add(self, key: str | None = None, value: Any = None, **attrs: Any) -> LogSpan:
        """Add attributes to the span.

        Returns:
            Self for method chaining
        """
        if key is not None:
            self.attrs[key] = value
        self.attrs.update(attrs)
        return self

    @property
    def elapsed_ms(self) -> float:
        return round((time.perf_counter() - self._start) * 1000, 2)

    def __enter__(self) -> LogSpan:
        self._start = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc is not None:
            self.error = f"{type(exc).__name__}: {exc}"
        entry: dict[str, Any] = {"span": self.span, "elapsed_ms": self.elapsed_ms, **self.attrs}
        if self.error:
            entry["error"] = self.error
            self._sink.bind(**entry).warning("{span} failed ({elapsed_ms}ms): {error}", **entry)
        else:
            self._sink.bind(**entry).debug("{span} ({elapsed_ms}ms)", **entry)
