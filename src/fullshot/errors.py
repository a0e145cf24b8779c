"""Error hierarchy for fullshot.

Relay errors are hard failures that carry the offending command name.
Transport failures are the only kind the screenshot sequencer recovers from.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "ConfigError",
    "DecodeFailure",
    "EmptyResult",
    "FullshotError",
    "ProtocolFailure",
    "RelayError",
    "ResponseShapeError",
    "TransportFailure",
]


class FullshotError(Exception):
    """Base class for all fullshot errors."""


class ConfigError(FullshotError):
    """Configuration file could not be read or validated."""


class TransportFailure(FullshotError):
    """The round trip to the session transport failed (I/O, timeout)."""

    def __init__(self, message: str, command: str | None = None) -> None:
        super().__init__(message)
        self.command = command


class RelayError(FullshotError):
    """A relayed debugging-protocol command did not produce a usable value."""

    def __init__(self, message: str, command: str) -> None:
        super().__init__(message)
        self.command = command


class ProtocolFailure(RelayError):
    """Remote command returned a non-zero status."""

    def __init__(self, command: str, value: Any = None, status: int | None = None) -> None:
        super().__init__(f"Command '{command}' failed: {value}", command)
        self.value = value
        self.status = status


class EmptyResult(RelayError):
    """Remote command succeeded but returned no value."""

    def __init__(self, command: str) -> None:
        super().__init__(f"Null response value to command '{command}'", command)


class ResponseShapeError(RelayError):
    """A response value is missing a field or holds the wrong type."""

    def __init__(self, command: str, path: str, detail: str) -> None:
        super().__init__(f"Command '{command}': {path} {detail}", command)
        self.path = path


class DecodeFailure(FullshotError):
    """Image payload is not valid base64 or not a PNG image."""
