"""Path access into the untyped JSON trees returned by the debugging protocol."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Union

from loguru import logger

from fullshot.errors import ResponseShapeError

__all__ = ["JsonValue", "get_int", "get_path", "get_str"]

JsonValue = Union[None, bool, int, float, str, list["JsonValue"], dict[str, "JsonValue"]]


def get_path(tree: JsonValue, path: str, log: Any = None) -> JsonValue:
    """Walk ``tree`` along a dot-delimited key path.

    Returns None when the root is not a mapping or a key is missing. When an
    intermediate key resolves to something other than a mapping the path
    cannot be followed; that is logged as a warning to ``log`` (the module
    logger by default) and treated as missing.

    >>> get_path({"a": {"b": 5}}, "a.b")
    5
    """
    current: Any = tree
    walked: list[str] = []
    for segment in path.split("."):
        if not isinstance(current, Mapping):
            if walked:
                (log if log is not None else logger).warning(
                    f"Cannot read '{path}': '{'.'.join(walked)}' is "
                    f"{type(current).__name__}, not an object"
                )
            return None
        current = current.get(segment)
        if current is None:
            return None
        walked.append(segment)
    return current


def get_int(tree: JsonValue, path: str, command: str, log: Any = None) -> int:
    """Read a non-negative integer, accepting integral floats.

    Raises:
        ResponseShapeError: If the value is missing, not integral or negative
    """
    value = get_path(tree, path, log)
    if value is None:
        raise ResponseShapeError(command, path, "is missing")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ResponseShapeError(command, path, f"is {type(value).__name__}, expected integer")
    if isinstance(value, float):
        if not value.is_integer():
            raise ResponseShapeError(command, path, f"is {value}, expected integer")
        value = int(value)
    if value < 0:
        raise ResponseShapeError(command, path, f"is {value}, expected >= 0")
    return value


def get_str(tree: JsonValue, path: str, command: str, log: Any = None) -> str:
    """Read a string value.

    Raises:
        ResponseShapeError: If the value is missing or not a string
    """
    value = get_path(tree, path, log)
    if value is None:
        raise ResponseShapeError(command, path, "is missing")
    if not isinstance(value, str):
        raise ResponseShapeError(command, path, f"is {type(value).__name__}, expected string")
    return value
