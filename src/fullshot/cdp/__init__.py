"""Debugging-protocol commands relayed over a remote session."""

from __future__ import annotations

from .emulation import DeviceMetricsEmulation, EmulationStrategy, ForceViewportEmulation, select_emulation
from .relay import CommandRelay
from .sequencer import FullPageCapture
from .values import get_int, get_path, get_str

__all__ = [
    "CommandRelay",
    "DeviceMetricsEmulation",
    "EmulationStrategy",
    "ForceViewportEmulation",
    "FullPageCapture",
    "get_int",
    "get_path",
    "get_str",
    "select_emulation",
]
