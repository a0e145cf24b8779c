"""Strategies for making the renderer treat the full content as the screen.

Chrome 61 removed ``Emulation.forceViewport``; newer browsers get the
device-metrics override instead. ``select_emulation`` picks one by name or,
in ``auto`` mode, by the browser's reported major version.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod

from loguru import logger

from fullshot.cdp.relay import CommandRelay
from fullshot.cdp.values import get_str

__all__ = [
    "BROWSER_GET_VERSION",
    "CLEAR_DEVICE_METRICS_OVERRIDE",
    "FORCE_VIEWPORT",
    "RESET_VIEWPORT",
    "SET_DEVICE_METRICS_OVERRIDE",
    "SET_VISIBLE_SIZE",
    "DeviceMetricsEmulation",
    "EmulationStrategy",
    "ForceViewportEmulation",
    "select_emulation",
]

SET_DEVICE_METRICS_OVERRIDE = "Emulation.setDeviceMetricsOverride"
CLEAR_DEVICE_METRICS_OVERRIDE = "Emulation.clearDeviceMetricsOverride"
SET_VISIBLE_SIZE = "Emulation.setVisibleSize"
FORCE_VIEWPORT = "Emulation.forceViewport"
RESET_VIEWPORT = "Emulation.resetViewport"
BROWSER_GET_VERSION = "Browser.getVersion"

# First major version without Emulation.forceViewport
_DEVICE_METRICS_SINCE = 61

_PRODUCT_RE = re.compile(r"/(\d+)\.")


class EmulationStrategy(ABC):
    """Stretches the renderer to a content size and can undo the stretch."""

    name: str

    @abstractmethod
    def apply(self, relay: CommandRelay, width: int, height: int) -> None:
        """Make ``width`` x ``height`` the effective screen and capture area."""

    @abstractmethod
    def reset(self, relay: CommandRelay) -> None:
        """Drop the emulation state installed by ``apply``."""

    def set_visible_size(self, relay: CommandRelay, width: int, height: int) -> None:
        relay.execute(SET_VISIBLE_SIZE, {"width": width, "height": height})


class DeviceMetricsEmulation(EmulationStrategy):
    name = "device-metrics"

    def apply(self, relay: CommandRelay, width: int, height: int) -> None:
        relay.execute(
            SET_DEVICE_METRICS_OVERRIDE,
            {
                "width": width,
                "height": height,
                "deviceScaleFactor": 1,
                "mobile": False,
                "fitWindow": False,
            },
        )
        self.set_visible_size(relay, width, height)

    def reset(self, relay: CommandRelay) -> None:
        relay.execute(CLEAR_DEVICE_METRICS_OVERRIDE, {})


class ForceViewportEmulation(EmulationStrategy):
    """For browsers older than Chrome 61."""

    name = "force-viewport"

    def apply(self, relay: CommandRelay, width: int, height: int) -> None:
        self.set_visible_size(relay, width, height)
        relay.execute(FORCE_VIEWPORT, {"x": 0, "y": 0, "scale": 1})

    def reset(self, relay: CommandRelay) -> None:
        relay.execute(RESET_VIEWPORT, {})


def browser_major_version(relay: CommandRelay) -> int | None:
    """Parse the major version out of ``Browser.getVersion``'s product string."""
    product = get_str(relay.execute(BROWSER_GET_VERSION, {}), "product", BROWSER_GET_VERSION)
    match = _PRODUCT_RE.search(product)
    if match is None:
        logger.warning(f"Unrecognised browser product string: {product!r}")
        return None
    return int(match.group(1))


def select_emulation(mode: str, relay: CommandRelay | None = None) -> EmulationStrategy:
    """Return the strategy for ``mode``.

    ``auto`` asks the browser for its version and needs a relay; an
    unparseable version falls back to the device-metrics override.
    """
    if mode == DeviceMetricsEmulation.name:
        return DeviceMetricsEmulation()
    if mode == ForceViewportEmulation.name:
        return ForceViewportEmulation()
    if mode != "auto":
        raise ValueError(f"Unknown emulation mode: {mode}")
    if relay is None:
        raise ValueError("auto emulation needs a relay to query the browser version")

    major = browser_major_version(relay)
    if major is not None and major < _DEVICE_METRICS_SINCE:
        logger.debug(f"Browser major version {major}, using forceViewport")
        return ForceViewportEmulation()
    return DeviceMetricsEmulation()
