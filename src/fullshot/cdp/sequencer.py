"""Full-page screenshot through raw debugging-protocol commands.

The capture the session normally offers is clipped to the viewport. Here the
renderer is stretched to the full content size, captured, and shrunk back:

1. ``Runtime.evaluate`` reads the visible viewport size
2. ``Page.getLayoutMetrics`` reads the full content size
3. the emulation strategy applies the content size (device metrics override,
   then visible size)
4. ``Page.captureScreenshot`` grabs a PNG from the rendering surface
5. ``Emulation.setVisibleSize`` restores the original visible size

By default the device metrics override is left in place after step 5 and
nothing is restored when a step fails. With ``restore_device_metrics`` the
visible size and the override are both reverted on every exit path.

Emulation state belongs to the whole session, so captures are serialized per
session id.
"""

from __future__ import annotations

import threading
import weakref
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from loguru import logger

from fullshot.cdp.emulation import DeviceMetricsEmulation, EmulationStrategy
from fullshot.cdp.relay import CommandRelay
from fullshot.cdp.values import get_int, get_str
from fullshot.errors import FullshotError, TransportFailure
from fullshot.logging import LogSpan

__all__ = [
    "CAPTURE_SCREENSHOT",
    "GET_LAYOUT_METRICS",
    "RUNTIME_EVALUATE",
    "VIEWPORT_SCRIPT",
    "FullPageCapture",
    "session_lock",
]

RUNTIME_EVALUATE = "Runtime.evaluate"
GET_LAYOUT_METRICS = "Page.getLayoutMetrics"
CAPTURE_SCREENSHOT = "Page.captureScreenshot"

VIEWPORT_SCRIPT = "({x:0,y:0,width:window.innerWidth,height:window.innerHeight})"

# Entries live only while a capture holds a reference to the lock
_locks: weakref.WeakValueDictionary[str, threading.Lock] = weakref.WeakValueDictionary()
_locks_guard = threading.Lock()


def session_lock(session_id: str) -> threading.Lock:
    """Get the lock serializing emulation changes for one session."""
    with _locks_guard:
        lock = _locks.get(session_id)
        if lock is None:
            lock = _locks[session_id] = threading.Lock()
        return lock


class FullPageCapture:
    """Capture the full scrollable page of one session as a base64 PNG."""

    def __init__(
        self,
        relay: CommandRelay,
        emulation: EmulationStrategy | None = None,
        *,
        restore_device_metrics: bool = False,
        log: Any = None,
    ) -> None:
        self.relay = relay
        self.emulation = emulation or DeviceMetricsEmulation()
        self.restore_device_metrics = restore_device_metrics
        self.log = log if log is not None else logger

    def capture(self) -> str | None:
        """Run the capture sequence.

        Returns:
            Base64-encoded PNG, or None if a round trip to the transport failed
            (TransportFailure or OSError)

        Raises:
            RelayError: A command failed or returned an unusable value
        """
        lock = session_lock(self.relay.session_id)
        with lock:
            try:
                with LogSpan(
                    span="cdp.screenshot",
                    sink=self.log,
                    session=self.relay.session_id,
                    emulation=self.emulation.name,
                ) as span:
                    data = self._run(span)
                    span.add(chars=len(data))
                    return data
            except (TransportFailure, OSError) as e:
                self.log.opt(exception=e).error("Could not take screenshot")
                return None

    def _run(self, span: LogSpan) -> str:
        visible_w, visible_h = self.visible_size()
        content_w, content_h = self.content_size()
        span.add(visible=f"{visible_w}x{visible_h}", content=f"{content_w}x{content_h}")

        if self.restore_device_metrics:
            with self.stretched(content_w, content_h, visible_w, visible_h):
                value = self.relay.execute(
                    CAPTURE_SCREENSHOT, {"format": "png", "fromSurface": True}
                )
        else:
            self.emulation.apply(self.relay, content_w, content_h)
            value = self.relay.execute(CAPTURE_SCREENSHOT, {"format": "png", "fromSurface": True})
            self.emulation.set_visible_size(self.relay, visible_w, visible_h)

        return get_str(value, "data", CAPTURE_SCREENSHOT, log=self.log)

    def visible_size(self) -> tuple[int, int]:
        result = self.relay.execute(
            RUNTIME_EVALUATE, {"expression": VIEWPORT_SCRIPT, "returnByValue": True}
        )
        return (
            get_int(result, "result.value.width", RUNTIME_EVALUATE, log=self.log),
            get_int(result, "result.value.height", RUNTIME_EVALUATE, log=self.log),
        )

    def content_size(self) -> tuple[int, int]:
        metrics = self.relay.execute(GET_LAYOUT_METRICS, {})
        return (
            get_int(metrics, "contentSize.width", GET_LAYOUT_METRICS, log=self.log),
            get_int(metrics, "contentSize.height", GET_LAYOUT_METRICS, log=self.log),
        )

    @contextmanager
    def stretched(
        self, content_w: int, content_h: int, visible_w: int, visible_h: int
    ) -> Iterator[None]:
        """Hold the content-sized emulation, reverting it however the block exits."""
        try:
            self.emulation.apply(self.relay, content_w, content_h)
            yield
        except BaseException:
            self._revert(visible_w, visible_h, quiet=True)
            raise
        else:
            self._revert(visible_w, visible_h, quiet=False)

    def _revert(self, visible_w: int, visible_h: int, *, quiet: bool) -> None:
        # quiet: another error is already propagating, keep it as the one raised
        steps = (
            lambda: self.emulation.set_visible_size(self.relay, visible_w, visible_h),
            lambda: self.emulation.reset(self.relay),
        )
        for step in steps:
            try:
                step()
            except FullshotError as e:
                if not quiet:
                    raise
                self.log.warning(f"Could not revert emulation state: {e}")
