"""Chrome session facade: debugging-protocol access plus full-page screenshots."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, TypeVar

from loguru import logger

from fullshot.cdp.emulation import select_emulation
from fullshot.cdp.relay import CommandRelay
from fullshot.cdp.sequencer import RUNTIME_EVALUATE, FullPageCapture
from fullshot.config import FullshotConfig, get_config
from fullshot.errors import FullshotError, ProtocolFailure, TransportFailure
from fullshot.output import FileOutput, OutputType, assemble
from fullshot.transport import LAUNCH_APP, SessionTransport

__all__ = ["ChromeSession"]

T = TypeVar("T")


class ChromeSession:
    """An existing Chrome session reached through a session transport."""

    def __init__(
        self,
        transport: SessionTransport,
        session_id: str,
        config: FullshotConfig | None = None,
        *,
        log: Any = None,
    ) -> None:
        self.transport = transport
        self.session_id = session_id
        self.config = config or get_config()
        self.relay = CommandRelay(transport, session_id, log=log)
        self._log = log

    def send(self, cmd: str, params: Mapping[str, Any] | None = None) -> Any:
        """Relay a raw debugging-protocol command and return its value."""
        return self.relay.execute(cmd, params)

    def evaluate(self, script: str) -> Any:
        """Evaluate ``script`` in the page, returning the protocol's result tree."""
        return self.relay.execute(RUNTIME_EVALUATE, {"expression": script, "returnByValue": True})

    def full_page_capture(self) -> FullPageCapture:
        emulation = select_emulation(self.config.emulation, self.relay)
        return FullPageCapture(
            self.relay,
            emulation,
            restore_device_metrics=self.config.restore_device_metrics,
            log=self._log,
        )

    def get_screenshot_as(self, output: OutputType[T]) -> T | None:
        """Capture the whole page and convert it with ``output``.

        Returns None when the transport failed during the capture.
        """
        try:
            capture = self.full_page_capture()
        except (TransportFailure, OSError) as e:
            (self._log or logger).opt(exception=e).error("Could not take screenshot")
            return None
        payload = capture.capture()
        if payload is None:
            return None
        return assemble(payload, output)

    def save_screenshot(self, path: Path | str | None = None) -> Path | None:
        """Write the full-page PNG to ``path`` or the configured screenshot dir."""
        if path is None:
            output = FileOutput(directory=self.config.get_screenshot_path())
        else:
            output = FileOutput(path)
        return self.get_screenshot_as(output)

    def launch_app(self, app_id: str) -> Any:
        """Launch the Chrome app with the given id."""
        response = self.transport.execute_command(self.session_id, LAUNCH_APP, {"id": app_id})
        if not response.ok:
            raise ProtocolFailure(LAUNCH_APP, response.value, response.status)
        return response.value

    def set_file_detector(self, detector: Any) -> None:
        raise FullshotError(
            "Setting the file detector only works on remote webdriver instances "
            "obtained via RemoteWebDriver"
        )
