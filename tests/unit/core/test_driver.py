"""Tests for the ChromeSession facade."""

from __future__ import annotations

import base64
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from conftest import RecordingTransport

from fullshot.config import FullshotConfig
from fullshot.driver import ChromeSession
from fullshot.errors import DecodeFailure, FullshotError, ProtocolFailure, TransportFailure
from fullshot.output import BASE64, BYTES
from fullshot.transport import LAUNCH_APP, Response


@pytest.mark.unit
@pytest.mark.core
class TestChromeSession:
    def test_screenshot_bytes(self, transport, png_bytes):
        session = ChromeSession(transport, "sess-1", FullshotConfig())

        assert session.get_screenshot_as(BYTES) == png_bytes

    def test_screenshot_base64(self, transport, png_bytes):
        session = ChromeSession(transport, "sess-1", FullshotConfig())

        assert session.get_screenshot_as(BASE64) == base64.b64encode(png_bytes).decode("ascii")

    def test_transport_failure_returns_none(self, transport):
        transport.replies["Page.captureScreenshot"] = TransportFailure("reset")
        session = ChromeSession(transport, "sess-1", FullshotConfig(), log=MagicMock())

        assert session.get_screenshot_as(BYTES) is None

    def test_bad_payload_raises_decode_failure(self, transport):
        transport.replies["Page.captureScreenshot"] = {"data": "%%%"}
        session = ChromeSession(transport, "sess-1", FullshotConfig())

        with pytest.raises(DecodeFailure):
            session.get_screenshot_as(BYTES)

    def test_config_selects_restore(self, transport):
        config = FullshotConfig(restore_device_metrics=True)

        ChromeSession(transport, "sess-1", config).get_screenshot_as(BYTES)

        assert transport.command_names[-1] == "Emulation.clearDeviceMetricsOverride"

    def test_config_auto_emulation_queries_version(self, transport):
        transport.replies["Browser.getVersion"] = {"product": "Chrome/60.0.3112.90"}
        config = FullshotConfig(emulation="auto")

        ChromeSession(transport, "sess-1", config).get_screenshot_as(BYTES)

        assert transport.command_names[0] == "Browser.getVersion"
        assert "Emulation.forceViewport" in transport.command_names

    def test_auto_emulation_transport_failure_returns_none(self, transport):
        transport.replies["Browser.getVersion"] = TransportFailure("refused")
        config = FullshotConfig(emulation="auto")
        log = MagicMock()

        assert ChromeSession(transport, "sess-1", config, log=log).get_screenshot_as(BYTES) is None
        assert transport.command_names == ["Browser.getVersion"]
        log.opt.return_value.error.assert_called_once_with("Could not take screenshot")

    def test_os_error_from_transport_returns_none(self, transport):
        transport.replies["Page.captureScreenshot"] = ConnectionResetError("reset by peer")
        session = ChromeSession(transport, "sess-1", FullshotConfig(), log=MagicMock())

        assert session.get_screenshot_as(BYTES) is None

    def test_injected_log_reaches_relay(self, transport):
        log = MagicMock()

        ChromeSession(transport, "sess-1", FullshotConfig(), log=log).send("Page.enable")

        assert log.bind.call_args.kwargs["cmd"] == "Page.enable"

    def test_save_screenshot_to_path(self, transport, png_bytes, tmp_path: Path):
        target = tmp_path / "page.png"

        result = ChromeSession(transport, "sess-1", FullshotConfig()).save_screenshot(target)

        assert result == target
        assert target.read_bytes() == png_bytes

    def test_save_screenshot_default_dir(self, transport, tmp_path: Path):
        config = FullshotConfig(screenshot_dir=str(tmp_path / "shots"))

        result = ChromeSession(transport, "sess-1", config).save_screenshot()

        assert result is not None
        assert result.parent == tmp_path / "shots"

    def test_send_and_evaluate(self, transport):
        session = ChromeSession(transport, "sess-1", FullshotConfig())

        session.send("Page.getLayoutMetrics")
        session.evaluate("document.title")

        assert transport.commands == [
            ("Page.getLayoutMetrics", {}),
            ("Runtime.evaluate", {"expression": "document.title", "returnByValue": True}),
        ]

    def test_launch_app(self):
        transport = RecordingTransport()
        ChromeSession(transport, "sess-1", FullshotConfig()).launch_app("abcdef")

        assert transport.calls == [(0, "sess-1", LAUNCH_APP, {"id": "abcdef"})]

    def test_launch_app_failure(self):
        transport = RecordingTransport({LAUNCH_APP: Response(status=13, value="no app")})

        with pytest.raises(ProtocolFailure, match="no app"):
            ChromeSession(transport, "sess-1", FullshotConfig()).launch_app("abcdef")

    def test_file_detector_unsupported(self):
        session = ChromeSession(RecordingTransport(), "sess-1", FullshotConfig())

        with pytest.raises(FullshotError, match="file detector"):
            session.set_file_detector(object())

    def test_uses_global_config_by_default(self, transport):
        session = ChromeSession(transport, "sess-1")

        assert session.config == FullshotConfig()
