"""Tests for emulation strategy selection."""

from __future__ import annotations

import pytest
from conftest import RecordingTransport

from fullshot.cdp.emulation import (
    DeviceMetricsEmulation,
    ForceViewportEmulation,
    browser_major_version,
    select_emulation,
)
from fullshot.cdp.relay import CommandRelay
from fullshot.errors import ResponseShapeError


def _relay(product: str | None) -> CommandRelay:
    replies = {} if product is None else {"Browser.getVersion": {"product": product}}
    return CommandRelay(RecordingTransport(replies), "s")


@pytest.mark.unit
@pytest.mark.cdp
class TestSelectEmulation:
    def test_named_modes_issue_no_commands(self):
        transport = RecordingTransport()
        relay = CommandRelay(transport, "s")

        assert isinstance(select_emulation("device-metrics", relay), DeviceMetricsEmulation)
        assert isinstance(select_emulation("force-viewport", relay), ForceViewportEmulation)
        assert transport.calls == []

    def test_unknown_mode(self):
        with pytest.raises(ValueError, match="Unknown emulation mode"):
            select_emulation("zoom")

    def test_auto_requires_relay(self):
        with pytest.raises(ValueError, match="needs a relay"):
            select_emulation("auto")

    @pytest.mark.parametrize(
        ("product", "expected"),
        [
            ("Chrome/60.0.3112.90", ForceViewportEmulation),
            ("Chrome/61.0.3163.79", DeviceMetricsEmulation),
            ("HeadlessChrome/120.0.6099.71", DeviceMetricsEmulation),
            ("Chromium", DeviceMetricsEmulation),
        ],
    )
    def test_auto_by_version(self, product, expected):
        assert isinstance(select_emulation("auto", _relay(product)), expected)

    def test_major_version(self):
        assert browser_major_version(_relay("HeadlessChrome/118.0.5993.70")) == 118

    def test_major_version_missing_product(self):
        with pytest.raises(ResponseShapeError, match="product"):
            browser_major_version(_relay(None))


@pytest.mark.unit
@pytest.mark.cdp
class TestStrategies:
    def test_device_metrics_apply(self):
        transport = RecordingTransport()
        DeviceMetricsEmulation().apply(CommandRelay(transport, "s"), 10, 20)

        assert transport.commands == [
            (
                "Emulation.setDeviceMetricsOverride",
                {"width": 10, "height": 20, "deviceScaleFactor": 1, "mobile": False, "fitWindow": False},
            ),
            ("Emulation.setVisibleSize", {"width": 10, "height": 20}),
        ]

    def test_force_viewport_apply(self):
        transport = RecordingTransport()
        ForceViewportEmulation().apply(CommandRelay(transport, "s"), 10, 20)

        assert transport.commands == [
            ("Emulation.setVisibleSize", {"width": 10, "height": 20}),
            ("Emulation.forceViewport", {"x": 0, "y": 0, "scale": 1}),
        ]

    def test_resets(self):
        transport = RecordingTransport()
        relay = CommandRelay(transport, "s")
        DeviceMetricsEmulation().reset(relay)
        ForceViewportEmulation().reset(relay)

        assert transport.command_names == [
            "Emulation.clearDeviceMetricsOverride",
            "Emulation.resetViewport",
        ]
