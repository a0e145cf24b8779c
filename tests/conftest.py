"""Shared fixtures: a recording fake session transport and canned replies."""

from __future__ import annotations

import base64
from collections.abc import Mapping
from io import BytesIO
from typing import Any

import pytest
from PIL import Image

from fullshot.transport import EXTENSION_COMMAND, Response


def make_png(width: int = 4, height: int = 3) -> bytes:
    img = Image.new("RGB", (width, height), color=(200, 30, 30))
    buf = BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


class RecordingTransport:
    """Fake session transport.

    ``replies`` maps a debugging-protocol command name to the value to answer
    with, a ``Response`` to return as-is, or an exception to raise.
    Every call is recorded with an increasing index.
    """

    def __init__(self, replies: Mapping[str, Any] | None = None) -> None:
        self.replies: dict[str, Any] = dict(replies or {})
        self.calls: list[tuple[int, str, str, dict[str, Any]]] = []

    def execute_command(self, session_id: str, name: str, params: Mapping[str, Any]) -> Response:
        self.calls.append((len(self.calls), session_id, name, dict(params)))
        key = params["cmd"] if name == EXTENSION_COMMAND else name
        reply = self.replies.get(key, {})
        if isinstance(reply, BaseException):
            raise reply
        if isinstance(reply, Response):
            return reply
        return Response(status=0, value=reply)

    @property
    def commands(self) -> list[tuple[str, dict[str, Any]]]:
        return [
            (params["cmd"], params["params"])
            for _, _, name, params in self.calls
            if name == EXTENSION_COMMAND
        ]

    @property
    def command_names(self) -> list[str]:
        return [cmd for cmd, _ in self.commands]


def page_replies(
    visible: tuple[int, int] = (800, 600),
    content: tuple[int, int] = (800, 2000),
    png: bytes | None = None,
) -> dict[str, Any]:
    data = base64.b64encode(png if png is not None else make_png()).decode("ascii")
    return {
        "Runtime.evaluate": {
            "result": {
                "type": "object",
                "value": {"x": 0, "y": 0, "width": visible[0], "height": visible[1]},
            }
        },
        "Page.getLayoutMetrics": {
            "layoutViewport": {"pageX": 0, "pageY": 0},
            "contentSize": {"x": 0, "y": 0, "width": content[0], "height": content[1]},
        },
        "Page.captureScreenshot": {"data": data},
    }


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def transport(png_bytes: bytes) -> RecordingTransport:
    return RecordingTransport(page_replies(png=png_bytes))


@pytest.fixture(autouse=True)
def _reset_global_config(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    import fullshot.config

    monkeypatch.setattr(fullshot.config, "_config", None)
    monkeypatch.delenv("FULLSHOT_CONFIG", raising=False)
    monkeypatch.delenv("FULLSHOT_LOG_LEVEL", raising=False)
    monkeypatch.setenv("FULLSHOT_CWD", str(tmp_path))
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
