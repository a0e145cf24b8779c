"""Session transport: the channel that carries commands to a browser session.

The relay only needs ``execute_command(session_id, name, params)``. A
chromedriver-backed implementation over httpx is provided for real use;
tests substitute a recording fake.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Protocol

import httpx

from fullshot.errors import TransportFailure

__all__ = [
    "EXTENSION_COMMAND",
    "LAUNCH_APP",
    "CommandEnvelope",
    "HttpSessionTransport",
    "Response",
    "SessionTransport",
    "UNKNOWN_ERROR",
]

# Generic "execute extension command" that forwards a debugging-protocol call
EXTENSION_COMMAND = "sendCommandWithResult"
LAUNCH_APP = "launchApp"

# Legacy JSON wire protocol status for an unclassified server-side error
UNKNOWN_ERROR = 13

_ROUTES = {
    EXTENSION_COMMAND: "/session/{session_id}/chromium/send_command_and_get_result",
    LAUNCH_APP: "/session/{session_id}/chromium/launch_app",
}


@dataclass(frozen=True)
class CommandEnvelope:
    """A debugging-protocol command wrapped for the extension command."""

    cmd: str
    params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    def to_payload(self) -> dict[str, Any]:
        return {"cmd": self.cmd, "params": dict(self.params)}


@dataclass(frozen=True)
class Response:
    """One reply from the session transport."""

    status: int | None = None
    value: Any = None

    @property
    def ok(self) -> bool:
        return self.status is None or self.status == 0


class SessionTransport(Protocol):
    """Anything able to run a named command against a session."""

    def execute_command(
        self, session_id: str, name: str, params: Mapping[str, Any]
    ) -> Response:
        """Run ``name`` with ``params`` against ``session_id``.

        Raises:
            TransportFailure: The round trip could not be completed. Plain
                OSError is accepted too and treated the same way.
        """
        ...


class HttpSessionTransport:
    """Session transport speaking to a chromedriver over HTTP."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 60.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(
            timeout=httpx.Timeout(timeout),
            headers={"Content-Type": "application/json;charset=UTF-8"},
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpSessionTransport:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def execute_command(
        self, session_id: str, name: str, params: Mapping[str, Any]
    ) -> Response:
        """POST a command to the route chromedriver exposes for it.

        Raises:
            ValueError: If the command has no known route
            TransportFailure: If the request could not be completed
        """
        route = _ROUTES.get(name)
        if route is None:
            raise ValueError(f"Unsupported session command: {name}")

        url = self.base_url + route.format(session_id=session_id)
        try:
            http_response = self._client.post(url, json=dict(params))
        except httpx.RequestError as e:
            raise TransportFailure(f"Request to {url} failed: {e}", name) from e

        return _parse_response(http_response)


def _parse_response(http_response: httpx.Response) -> Response:
    """Build a Response from either a legacy or a W3C-style reply body."""
    try:
        body = http_response.json()
    except ValueError:
        # Unparseable even on 2xx: fail with the body text rather than a null value
        status = UNKNOWN_ERROR if http_response.is_success else http_response.status_code
        return Response(status=status, value=http_response.text[:200])

    if not isinstance(body, dict):
        if http_response.is_success:
            return Response(status=None, value=body)
        return Response(status=http_response.status_code, value=body)

    status = body.get("status")
    value = body.get("value")
    if status is None and not http_response.is_success:
        status = http_response.status_code
    return Response(status=status, value=value)
