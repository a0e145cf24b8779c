"""Relay debugging-protocol commands through an existing session transport."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from fullshot.errors import EmptyResult, ProtocolFailure
from fullshot.logging import LogSpan
from fullshot.transport import EXTENSION_COMMAND, CommandEnvelope, SessionTransport

__all__ = ["CommandRelay"]


class CommandRelay:
    """Send one debugging-protocol command per call and unwrap its value.

    The relay does not track browser-side state changed by the commands
    it forwards; undoing them is up to the caller.
    """

    def __init__(self, transport: SessionTransport, session_id: str, *, log: Any = None) -> None:
        self.transport = transport
        self.session_id = session_id
        self.log = log

    def execute(self, cmd: str, params: Mapping[str, Any] | None = None) -> Any:
        """Run ``cmd`` with ``params`` and return the response value.

        Raises:
            ProtocolFailure: Non-zero status
            EmptyResult: Success status but no value
            TransportFailure: Propagated unchanged from the transport, as is
                any OSError a custom transport raises
        """
        envelope = CommandEnvelope(cmd, params or {})
        with LogSpan(span="cdp.send", sink=self.log, cmd=cmd, session=self.session_id) as span:
            response = self.transport.execute_command(
                self.session_id, EXTENSION_COMMAND, envelope.to_payload()
            )
            span.add(status=response.status)

            if not response.ok:
                raise ProtocolFailure(cmd, response.value, response.status)
            if response.value is None:
                raise EmptyResult(cmd)
            return response.value
