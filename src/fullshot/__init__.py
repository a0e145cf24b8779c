"""fullshot - full-page Chrome screenshots over an existing WebDriver session.

Relays raw debugging-protocol commands through chromedriver's extension
command and uses them to capture the whole scrollable page, not just the
viewport.

Usage:
    # Capture a running session to a PNG
    fullshot capture <session-id> --output page.png

    # Relay a single command
    fullshot send <session-id> Page.getLayoutMetrics
"""

from importlib.metadata import PackageNotFoundError, version

from fullshot.cdp import CommandRelay, FullPageCapture, get_path
from fullshot.driver import ChromeSession
from fullshot.errors import (
    DecodeFailure,
    EmptyResult,
    FullshotError,
    ProtocolFailure,
    TransportFailure,
)
from fullshot.output import BASE64, BYTES, FileOutput, WebpOutput, assemble

try:
    __version__ = version("cdp-fullshot")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "BASE64",
    "BYTES",
    "ChromeSession",
    "CommandRelay",
    "DecodeFailure",
    "EmptyResult",
    "FileOutput",
    "FullPageCapture",
    "FullshotError",
    "ProtocolFailure",
    "TransportFailure",
    "WebpOutput",
    "__version__",
    "assemble",
    "get_path",
]
