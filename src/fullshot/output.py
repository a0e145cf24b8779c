"""Turn a base64 PNG payload into the representation the caller asked for.

Output types follow one protocol, ``convert_from_png_bytes``; ``assemble``
decodes and validates the payload and hands the bytes to one of them.
"""

from __future__ import annotations

import base64
import binascii
from datetime import datetime
from io import BytesIO
from pathlib import Path
from typing import Protocol, TypeVar

from PIL import Image, UnidentifiedImageError

from fullshot.errors import DecodeFailure

__all__ = [
    "BASE64",
    "BYTES",
    "Base64Output",
    "BytesOutput",
    "FileOutput",
    "OutputType",
    "PNG_SIGNATURE",
    "WEBP_MAX_DIMENSION",
    "WebpOutput",
    "assemble",
    "decode_png",
]

T = TypeVar("T", covariant=True)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

# Largest width or height libwebp can encode
WEBP_MAX_DIMENSION = 16383


class OutputType(Protocol[T]):
    def convert_from_png_bytes(self, data: bytes) -> T: ...


class BytesOutput:
    def convert_from_png_bytes(self, data: bytes) -> bytes:
        return data


class Base64Output:
    def convert_from_png_bytes(self, data: bytes) -> str:
        return base64.b64encode(data).decode("ascii")


class FileOutput:
    """Write the PNG to ``path``, or to a timestamped file in ``directory``."""

    def __init__(self, path: Path | str | None = None, directory: Path | str | None = None) -> None:
        if path is None and directory is None:
            raise ValueError("FileOutput needs a path or a directory")
        self.path = Path(path) if path is not None else None
        self.directory = Path(directory) if directory is not None else Path(path).parent

    def _target(self) -> Path:
        if self.path is not None:
            return self.path
        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S-%f")
        return self.directory / f"screenshot_{timestamp}.png"

    def convert_from_png_bytes(self, data: bytes) -> Path:
        target = self._target()
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        return target


class WebpOutput:
    """Re-encode the PNG as WebP with Pillow.

    Full-page captures can exceed the WebP dimension limit; such images are
    scaled down, keeping their aspect ratio, until the longer side fits.
    """

    def __init__(self, quality: int = 85) -> None:
        self.quality = quality

    def convert_from_png_bytes(self, data: bytes) -> bytes:
        try:
            img = Image.open(BytesIO(data))
            if max(img.size) > WEBP_MAX_DIMENSION:
                img.thumbnail((WEBP_MAX_DIMENSION, WEBP_MAX_DIMENSION))
            output = BytesIO()
            img.save(output, format="WebP", quality=self.quality)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            raise DecodeFailure(f"Cannot convert screenshot to WebP: {e}") from e
        return output.getvalue()


BYTES = BytesOutput()
BASE64 = Base64Output()


def decode_png(payload: str) -> bytes:
    """Decode a base64 payload and check it holds a PNG.

    Raises:
        DecodeFailure: Invalid base64 or missing PNG signature
    """
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeFailure(f"Screenshot payload is not valid base64: {e}") from e
    if not data.startswith(PNG_SIGNATURE):
        raise DecodeFailure("Screenshot payload is not a PNG image")
    return data


def assemble(payload: str, output: OutputType[T]) -> T:
    """Decode ``payload`` and convert it with ``output``."""
    return output.convert_from_png_bytes(decode_png(payload))
