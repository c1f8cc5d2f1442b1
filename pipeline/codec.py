"""Host codec capability: orientation lookup, decode, encode.

The pipeline depends only on the `ImageCodec` protocol so tests can swap in
a deterministic fake. `PillowCodec` is the production implementation.
Codec methods raise whatever the host library raises; the decode and encode
steps translate those into `DecodeError` / `EncodeError`.
"""
import io
from typing import Protocol

from PIL import Image

from models.preset import OutputFormat
from models.raster import Raster

# EXIF tag ID for Orientation
_EXIF_ORIENTATION_TAG = 274

# Formats whose encoder takes a quality setting
_LOSSY_FORMATS = frozenset({OutputFormat.JPEG, OutputFormat.WEBP, OutputFormat.AVIF})


class ImageCodec(Protocol):
    def read_orientation(self, data: bytes) -> int | None: ...

    def decode(self, data: bytes) -> Image.Image: ...

    def encode(self, raster: Raster, fmt: OutputFormat, quality: float) -> bytes: ...


def pil_quality(quality: float) -> int:
    """Map a [0, 1] quality fraction onto Pillow's 0–100 scale."""
    return int(round(max(0.0, min(1.0, quality)) * 100))


class PillowCodec:
    """ImageCodec backed by Pillow."""

    def read_orientation(self, data: bytes) -> int | None:
        with Image.open(io.BytesIO(data)) as img:
            return img.getexif().get(_EXIF_ORIENTATION_TAG)

    def decode(self, data: bytes) -> Image.Image:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            # Raw pixel order; orientation is applied by the normalizer
            return img.convert("RGBA")

    def encode(self, raster: Raster, fmt: OutputFormat, quality: float) -> bytes:
        img = raster.image
        if not (raster.uses_alpha and fmt.supports_alpha):
            img = img.convert("RGB")

        params: dict = {}
        if fmt in _LOSSY_FORMATS:
            params["quality"] = pil_quality(quality)

        buf = io.BytesIO()
        img.save(buf, format=fmt.pil_format, **params)
        return buf.getvalue()
