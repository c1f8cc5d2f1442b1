"""Step 1: read orientation metadata and decode source bytes.

Orientation lookup is best-effort — any failure yields `Orientation.NORMAL`.
A decode failure raises `DecodeError` naming the source file.
"""
import logging

from PIL import Image

from models.batch import SourceImage
from pipeline.codec import ImageCodec
from pipeline.errors import DecodeError, MetadataParseError
from pipeline.orient import Orientation

logger = logging.getLogger(__name__)


def read_orientation(source: SourceImage, codec: ImageCodec) -> Orientation:
    try:
        return Orientation.parse(_read_raw_orientation(source, codec))
    except MetadataParseError as exc:
        logger.debug("No usable orientation for %s (%s); assuming normal", source.filename, exc)
        return Orientation.NORMAL


def decode(source: SourceImage, codec: ImageCodec) -> Image.Image:
    """Decode to an RGBA image in stored (not yet upright) pixel order."""
    if not source.data:
        raise DecodeError(source.filename, "empty file")
    try:
        image = codec.decode(source.data)
    except Exception as exc:
        raise DecodeError(source.filename, f"cannot decode image ({exc})") from exc
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    return image


def _read_raw_orientation(source: SourceImage, codec: ImageCodec) -> int | None:
    try:
        return codec.read_orientation(source.data)
    except Exception as exc:
        raise MetadataParseError(str(exc)) from exc
