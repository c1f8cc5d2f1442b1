"""Step 7: JPEG metadata injection.

Writes EXIF resolution (inches) and image description straight into the
encoded JPEG bytes via piexif; pixel data is never re-encoded. Existing EXIF
fields are kept. On any failure the untouched payload is returned.
"""
import io
import logging

import piexif

from models.options import GlobalOptions
from models.preset import OutputFormat
from pipeline.errors import MetadataParseError

logger = logging.getLogger(__name__)

_RESOLUTION_UNIT_INCHES = 2


def inject(payload: bytes, fmt: OutputFormat, options: GlobalOptions, filename: str = "") -> bytes:
    if fmt is not OutputFormat.JPEG:
        return payload
    dpi = options.jpeg_dpi if options.jpeg_dpi > 0 else None
    description = options.description
    if dpi is None and description is None:
        return payload

    try:
        return _rewrite_exif(payload, dpi, description)
    except MetadataParseError as exc:
        logger.warning("Metadata injection skipped for %s: %s", filename or "<payload>", exc)
        return payload


def _rewrite_exif(payload: bytes, dpi: int | None, description: str | None) -> bytes:
    try:
        exif = piexif.load(payload)
        zeroth = exif.setdefault("0th", {})
        if dpi is not None:
            zeroth[piexif.ImageIFD.XResolution] = (dpi, 1)
            zeroth[piexif.ImageIFD.YResolution] = (dpi, 1)
            zeroth[piexif.ImageIFD.ResolutionUnit] = _RESOLUTION_UNIT_INCHES
        if description is not None:
            zeroth[piexif.ImageIFD.ImageDescription] = description.encode("utf-8")
        # A stale thumbnail can make dump() fail; it is never needed here
        exif["thumbnail"] = None
        exif["1st"] = {}
        out = io.BytesIO()
        piexif.insert(piexif.dump(exif), payload, out)
        return out.getvalue()
    except Exception as exc:
        raise MetadataParseError(str(exc)) from exc
