"""Step 6: encode the final raster.

No fallback format: if the host cannot produce the requested format the job
fails with `EncodeError`.
"""
from models.preset import OutputFormat
from models.raster import Raster
from pipeline.codec import ImageCodec
from pipeline.errors import EncodeError


def encode(raster: Raster, fmt: OutputFormat, quality: float, codec: ImageCodec, filename: str) -> bytes:
    try:
        payload = codec.encode(raster, fmt, quality)
    except Exception as exc:
        raise EncodeError(filename, f"cannot encode as {fmt.value} ({exc})") from exc
    if not payload:
        raise EncodeError(filename, f"{fmt.value} encoder returned no data")
    return payload
