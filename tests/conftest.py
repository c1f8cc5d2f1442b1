import io
from pathlib import Path

import pytest
from PIL import Image

from models.preset import OutputFormat
from models.raster import Raster
from settings import Settings

_EXIF_ORIENTATION_TAG = 274


def encode_image(
    size: tuple[int, int] = (40, 30),
    color=(200, 40, 40),
    fmt: str = "JPEG",
    mode: str = "RGB",
    orientation: int | None = None,
) -> bytes:
    """Encode a solid-colour test image, optionally tagged with an EXIF orientation."""
    img = Image.new(mode, size, color)
    params = {}
    if orientation is not None:
        exif = Image.Exif()
        exif[_EXIF_ORIENTATION_TAG] = orientation
        params["exif"] = exif.tobytes()
    buf = io.BytesIO()
    img.save(buf, format=fmt, **params)
    return buf.getvalue()


class FakeCodec:
    """Deterministic ImageCodec: every payload decodes to the same synthetic raster.

    Each decode yields a `size` image whose red channel encodes the x position
    and green channel the y position, so geometry can be asserted exactly.
    """

    def __init__(self, size=(16, 12), orientation=None, fail_decode=(), fail_encode=()):
        self.size = size
        self.orientation = orientation
        self.fail_decode = set(fail_decode)
        self.fail_encode = set(fail_encode)
        self.decoded: list[bytes] = []
        self.encoded: list[tuple[tuple[int, int], OutputFormat, float]] = []

    def read_orientation(self, data: bytes) -> int | None:
        return self.orientation

    def decode(self, data: bytes) -> Image.Image:
        self.decoded.append(data)
        if data in self.fail_decode:
            raise OSError("cannot identify image file")
        w, h = self.size
        img = Image.new("RGBA", (w, h))
        img.putdata([(x * 10 % 256, y * 10 % 256, 128, 255) for y in range(h) for x in range(w)])
        return img

    def encode(self, raster: Raster, fmt: OutputFormat, quality: float) -> bytes:
        self.encoded.append((raster.image.size, fmt, quality))
        if fmt in self.fail_encode:
            raise KeyError(fmt.value.upper())
        return f"{fmt.value}:{raster.width}x{raster.height}".encode()


@pytest.fixture
def fake_codec() -> FakeCodec:
    return FakeCodec()


@pytest.fixture
def jpeg_bytes() -> bytes:
    return encode_image((40, 30), fmt="JPEG")


@pytest.fixture
def png_bytes() -> bytes:
    return encode_image((40, 30), color=(10, 120, 200, 128), fmt="PNG", mode="RGBA")


@pytest.fixture
def tmp_settings(tmp_path: Path) -> Settings:
    """Settings pointing at a fresh temp directory for tests that write output.

    Directory layout:
        input/         source images
        output/        generated archives
        presets.yaml   (not created — tests write it when needed)
    """
    (tmp_path / "input").mkdir()
    return Settings(
        input_dir=tmp_path / "input",
        output_dir=tmp_path / "output",
        presets_path=tmp_path / "presets.yaml",
    )
