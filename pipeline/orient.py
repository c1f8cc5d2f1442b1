"""Step 2: orientation normalization.

Applies the inverse of the EXIF orientation so the raster is upright. The
transform table covers every code, and code 1 still produces a copy so no
later step has to think about orientation again.
"""
from enum import IntEnum

from PIL import Image

from models.raster import Raster

Transpose = Image.Transpose


class Orientation(IntEnum):
    NORMAL = 1
    FLIP_HORIZONTAL = 2
    ROTATE_180 = 3
    FLIP_VERTICAL = 4
    TRANSPOSE = 5
    ROTATE_90_CW = 6
    TRANSVERSE = 7
    ROTATE_90_CCW = 8

    @property
    def swaps_dimensions(self) -> bool:
        return self >= Orientation.TRANSPOSE

    @classmethod
    def parse(cls, value) -> "Orientation":
        """Coerce a raw tag value; anything outside 1–8 means NORMAL."""
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            return cls.NORMAL


# Orientation → Pillow transpose that makes the image upright
_UPRIGHT_TRANSFORMS: dict[Orientation, Transpose | None] = {
    Orientation.NORMAL: None,
    Orientation.FLIP_HORIZONTAL: Transpose.FLIP_LEFT_RIGHT,
    Orientation.ROTATE_180: Transpose.ROTATE_180,
    Orientation.FLIP_VERTICAL: Transpose.FLIP_TOP_BOTTOM,
    Orientation.TRANSPOSE: Transpose.TRANSPOSE,
    Orientation.ROTATE_90_CW: Transpose.ROTATE_270,  # Pillow rotates counter-clockwise
    Orientation.TRANSVERSE: Transpose.TRANSVERSE,
    Orientation.ROTATE_90_CCW: Transpose.ROTATE_90,
}


def normalize(image: Image.Image, orientation: Orientation) -> Raster:
    """Return an upright RGBA raster; width/height swap for codes 5–8."""
    method = _UPRIGHT_TRANSFORMS[Orientation.parse(orientation)]
    rgba = image if image.mode == "RGBA" else image.convert("RGBA")
    upright = rgba.copy() if method is None else rgba.transpose(method)
    return Raster(image=upright, uses_alpha=True)
