"""In-memory raster and geometry types passed between pipeline steps."""
from PIL import Image
from pydantic import BaseModel, ConfigDict


class Raster(BaseModel):
    """An RGBA pixel buffer owned by exactly one job.

    `uses_alpha` records whether the alpha channel is meaningful for the
    output; opaque rasters are flattened to RGB at encode time.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    image: Image.Image
    uses_alpha: bool = True

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height


class DrawRect(BaseModel):
    """Placement of the source inside the destination canvas.

    May extend past the canvas for cover/outside/stretch; the stored rect is
    never clipped; `clip` gives the on-canvas part for drawing.
    """

    model_config = ConfigDict(frozen=True)

    x: int
    y: int
    w: int
    h: int

    def clip(self, dst_w: int, dst_h: int) -> "DrawRect | None":
        """Part of the rect that lands on a dst_w × dst_h canvas, or None if nothing does."""
        x0, y0 = max(self.x, 0), max(self.y, 0)
        x1, y1 = min(self.x + self.w, dst_w), min(self.y + self.h, dst_h)
        if x1 <= x0 or y1 <= y0:
            return None
        return DrawRect(x=x0, y=y0, w=x1 - x0, h=y1 - y0)


class FitResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: int
    height: int
    rect: DrawRect
