"""Step 4: compositing.

Allocates the destination canvas, applies the background-fill policy and
draws the upright source into the draw rectangle with Lanczos resampling.
"""
import logging

from PIL import Image, ImageColor

from models.options import DEFAULT_BACKGROUND, GlobalOptions
from models.preset import OutputFormat, Preset
from models.raster import DrawRect, FitResult, Raster

logger = logging.getLogger(__name__)

_TRANSPARENT = (0, 0, 0, 0)
_WHITE = (255, 255, 255, 255)


def composite(source: Raster, fit: FitResult, preset: Preset, options: GlobalOptions) -> Raster:
    opaque = needs_background(preset.format, options.preserve_transparency)
    fill = parse_color(resolve_background(preset, options)) if opaque else _TRANSPARENT
    canvas = Image.new("RGBA", (fit.width, fit.height), fill)

    visible = fit.rect.clip(fit.width, fit.height)
    if visible is not None:
        # Only the on-canvas part of the rect is resampled, so cover overscan
        # never costs more memory than the canvas itself.
        scaled = source.image.resize(
            (visible.w, visible.h),
            resample=Image.Resampling.LANCZOS,
            box=_source_box(source, fit.rect, visible),
        )
        layer = Image.new("RGBA", canvas.size, _TRANSPARENT)
        layer.paste(scaled, (visible.x, visible.y))
        canvas = Image.alpha_composite(canvas, layer)

    return Raster(image=canvas, uses_alpha=not opaque)


def needs_background(fmt: OutputFormat, preserve_transparency: bool) -> bool:
    """Fill when the canvas is opaque: the format has no alpha, or transparency is off.

    "Transparency off and the rect leaves margins" is implied by the second
    case, so margins never need checking on their own.
    """
    return not (fmt.supports_alpha and preserve_transparency)


def resolve_background(preset: Preset, options: GlobalOptions) -> str:
    return preset.background or options.background_color or DEFAULT_BACKGROUND


def parse_color(value: str) -> tuple[int, int, int, int]:
    """Parse any Pillow color string to RGBA; unparsable values become white."""
    try:
        return ImageColor.getcolor(value, "RGBA")
    except (ValueError, AttributeError):
        logger.warning("Unrecognised background colour %r; using white", value)
        return _WHITE


def _source_box(source: Raster, rect: DrawRect, visible: DrawRect) -> tuple[float, float, float, float]:
    """Map the visible part of `rect` back to source pixel coordinates."""
    sx = source.width / rect.w
    sy = source.height / rect.h
    return (
        (visible.x - rect.x) * sx,
        (visible.y - rect.y) * sy,
        min((visible.x + visible.w - rect.x) * sx, source.width),
        min((visible.y + visible.h - rect.y) * sy, source.height),
    )
