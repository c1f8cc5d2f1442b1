"""Step 3: fit resolution.

Turns upright source dimensions and a preset into the output canvas size and
the rectangle the source is drawn into. Every intermediate scale is rounded
half-up immediately so repeated runs give identical pixel geometry.

Note: `outside` deliberately shares the cover branch. The two only differ
through the compositor's background policy, not through rectangle math.
"""
import math
from collections.abc import Callable

from models.preset import FitMode, Preset
from models.raster import DrawRect, FitResult


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def resolve_target(src_w: int, src_h: int, preset: Preset) -> tuple[int, int]:
    """Resolve the canvas size, deriving a missing dimension from the source aspect."""
    width, height = preset.width, preset.height
    aspect = src_w / src_h
    if preset.keep_aspect:
        if width and not height:
            height = round_half_up(width / aspect)
        elif height and not width:
            width = round_half_up(height * aspect)
    # Whatever is still unset keeps the source dimension
    return max(1, width or src_w), max(1, height or src_h)


def resolve(src_w: int, src_h: int, preset: Preset) -> FitResult:
    if src_w <= 0 or src_h <= 0:
        raise ValueError(f"source dimensions must be positive, got {src_w}x{src_h}")
    dst_w, dst_h = resolve_target(src_w, src_h, preset)
    if preset.is_single_dimension or (preset.width is None and preset.height is None):
        rect = DrawRect(x=0, y=0, w=dst_w, h=dst_h)
    else:
        rect = compute_draw_rect(src_w, src_h, dst_w, dst_h, preset.fit)
    return FitResult(width=dst_w, height=dst_h, rect=rect)


def compute_draw_rect(src_w: int, src_h: int, dst_w: int, dst_h: int, fit: FitMode) -> DrawRect:
    return _RECT_BUILDERS[FitMode(fit)](src_w, src_h, dst_w, dst_h)


# ---------------------------------------------------------------------------
# Rectangle builders
# ---------------------------------------------------------------------------

def _full_canvas(src_w: int, src_h: int, dst_w: int, dst_h: int) -> DrawRect:
    return DrawRect(x=0, y=0, w=dst_w, h=dst_h)


def _covering(src_w: int, src_h: int, dst_w: int, dst_h: int) -> DrawRect:
    """Scale so the source fully covers the canvas; overscan is clipped on draw."""
    src_ratio = src_w / src_h
    if src_ratio > dst_w / dst_h:
        h = dst_h
        w = round_half_up(h * src_ratio)
    else:
        w = dst_w
        h = round_half_up(w / src_ratio)
    return _centered(w, h, dst_w, dst_h)


def _contained(src_w: int, src_h: int, dst_w: int, dst_h: int) -> DrawRect:
    """Scale so the source fits entirely inside the canvas."""
    src_ratio = src_w / src_h
    if src_ratio > dst_w / dst_h:
        w = dst_w
        h = round_half_up(w / src_ratio)
    else:
        h = dst_h
        w = round_half_up(h * src_ratio)
    return _centered(w, h, dst_w, dst_h)


def _centered(w: int, h: int, dst_w: int, dst_h: int) -> DrawRect:
    w, h = max(1, w), max(1, h)
    return DrawRect(
        x=round_half_up((dst_w - w) / 2),
        y=round_half_up((dst_h - h) / 2),
        w=w,
        h=h,
    )


_RECT_BUILDERS: dict[FitMode, Callable[[int, int, int, int], DrawRect]] = {
    FitMode.STRETCH: _full_canvas,
    FitMode.COVER: _covering,
    FitMode.CONTAIN: _contained,
    FitMode.INSIDE: _contained,
    FitMode.OUTSIDE: _covering,
}
