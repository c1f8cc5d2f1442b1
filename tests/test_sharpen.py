"""Tests for the 3×3 sharpen filter."""
import numpy as np
from PIL import Image

from models.raster import Raster
from pipeline.sharpen import SHARPEN_KERNEL, sharpen


def _raster_from(array: np.ndarray, uses_alpha=True) -> Raster:
    return Raster(image=Image.fromarray(array.astype(np.uint8)), uses_alpha=uses_alpha)


def _checkerboard(w=8, h=6) -> np.ndarray:
    arr = np.zeros((h, w, 4), dtype=np.uint8)
    arr[..., 3] = 255
    arr[::2, ::2, :3] = 180
    arr[1::2, 1::2, :3] = 180
    arr[..., 3] = np.arange(w, dtype=np.uint8) * 10  # varying alpha
    return arr


class TestSharpen:
    def test_zero_intensity_is_identity(self):
        raster = _raster_from(_checkerboard())
        out = sharpen(raster, 0.0)
        assert np.array_equal(np.asarray(out.image), np.asarray(raster.image))

    def test_negative_intensity_clamped_to_noop(self):
        raster = _raster_from(_checkerboard())
        out = sharpen(raster, -3)
        assert np.array_equal(np.asarray(out.image), np.asarray(raster.image))

    def test_border_pixels_unchanged(self):
        arr = _checkerboard()
        out = np.asarray(sharpen(_raster_from(arr), 1.0).image)
        assert np.array_equal(out[0], arr[0])
        assert np.array_equal(out[-1], arr[-1])
        assert np.array_equal(out[:, 0], arr[:, 0])
        assert np.array_equal(out[:, -1], arr[:, -1])

    def test_alpha_passes_through(self):
        arr = _checkerboard()
        out = np.asarray(sharpen(_raster_from(arr), 1.0).image)
        assert np.array_equal(out[..., 3], arr[..., 3])

    def test_uniform_image_unchanged(self):
        arr = np.full((5, 5, 4), 77, dtype=np.uint8)
        out = np.asarray(sharpen(_raster_from(arr), 1.0).image)
        assert np.array_equal(out, arr)

    def test_single_bright_pixel(self):
        arr = np.zeros((5, 5, 4), dtype=np.uint8)
        arr[..., 3] = 255
        arr[2, 2, :3] = 40
        out = np.asarray(sharpen(_raster_from(arr), 0.5).image)
        # centre: 0.5 * 40 + 0.5 * (5 * 40) = 120
        assert tuple(out[2, 2, :3]) == (120, 120, 120)
        # 4-neighbour: 0.5 * 0 + 0.5 * (-40) → clipped to 0
        assert tuple(out[1, 2, :3]) == (0, 0, 0)

    def test_result_clipped_to_255(self):
        arr = np.zeros((3, 3, 4), dtype=np.uint8)
        arr[..., 3] = 255
        arr[1, 1, :3] = 250
        out = np.asarray(sharpen(_raster_from(arr), 1.0).image)
        assert tuple(out[1, 1, :3]) == (255, 255, 255)

    def test_too_small_for_interior_is_unchanged(self):
        arr = np.full((2, 7, 4), 90, dtype=np.uint8)
        raster = _raster_from(arr)
        assert sharpen(raster, 1.0) is raster

    def test_uses_alpha_flag_preserved(self):
        out = sharpen(_raster_from(_checkerboard(), uses_alpha=False), 0.4)
        assert out.uses_alpha is False

    def test_kernel_sums_to_one(self):
        assert SHARPEN_KERNEL.sum() == 1
