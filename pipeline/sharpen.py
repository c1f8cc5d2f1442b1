"""Step 5: single-pass 3×3 sharpen.

out = (1 − intensity)·original + intensity·(convolution / kernel_sum), rounded
to nearest and clipped to 0..255. Only interior pixels of the colour channels
change; the one-pixel border and the alpha channel pass through untouched.
"""
import numpy as np
from PIL import Image

from models.raster import Raster

SHARPEN_KERNEL = np.array(
    [
        [0, -1, 0],
        [-1, 5, -1],
        [0, -1, 0],
    ],
    dtype=np.float64,
)


def sharpen(raster: Raster, intensity: float) -> Raster:
    intensity = max(0.0, min(1.0, float(intensity)))
    if intensity <= 0 or raster.width < 3 or raster.height < 3:
        return raster

    image = raster.image if raster.image.mode == "RGBA" else raster.image.convert("RGBA")
    pixels = np.asarray(image, dtype=np.uint8)
    out = pixels.copy()
    rgb = pixels[:, :, :3].astype(np.float64)

    kernel_sum = SHARPEN_KERNEL.sum() or 1.0
    height, width = rgb.shape[:2]
    acc = np.zeros((height - 2, width - 2, 3), dtype=np.float64)
    for ky in range(3):
        for kx in range(3):
            weight = SHARPEN_KERNEL[ky, kx]
            if weight:
                acc += weight * rgb[ky:ky + height - 2, kx:kx + width - 2]

    centre = rgb[1:-1, 1:-1]
    blended = (1.0 - intensity) * centre + intensity * (acc / kernel_sum)
    out[1:-1, 1:-1, :3] = np.clip(np.rint(blended), 0, 255).astype(np.uint8)

    return Raster(image=Image.fromarray(out), uses_alpha=raster.uses_alpha)
