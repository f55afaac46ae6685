"""Pixel-level difference scoring between two bitmaps.

The difference image is the "difference" blend of bitmap B over bitmap A:
colour channels hold ``|a - b|`` and the alpha channel holds the union
coverage of both layers, so two opaque renderings yield an opaque result.

The scalar score sums, over every pixel, the red channel scaled to [0, 1]
multiplied by the alpha channel scaled to [0, 1]. Glyphs are rendered black
on white, so the red channel alone carries the difference. The sum is not
normalized by pixel count.
"""

import numpy as np

from glyphdiff.domain import Bitmap
from glyphdiff.exceptions import DimensionMismatchError


def difference(pixels_a: np.ndarray, pixels_b: np.ndarray) -> np.ndarray:
    """Compute the difference blend of two RGBA arrays.

    Args:
        pixels_a: Base layer, uint8 array of shape (h, w, 4)
        pixels_b: Top layer, same shape as pixels_a

    Returns:
        uint8 array of shape (h, w, 4)

    Raises:
        DimensionMismatchError: If the shapes differ
    """
    if pixels_a.shape != pixels_b.shape:
        raise DimensionMismatchError(tuple(pixels_a.shape), tuple(pixels_b.shape))

    a = pixels_a.astype(np.int16)
    b = pixels_b.astype(np.int16)

    out = np.empty(pixels_a.shape, dtype=np.uint8)
    out[..., :3] = np.abs(a[..., :3] - b[..., :3])

    # Union coverage: 255 * (1 - (1 - aa)(1 - ab)), rounded.
    alpha_a = a[..., 3].astype(np.int32)
    alpha_b = b[..., 3].astype(np.int32)
    out[..., 3] = 255 - ((255 - alpha_a) * (255 - alpha_b) + 127) // 255
    return out


def reduce_score(diff: np.ndarray) -> float:
    """Reduce a difference image to its alpha-weighted red-channel sum."""
    red = diff[..., 0].astype(np.float64) / 255.0
    alpha = diff[..., 3].astype(np.float64) / 255.0
    return float(np.sum(red * alpha))


def score(bitmap_a: Bitmap, bitmap_b: Bitmap) -> tuple[Bitmap, float]:
    """Score how different two renderings of a glyph are.

    Args:
        bitmap_a: First rendering
        bitmap_b: Second rendering, same dimensions

    Returns:
        Tuple of (difference bitmap, score). The score is 0.0 for identical
        bitmaps and does not depend on argument order.

    Raises:
        DimensionMismatchError: If the bitmaps differ in size
    """
    diff = difference(bitmap_a.pixels, bitmap_b.pixels)
    diff.flags.writeable = False
    diff_bitmap = Bitmap(
        pixels=diff,
        glyph=bitmap_a.glyph,
        font=f"{bitmap_a.font} ^ {bitmap_b.font}",
        font_size=bitmap_a.font_size,
    )
    return diff_bitmap, reduce_score(diff)
