"""Bitmap representation of a rendered glyph.

A Bitmap is one capture of the render surface: a square RGBA pixel grid plus
the provenance needed to re-render or relabel it later.
"""

from dataclasses import dataclass, field

import numpy as np
from PIL import Image


@dataclass(frozen=True, eq=False)
class Bitmap:
    """Immutable RGBA pixel grid of one glyph rendered in one font.

    Attributes:
        pixels: Read-only uint8 array of shape (height, width, 4)
        glyph: Character that was rendered
        font: Font identifier the glyph was rendered with
        font_size: Pixel size used for rendering
        fallback_used: True if the backend substituted its default font
    """

    pixels: np.ndarray = field(repr=False)
    glyph: str = ""
    font: str = ""
    font_size: int = 0
    fallback_used: bool = False

    def __post_init__(self) -> None:
        pixels = np.asarray(self.pixels, dtype=np.uint8)
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError(f"Bitmap pixels must have shape (h, w, 4), got {pixels.shape}")
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise ValueError("Bitmap dimensions must be positive")
        if pixels.flags.writeable:
            pixels = pixels.copy()
            pixels.flags.writeable = False
        object.__setattr__(self, "pixels", pixels)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def shape(self) -> tuple[int, int, int]:
        return self.pixels.shape  # type: ignore[return-value]

    def same_pixels(self, other: "Bitmap") -> bool:
        """Check whether two bitmaps are bit-identical."""
        return self.shape == other.shape and bool(np.array_equal(self.pixels, other.pixels))

    def to_image(self) -> Image.Image:
        """Convert to a Pillow RGBA image."""
        return Image.fromarray(np.array(self.pixels))

    @classmethod
    def from_image(
        cls,
        image: Image.Image,
        glyph: str = "",
        font: str = "",
        font_size: int = 0,
        fallback_used: bool = False,
    ) -> "Bitmap":
        """Capture a Pillow image as a Bitmap.

        Args:
            image: Source image (converted to RGBA if needed)
            glyph: Character the image shows
            font: Font identifier used for rendering
            font_size: Pixel size used for rendering
            fallback_used: Whether a fallback font was substituted

        Returns:
            Bitmap holding a private copy of the pixel data
        """
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        pixels = np.array(image, dtype=np.uint8)
        pixels.flags.writeable = False
        return cls(
            pixels=pixels,
            glyph=glyph,
            font=font,
            font_size=font_size,
            fallback_used=fallback_used,
        )
