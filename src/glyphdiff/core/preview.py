"""Two-font overlay previews.

The preview draws a glyph in font A and then in font B onto the same surface
in translucent colours, without resetting in between, so the overlap shows
where the fonts agree and disagree.
"""

import threading

from PIL import Image, ImageDraw

from glyphdiff.config import PreviewConfig, RenderConfig
from glyphdiff.core.rasterizer import GlyphRasterizer, RenderSurface
from glyphdiff.domain import DiffResult


class PreviewRenderer:
    """Renders overlay previews onto a dedicated preview surface.

    Glyphs are re-rendered from glyph + font on every call rather than reusing
    stored bitmaps, so the preview always reflects the current font labels.
    """

    def __init__(
        self,
        rasterizer: GlyphRasterizer,
        config: PreviewConfig | None = None,
        render_config: RenderConfig | None = None,
    ) -> None:
        self.rasterizer = rasterizer
        self.config = config or PreviewConfig()
        self.render_config = render_config or rasterizer.config
        self._surface: RenderSurface | None = None
        self._lock = threading.Lock()

    def _preview_surface(self, font_size: int) -> RenderSurface:
        if self._surface is None or self._surface.font_size != font_size:
            self._surface = RenderSurface(font_size, self.render_config.background)
        return self._surface

    def _overlay(
        self,
        surface: RenderSurface,
        glyph: str,
        font: str,
        font_size: int,
        color: tuple[int, int, int, int],
    ) -> None:
        layer = Image.new("RGBA", (surface.size, surface.size), (0, 0, 0, 0))
        self.rasterizer.draw_glyph(ImageDraw.Draw(layer), glyph, font, font_size, color)
        surface.composite(layer)

    def render(
        self,
        glyph: str,
        font_a: str,
        font_b: str,
        font_size: int | None = None,
    ) -> Image.Image:
        """Render the overlay of a glyph in two fonts.

        Args:
            glyph: Character to preview
            font_a: Font drawn first, in ``color_a``
            font_b: Font drawn second, in ``color_b``
            font_size: Pixel size (render config font size if None)

        Returns:
            A copy of the preview surface as an RGBA image

        Raises:
            GlyphRenderError: If either rendering fails
        """
        size = self.render_config.font_size if font_size is None else font_size
        with self._lock:
            surface = self._preview_surface(size)
            with surface.acquire():
                self._overlay(surface, glyph, font_a, size, self.config.color_a)
                self._overlay(surface, glyph, font_b, size, self.config.color_b)
                return surface.capture()

    def render_result(self, result: DiffResult) -> Image.Image:
        """Render the overlay for a ranked result using its font labels."""
        return self.render(
            result.glyph,
            result.font_a,
            result.font_b,
            result.bitmap_a.font_size or None,
        )
