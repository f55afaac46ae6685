"""Glyph rasterization onto reusable render surfaces.

This module turns a character plus a font into a Bitmap using Pillow's
FreeType bindings.

Key components:
- RenderSurface: Square RGBA drawing target with scoped reset discipline
- GlyphRasterizer: Resolves fonts, caches loaded faces and renders glyphs

A RenderSurface and the FreeType faces cached by a GlyphRasterizer must only
be used from one thread at a time. The ranking engine gives every worker its
own rasterizer.
"""

import math
import unicodedata
from collections.abc import Iterator, Mapping
from contextlib import contextmanager

import structlog
from PIL import Image, ImageDraw, ImageFont

from glyphdiff.config import LayoutEngine, RenderConfig
from glyphdiff.domain import Bitmap, FontFace
from glyphdiff.exceptions import FontResolutionError, GlyphRenderError
from glyphdiff.io import FontResolver

logger = structlog.get_logger("glyphdiff")

Color = tuple[int, int, int, int]

_LAYOUT_ENGINES = {
    LayoutEngine.AUTO: None,
    LayoutEngine.BASIC: ImageFont.Layout.BASIC,
    LayoutEngine.RAQM: ImageFont.Layout.RAQM,
}


def glyph_origin(font_size: int) -> tuple[int, int]:
    """Anchor point for a glyph: horizontal centre and alphabetic baseline."""
    return math.floor(font_size), math.floor(font_size * 1.5)


def validate_glyph(glyph: str, font: str) -> None:
    """Reject glyph strings the rasterizer cannot draw as a single line.

    Raises:
        GlyphRenderError: If the glyph is empty or contains control characters
    """
    if not glyph:
        raise GlyphRenderError(glyph, font, "empty glyph")
    for ch in glyph:
        if unicodedata.category(ch) in ("Cc", "Zl", "Zp"):
            raise GlyphRenderError(glyph, font, f"control character U+{ord(ch):04X}")


class RenderSurface:
    """A square RGBA drawing target.

    The surface side is twice the font size. After every capture the surface
    must be returned to its background so the next glyph starts clean; use
    ``acquire()`` to get that guarantee even when rendering fails.

    Example:
        surface = RenderSurface(font_size=100)
        with surface.acquire() as s:
            s.draw.text(...)
            pixels = s.capture()
    """

    def __init__(self, font_size: int, background: Color = (255, 255, 255, 255)) -> None:
        """Allocate the surface.

        Args:
            font_size: Font pixel size the surface is sized for
            background: RGBA colour the surface is cleared to

        Raises:
            ValueError: If font_size is not positive
            MemoryError: If the image cannot be allocated
        """
        if font_size <= 0:
            raise ValueError(f"Font size must be positive, got {font_size}")
        self.font_size = font_size
        self.background = background
        canvas = font_size * 2
        self._image = Image.new("RGBA", (canvas, canvas), background)
        self._draw = ImageDraw.Draw(self._image)
        self._draw.fontmode = "L"

    @property
    def size(self) -> int:
        """Side length in pixels."""
        return self._image.width

    @property
    def image(self) -> Image.Image:
        return self._image

    @property
    def draw(self) -> ImageDraw.ImageDraw:
        return self._draw

    def reset(self) -> None:
        """Clear the whole surface to the background colour."""
        self._draw.rectangle((0, 0, self.size, self.size), fill=self.background)

    def is_clean(self) -> bool:
        """Check whether every pixel equals the background colour."""
        extrema = self._image.getextrema()
        return all(lo == hi == c for (lo, hi), c in zip(extrema, self.background, strict=True))

    def composite(self, layer: Image.Image) -> None:
        """Alpha-composite a same-sized RGBA layer over the surface."""
        self._image.alpha_composite(layer)

    def capture(self) -> Image.Image:
        """Return a copy of the current surface contents."""
        return self._image.copy()

    @contextmanager
    def acquire(self) -> Iterator["RenderSurface"]:
        """Use the surface and reset it on exit, including on failure."""
        try:
            yield self
        finally:
            self.reset()


class GlyphRasterizer:
    """Renders single glyphs into Bitmaps.

    Fonts are resolved through a FontResolver (or a pre-resolved mapping) and
    the loaded FreeType faces are cached per (face, size). One surface is
    kept per font size and reused across renders.

    Example:
        rasterizer = GlyphRasterizer(RenderConfig(font_size=64))
        bitmap = rasterizer.render("A", "DejaVu Sans")
    """

    def __init__(
        self,
        config: RenderConfig | None = None,
        resolver: FontResolver | None = None,
        faces: Mapping[str, FontFace | None] | None = None,
        allow_fallback: bool = False,
    ) -> None:
        """Initialize the rasterizer.

        Args:
            config: Render configuration (defaults used if None)
            resolver: Resolver for font identifiers not found in ``faces``
            faces: Pre-resolved fonts; a None value marks a font that failed to
                resolve and should use the fallback face
            allow_fallback: Render with the default font when a font cannot
                be resolved instead of raising
        """
        self.config = config or RenderConfig()
        self._resolver = resolver
        self._faces: dict[str, FontFace | None] = dict(faces or {})
        self.allow_fallback = allow_fallback
        self._fonts: dict[tuple[str, int], ImageFont.FreeTypeFont] = {}
        self._surfaces: dict[int, RenderSurface] = {}

    def surface(self, font_size: int) -> RenderSurface:
        """Get (allocating on first use) the working surface for a font size."""
        surface = self._surfaces.get(font_size)
        if surface is None:
            surface = RenderSurface(font_size, self.config.background)
            self._surfaces[font_size] = surface
        return surface

    def resolve(self, font: str) -> FontFace | None:
        """Resolve a font identifier, returning None when falling back.

        Raises:
            FontResolutionError: If the font cannot be resolved and fallback
                is disabled
        """
        if font in self._faces:
            face = self._faces[font]
            if face is None and not self.allow_fallback:
                raise FontResolutionError(font, "font previously failed to resolve")
            return face

        try:
            if self._resolver is None:
                self._resolver = FontResolver()
            face = self._resolver.resolve(font)
        except FontResolutionError as e:
            if not self.allow_fallback:
                raise
            logger.warning("Font not found, using fallback font", font=font, reason=e.reason)
            face = None

        self._faces[font] = face
        return face

    def load_font(self, font: str, font_size: int) -> tuple[ImageFont.FreeTypeFont, bool]:
        """Load the FreeType face for a font identifier.

        Returns:
            Tuple of (loaded font, fallback_used)

        Raises:
            FontResolutionError: If the font cannot be resolved and fallback
                is disabled
            GlyphRenderError: If FreeType cannot open the font file
        """
        face = self.resolve(font)
        key = (font, font_size)
        cached = self._fonts.get(key)
        if cached is not None:
            return cached, face is None

        try:
            if face is None:
                loaded = ImageFont.load_default(size=font_size)
            else:
                loaded = ImageFont.truetype(
                    str(face.path),
                    size=font_size,
                    index=face.index,
                    layout_engine=_LAYOUT_ENGINES[self.config.layout_engine],
                )
        except OSError as e:
            raise GlyphRenderError(None, font, f"cannot open font: {e}") from e

        self._fonts[key] = loaded  # type: ignore[assignment]
        return loaded, face is None  # type: ignore[return-value]

    def draw_glyph(
        self,
        target: ImageDraw.ImageDraw,
        glyph: str,
        font: str,
        font_size: int,
        fill: Color,
    ) -> bool:
        """Draw a glyph onto a target without resetting anything.

        Returns:
            True if the fallback font was used

        Raises:
            GlyphRenderError: If the glyph is invalid or the backend fails
        """
        validate_glyph(glyph, font)
        loaded, fallback_used = self.load_font(font, font_size)
        try:
            target.text(
                glyph_origin(font_size),
                glyph,
                font=loaded,
                fill=fill,
                anchor="ms",
            )
        except (OSError, ValueError) as e:
            raise GlyphRenderError(glyph, font, str(e)) from e
        return fallback_used

    def render(self, glyph: str, font: str, font_size: int | None = None) -> Bitmap:
        """Render a glyph into a Bitmap.

        The working surface is cleared before drawing and reset after the
        capture, so consecutive renders never share pixels.

        Args:
            glyph: Character (or short grapheme string) to render
            font: Font identifier
            font_size: Pixel size (config font size if None)

        Returns:
            Bitmap of side ``2 * font_size``

        Raises:
            ValueError: If font_size is not positive
            FontResolutionError: If the font cannot be resolved
            GlyphRenderError: If rendering fails
        """
        size = self.config.font_size if font_size is None else font_size
        if size <= 0:
            raise ValueError(f"Font size must be positive, got {size}")

        try:
            surface = self.surface(size)
        except MemoryError as e:
            raise GlyphRenderError(glyph, font, f"cannot allocate {size * 2}px surface") from e

        surface.reset()
        with surface.acquire():
            fallback_used = self.draw_glyph(surface.draw, glyph, font, size, self.config.fill)
            bitmap = Bitmap.from_image(
                surface.image,
                glyph=glyph,
                font=font,
                font_size=size,
                fallback_used=fallback_used,
            )

        logger.debug("Glyph rendered", glyph=glyph, font=font, size=size, fallback=fallback_used)
        return bitmap
