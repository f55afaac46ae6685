"""Tests for overlay previews."""

from pathlib import Path

import numpy as np
import pytest

from glyphdiff.config import PreviewConfig, RenderConfig
from glyphdiff.core.preview import PreviewRenderer
from glyphdiff.core.rasterizer import GlyphRasterizer
from glyphdiff.domain import Bitmap, DiffResult
from glyphdiff.exceptions import GlyphRenderError
from tests.helpers import TEST_FONT_SIZE


@pytest.fixture
def renderer() -> PreviewRenderer:
    return PreviewRenderer(GlyphRasterizer(RenderConfig(font_size=TEST_FONT_SIZE)))


def reddish(pixels: np.ndarray) -> np.ndarray:
    return (pixels[..., 0] > pixels[..., 2] + 40) & (pixels[..., 1] < 200)


def bluish(pixels: np.ndarray) -> np.ndarray:
    return (pixels[..., 2] > pixels[..., 0] + 40) & (pixels[..., 1] < 230)


class TestPreviewRenderer:
    """Tests for PreviewRenderer class."""

    def test_default_colours(self) -> None:
        """Test font A is red at half alpha and font B blue at quarter alpha."""
        config = PreviewConfig()
        assert config.color_a == (255, 0, 0, 128)
        assert config.color_b == (0, 0, 255, 64)

    def test_size_and_background(
        self, renderer: PreviewRenderer, font_a: Path, font_b: Path
    ) -> None:
        """Test the preview matches the render surface size on white."""
        image = renderer.render("D", str(font_a), str(font_b))

        assert image.mode == "RGBA"
        assert image.size == (TEST_FONT_SIZE * 2, TEST_FONT_SIZE * 2)
        assert image.getpixel((0, 0)) == (255, 255, 255, 255)

    def test_both_fonts_visible(
        self, renderer: PreviewRenderer, font_a: Path, font_b: Path
    ) -> None:
        """Test strokes unique to each font show in that font's colour."""
        pixels = np.asarray(renderer.render("D", str(font_a), str(font_b)))

        assert reddish(pixels).any()
        assert bluish(pixels).any()

    def test_overlap_blends_both_colours(self, renderer: PreviewRenderer, font_a: Path) -> None:
        """Test overlapping strokes accumulate instead of replacing each other."""
        image = renderer.render("A", str(font_a), str(font_a))
        r, g, b, a = image.getpixel((TEST_FONT_SIZE, TEST_FONT_SIZE + 10))

        assert a == 255
        assert r > b > g
        assert r + g + b < 255 + 127 + 127

    def test_identical_renders_repeatable(
        self, renderer: PreviewRenderer, font_a: Path, font_b: Path
    ) -> None:
        """Test the preview surface is reset between renders."""
        first = renderer.render("C", str(font_a), str(font_b))
        renderer.render("D", str(font_a), str(font_b))
        again = renderer.render("C", str(font_a), str(font_b))

        assert np.array_equal(np.asarray(first), np.asarray(again))

    def test_surface_clean_after_render(
        self, renderer: PreviewRenderer, font_a: Path, font_b: Path
    ) -> None:
        renderer.render("C", str(font_a), str(font_b))
        assert renderer._preview_surface(TEST_FONT_SIZE).is_clean()

    def test_surface_clean_after_failure(self, renderer: PreviewRenderer, font_a: Path) -> None:
        """Test a failed overlay leaves the preview surface clean."""
        with pytest.raises(GlyphRenderError):
            renderer.render("\x07", str(font_a), str(font_a))
        assert renderer._preview_surface(TEST_FONT_SIZE).is_clean()

    def test_swapped_fonts_swap_colours(
        self, renderer: PreviewRenderer, font_a: Path, font_b: Path
    ) -> None:
        """Test exchanging fonts exchanges which strokes are red and blue."""
        # Bottom bar of the box in font_a, absent from the tee in font_b.
        point = (TEST_FONT_SIZE - 5, TEST_FONT_SIZE + 18)
        ab = np.asarray(renderer.render("D", str(font_a), str(font_b)))
        ba = np.asarray(renderer.render("D", str(font_b), str(font_a)))

        assert reddish(ab)[point[1], point[0]]
        assert bluish(ba)[point[1], point[0]]

    def test_render_result_uses_labels(
        self, renderer: PreviewRenderer, font_a: Path, font_b: Path
    ) -> None:
        """Test a result's font labels decide the colours, not its bitmaps."""
        blank = Bitmap(
            pixels=np.full((TEST_FONT_SIZE * 2, TEST_FONT_SIZE * 2, 4), 255, dtype=np.uint8),
            font_size=TEST_FONT_SIZE,
        )
        result = DiffResult(
            glyph="D",
            score=1.0,
            font_a=str(font_a),
            font_b=str(font_b),
            bitmap_a=blank,
            bitmap_b=blank,
        )

        from_result = np.asarray(renderer.render_result(result))
        direct = np.asarray(renderer.render("D", str(font_a), str(font_b)))
        assert np.array_equal(from_result, direct)

        swapped = np.asarray(renderer.render_result(result.swapped()))
        assert np.array_equal(swapped, np.asarray(renderer.render("D", str(font_b), str(font_a))))
