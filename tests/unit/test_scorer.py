"""Tests for difference scoring."""

from pathlib import Path

import numpy as np
import pytest

from glyphdiff.config import RenderConfig
from glyphdiff.core.rasterizer import GlyphRasterizer
from glyphdiff.core.scorer import difference, reduce_score, score
from glyphdiff.domain import Bitmap
from glyphdiff.exceptions import DimensionMismatchError
from tests.helpers import TEST_FONT_SIZE


def solid(value: int, size: int = 4, alpha: int = 255) -> np.ndarray:
    pixels = np.full((size, size, 4), value, dtype=np.uint8)
    pixels[..., 3] = alpha
    return pixels


class TestDifference:
    """Tests for the difference blend."""

    def test_absolute_difference(self) -> None:
        """Test colour channels hold |a - b|."""
        diff = difference(solid(200), solid(50))
        assert (diff[..., :3] == 150).all()
        assert (diff[..., 3] == 255).all()

    def test_union_alpha(self) -> None:
        """Test alpha is the union coverage of both layers."""
        assert (difference(solid(0, alpha=0), solid(0, alpha=0))[..., 3] == 0).all()
        assert (difference(solid(0, alpha=255), solid(0, alpha=0))[..., 3] == 255).all()
        assert (difference(solid(0, alpha=128), solid(0, alpha=128))[..., 3] == 192).all()

    def test_dimension_mismatch(self) -> None:
        """Test differently sized inputs are rejected."""
        with pytest.raises(DimensionMismatchError) as exc_info:
            difference(solid(0, size=4), solid(0, size=6))
        assert exc_info.value.shape_a == (4, 4, 4)
        assert exc_info.value.shape_b == (6, 6, 4)


class TestReduceScore:
    """Tests for the scalar reduction."""

    def test_single_full_pixel(self) -> None:
        """Test one fully different opaque pixel scores 1."""
        diff = np.zeros((3, 3, 4), dtype=np.uint8)
        diff[..., 3] = 255
        diff[1, 1, :3] = 255
        assert reduce_score(diff) == pytest.approx(1.0)

    def test_alpha_weighting(self) -> None:
        """Test partially transparent pixels earn proportionally less."""
        diff = np.zeros((1, 2, 4), dtype=np.uint8)
        diff[0, 0] = (255, 255, 255, 255)
        diff[0, 1] = (255, 255, 255, 51)
        assert reduce_score(diff) == pytest.approx(1.2)

    def test_not_normalized(self) -> None:
        """Test scores grow with the number of differing pixels."""
        small = np.zeros((2, 2, 4), dtype=np.uint8)
        small[..., 3] = 255
        small[0, 0, 0] = 255
        large = small.copy()
        large[1, 1, 0] = 255
        assert reduce_score(large) == pytest.approx(2 * reduce_score(small))


class TestScore:
    """Tests for bitmap scoring."""

    def test_zero_for_identical(self) -> None:
        """Test identical bitmaps score exactly zero."""
        bitmap = Bitmap(pixels=solid(128))
        diff_bitmap, value = score(bitmap, bitmap)
        assert value == 0.0
        assert (diff_bitmap.pixels[..., 0] == 0).all()

    def test_commutative_synthetic(self) -> None:
        """Test argument order does not matter."""
        rng = np.random.default_rng(7)
        a = Bitmap(pixels=rng.integers(0, 256, (8, 8, 4), dtype=np.uint8))
        b = Bitmap(pixels=rng.integers(0, 256, (8, 8, 4), dtype=np.uint8))

        diff_ab, score_ab = score(a, b)
        diff_ba, score_ba = score(b, a)
        assert score_ab == score_ba
        assert diff_ab.same_pixels(diff_ba)

    def test_diff_bitmap_metadata(self) -> None:
        """Test the difference bitmap keeps glyph and size."""
        a = Bitmap(pixels=solid(255), glyph="A", font="One", font_size=2)
        b = Bitmap(pixels=solid(0), glyph="A", font="Two", font_size=2)
        diff_bitmap, value = score(a, b)

        assert diff_bitmap.glyph == "A"
        assert diff_bitmap.font_size == 2
        assert value == pytest.approx(16.0)

    def test_mismatch(self) -> None:
        """Test bitmaps of different sizes cannot be scored."""
        with pytest.raises(DimensionMismatchError):
            score(Bitmap(pixels=solid(0, size=2)), Bitmap(pixels=solid(0, size=3)))

    def test_rendered_glyphs(self, font_a: Path, font_b: Path) -> None:
        """Test rendered glyphs: equal shapes score 0, differing ones do not, order irrelevant."""
        rasterizer = GlyphRasterizer(RenderConfig(font_size=TEST_FONT_SIZE))
        a_in_a = rasterizer.render("A", str(font_a))
        a_in_b = rasterizer.render("A", str(font_b))
        c_in_a = rasterizer.render("C", str(font_a))
        c_in_b = rasterizer.render("C", str(font_b))

        assert score(a_in_a, a_in_b)[1] == 0.0
        assert score(c_in_a, c_in_b)[1] > 0.0
        assert score(c_in_a, c_in_b)[1] == score(c_in_b, c_in_a)[1]
