"""Shared fixtures for glyphdiff tests."""

from pathlib import Path

import pytest

from glyphdiff.config import FontConfig, GlyphDiffSettings, RankingConfig, RenderConfig
from tests.helpers import (
    BAR,
    BOX,
    TEE,
    TEST_FONT_SIZE,
    THIN_BAR,
    FontFactory,
    Rect,
    build_font,
)


@pytest.fixture
def font_dir(tmp_path: Path) -> Path:
    """Directory holding the generated test fonts."""
    directory = tmp_path / "fonts"
    directory.mkdir()
    return directory


@pytest.fixture
def font_factory(font_dir: Path) -> FontFactory:
    """Build a font into the test font directory."""

    def factory(
        filename: str,
        family: str,
        glyphs: dict[str, list[Rect]],
        style: str = "Regular",
    ) -> Path:
        return build_font(font_dir / filename, family, glyphs, style=style)

    return factory


@pytest.fixture
def font_a(font_factory: FontFactory) -> Path:
    """Font where A and C are bars, B a tee and D a box."""
    return font_factory("BlockA.ttf", "Block A", {"A": BAR, "B": TEE, "C": BAR, "D": BOX})


@pytest.fixture
def font_b(font_factory: FontFactory) -> Path:
    """Font matching font_a except that C is a thin bar and D a tee."""
    return font_factory("BlockB.ttf", "Block B", {"A": BAR, "B": TEE, "C": THIN_BAR, "D": TEE})


@pytest.fixture
def settings(font_dir: Path) -> GlyphDiffSettings:
    """Settings rendering small glyphs and resolving only test fonts."""
    return GlyphDiffSettings(
        render=RenderConfig(font_size=TEST_FONT_SIZE),
        fonts=FontConfig(search_paths=[font_dir], include_system_fonts=False),
        ranking=RankingConfig(max_workers=2),
    )
