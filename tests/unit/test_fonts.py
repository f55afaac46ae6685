"""Unit tests for font resolution."""

from pathlib import Path
from unittest.mock import patch

import pytest

from glyphdiff.exceptions import FontResolutionError, GlyphRenderError
from glyphdiff.io.fonts import FontResolver, read_font_faces, system_font_dirs
from tests.helpers import BAR, FontFactory


class TestReadFontFaces:
    """Tests for reading name tables."""

    def test_read_single_font(self, font_factory: FontFactory) -> None:
        """Test reading names from a TTF file."""
        path = font_factory("Sample.ttf", "Sample Sans", {"A": BAR})
        faces = read_font_faces(path)

        assert len(faces) == 1
        face = faces[0]
        assert face.path == path
        assert face.index == 0
        assert face.family == "Sample Sans"
        assert face.full_name == "Sample Sans Regular"
        assert face.postscript_name == "SampleSans-Regular"
        assert face.style == "Regular"


class TestFontResolver:
    """Tests for FontResolver class."""

    @pytest.fixture
    def resolver(self, font_factory: FontFactory, font_dir: Path) -> FontResolver:
        font_factory("Sample-Regular.ttf", "Sample Sans", {"A": BAR})
        font_factory("Sample-Bold.ttf", "Sample Sans", {"A": BAR}, style="Bold")
        font_factory("Other.ttf", "Other Serif", {"A": BAR})
        return FontResolver([font_dir], include_system_fonts=False)

    def test_init_without_system_fonts(self, font_dir: Path) -> None:
        """Test that only the given paths are searched."""
        resolver = FontResolver([font_dir], include_system_fonts=False)
        assert resolver.search_paths == [font_dir]

    def test_resolve_by_path(self, font_factory: FontFactory) -> None:
        """Test that an existing file path resolves without scanning."""
        path = font_factory("Direct.ttf", "Direct", {"A": BAR})
        resolver = FontResolver([], include_system_fonts=False)

        face = resolver.resolve(str(path))
        assert face.path == path
        assert face.family == "Direct"

    def test_resolve_by_family_prefers_regular(self, resolver: FontResolver) -> None:
        """Test family lookup picks the regular face."""
        face = resolver.resolve("Sample Sans")
        assert face.style == "Regular"
        assert face.path.name == "Sample-Regular.ttf"

    def test_resolve_by_full_name(self, resolver: FontResolver) -> None:
        """Test full-name lookup selects a specific style."""
        face = resolver.resolve("Sample Sans Bold")
        assert face.style == "Bold"

    def test_resolve_regular_by_full_name(self, resolver: FontResolver) -> None:
        """Test the stored full name, including "Regular", is matched."""
        face = resolver.resolve("Sample Sans Regular")
        assert face.full_name == "Sample Sans Regular"
        assert face.path.name == "Sample-Regular.ttf"

    def test_resolve_by_postscript_name(self, resolver: FontResolver) -> None:
        """Test PostScript-name lookup."""
        face = resolver.resolve("OtherSerif-Regular")
        assert face.family == "Other Serif"

    def test_resolve_case_insensitive(self, resolver: FontResolver) -> None:
        """Test that names are matched ignoring case and whitespace."""
        assert resolver.resolve("  other serif ").family == "Other Serif"

    def test_resolve_unknown(self, resolver: FontResolver) -> None:
        """Test that unknown fonts raise FontResolutionError."""
        with pytest.raises(FontResolutionError, match="Nope") as exc_info:
            resolver.resolve("Nope")
        assert exc_info.value.font == "Nope"
        assert isinstance(exc_info.value, GlyphRenderError)

    def test_resolve_empty(self, resolver: FontResolver) -> None:
        """Test that empty identifiers are rejected."""
        with pytest.raises(FontResolutionError, match="empty"):
            resolver.resolve("   ")

    def test_resolve_unreadable_path(self, font_dir: Path) -> None:
        """Test that a corrupt font file raises FontResolutionError."""
        bad = font_dir / "broken.ttf"
        bad.write_bytes(b"not a font")
        resolver = FontResolver([], include_system_fonts=False)

        with pytest.raises(FontResolutionError, match="unreadable"):
            resolver.resolve(str(bad))

    def test_available_fonts_skips_unreadable(
        self, resolver: FontResolver, font_dir: Path
    ) -> None:
        """Test that the index skips files that are not fonts."""
        (font_dir / "broken.ttf").write_bytes(b"not a font")
        (font_dir / "readme.txt").write_text("hello")

        names = [face.display_name for face in resolver.available_fonts()]
        assert names == ["Other Serif Regular", "Sample Sans Bold", "Sample Sans Regular"]

    def test_index_built_once(self, resolver: FontResolver) -> None:
        """Test that the index is cached after the first lookup."""
        with patch("glyphdiff.io.fonts.read_font_faces", wraps=read_font_faces) as mock_read:
            resolver.resolve("Sample Sans")
            resolver.resolve("Other Serif")
            assert mock_read.call_count == 3

    def test_search_path_may_be_file(self, font_factory: FontFactory) -> None:
        """Test that a font file can be listed directly as a search path."""
        path = font_factory("Single.ttf", "Single", {"A": BAR})
        resolver = FontResolver([path], include_system_fonts=False)
        assert resolver.resolve("Single").path == path

    def test_missing_search_path_ignored(self, tmp_path: Path) -> None:
        """Test that nonexistent search paths are ignored."""
        resolver = FontResolver([tmp_path / "missing"], include_system_fonts=False)
        assert resolver.available_fonts() == []


def test_system_font_dirs_exist() -> None:
    """Test that only existing system directories are returned."""
    assert all(path.is_dir() for path in system_font_dirs())
