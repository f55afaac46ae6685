"""Font resolution for glyphdiff.

This module provides the FontResolver class, which turns a font identifier
(a file path or a family/full/PostScript name) into a FontFace the rasterizer
can open. Names are read from each candidate file's ``name`` table with
fonttools.
"""

import os
import sys
from collections.abc import Iterable, Iterator
from pathlib import Path

import structlog
from fontTools.ttLib import TTCollection, TTFont, TTLibError

from glyphdiff.domain.font import FontFace
from glyphdiff.exceptions import FontResolutionError

logger = structlog.get_logger("glyphdiff")

FONT_EXTENSIONS = frozenset({".ttf", ".otf", ".ttc", ".otc"})
COLLECTION_EXTENSIONS = frozenset({".ttc", ".otc"})


def system_font_dirs() -> list[Path]:
    """Return the platform's standard font directories that exist."""
    home = Path.home()
    candidates = [
        Path("/usr/share/fonts"),
        Path("/usr/local/share/fonts"),
        home / ".fonts",
        home / ".local" / "share" / "fonts",
    ]
    if sys.platform == "darwin":
        candidates += [
            Path("/Library/Fonts"),
            Path("/System/Library/Fonts"),
            home / "Library" / "Fonts",
        ]
    elif sys.platform == "win32":
        windir = os.environ.get("WINDIR", "C:/Windows")
        candidates += [
            Path(windir) / "Fonts",
            home / "AppData" / "Local" / "Microsoft" / "Windows" / "Fonts",
        ]
    return [p for p in candidates if p.is_dir()]


def _face_from_ttfont(font: TTFont, path: Path, index: int) -> FontFace:
    name_table = font["name"]
    family = name_table.getBestFamilyName() or ""
    # nameID 4 as stored; getBestFullName rebuilds it and drops "Regular".
    full_name = name_table.getDebugName(4) or name_table.getBestFullName() or ""
    style = name_table.getBestSubFamilyName() or ""
    postscript_name = name_table.getDebugName(6)
    return FontFace(
        path=path,
        index=index,
        family=family,
        full_name=full_name,
        postscript_name=postscript_name,
        style=style,
    )


def read_font_faces(path: Path) -> list[FontFace]:
    """Read every face described by a font file.

    Args:
        path: Path to a TTF/OTF file or a TTC/OTC collection

    Returns:
        One FontFace per face in the file

    Raises:
        TTLibError: If the file is not a valid font
        OSError: If the file cannot be read
    """
    if path.suffix.lower() in COLLECTION_EXTENSIONS:
        collection = TTCollection(str(path), lazy=True)
        try:
            return [
                _face_from_ttfont(font, path, idx)
                for idx, font in enumerate(collection.fonts)
            ]
        finally:
            collection.close()

    font = TTFont(str(path), lazy=True)
    try:
        return [_face_from_ttfont(font, path, 0)]
    finally:
        font.close()


class FontResolver:
    """Resolves font identifiers to font files.

    The index of available faces is built lazily on first lookup by scanning
    the search paths. A font identifier that names an existing file is used
    directly without scanning.

    Example:
        resolver = FontResolver([Path("fonts")])
        face = resolver.resolve("DejaVu Sans")
        print(face.path)
    """

    def __init__(
        self,
        search_paths: Iterable[Path] | None = None,
        include_system_fonts: bool = True,
    ) -> None:
        """Initialize the font resolver.

        Args:
            search_paths: Extra directories (or font files) to index
            include_system_fonts: Also index the platform's font directories
        """
        paths = [Path(p).expanduser() for p in (search_paths or [])]
        if include_system_fonts:
            paths += system_font_dirs()
        self._search_paths = paths
        self._faces: list[FontFace] | None = None

    @property
    def search_paths(self) -> list[Path]:
        return list(self._search_paths)

    def _iter_font_files(self) -> Iterator[Path]:
        seen: set[Path] = set()
        for root in self._search_paths:
            if root.is_file():
                files: Iterable[Path] = [root]
            elif root.is_dir():
                files = sorted(root.rglob("*"))
            else:
                continue
            for path in files:
                if path.suffix.lower() not in FONT_EXTENSIONS or not path.is_file():
                    continue
                resolved = path.resolve()
                if resolved in seen:
                    continue
                seen.add(resolved)
                yield path

    def _build_index(self) -> list[FontFace]:
        faces: list[FontFace] = []
        for path in self._iter_font_files():
            try:
                faces.extend(read_font_faces(path))
            except (TTLibError, OSError, KeyError) as e:
                logger.debug("Skipping unreadable font", path=str(path), error=str(e))
        logger.debug(
            "Font index built",
            faces=len(faces),
            search_paths=[str(p) for p in self._search_paths],
        )
        return faces

    def available_fonts(self) -> list[FontFace]:
        """Return every indexed face, sorted by display name."""
        if self._faces is None:
            self._faces = self._build_index()
        return sorted(self._faces, key=lambda f: (f.display_name.lower(), str(f.path)))

    def resolve(self, font: str) -> FontFace:
        """Resolve a font identifier to a FontFace.

        Matching order: existing file path, full name, PostScript name, then
        family name (preferring the regular face). Name comparisons ignore
        case and surrounding whitespace.

        Args:
            font: Font file path or font name

        Returns:
            The matching FontFace

        Raises:
            FontResolutionError: If the identifier is empty or matches nothing
        """
        if not font or not font.strip():
            raise FontResolutionError(font, "empty font identifier")

        candidate = Path(font).expanduser()
        if candidate.suffix.lower() in FONT_EXTENSIONS and candidate.is_file():
            try:
                return read_font_faces(candidate)[0]
            except (TTLibError, OSError, KeyError) as e:
                raise FontResolutionError(font, f"unreadable font file: {e}") from e

        key = font.strip().lower()
        faces = self.available_fonts()

        for face in faces:
            if face.full_name.lower() == key:
                return face

        for face in faces:
            if face.postscript_name and face.postscript_name.lower() == key:
                return face

        family_matches = [face for face in faces if face.family.lower() == key]
        if family_matches:
            regular = [face for face in family_matches if face.is_regular]
            return (regular or family_matches)[0]

        raise FontResolutionError(
            font,
            f"no matching font among {len(faces)} indexed faces",
        )
