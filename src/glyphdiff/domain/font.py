"""Resolved font face."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class FontFace:
    """A concrete font face the rasterizer can open.

    Attributes:
        path: Font file on disk
        index: Face index inside a font collection (0 for single fonts)
        family: Family name from the name table
        full_name: Full face name (e.g., "DejaVu Sans Bold")
        postscript_name: PostScript name, if present
        style: Subfamily name (e.g., "Regular", "Bold")
    """

    path: Path
    index: int = 0
    family: str = ""
    full_name: str = ""
    postscript_name: str | None = None
    style: str = ""

    @property
    def is_regular(self) -> bool:
        """Check if this is the upright regular face of its family."""
        return self.style.lower() in ("regular", "roman", "book", "normal", "")

    @property
    def display_name(self) -> str:
        return self.full_name or self.family or self.path.name
