"""Domain models for glyphdiff.

This module contains the core domain models representing rendered glyphs,
resolved fonts and ranking results. All models are designed to be:

- Immutable (frozen dataclasses, read-only pixel arrays)
- Independent of the rendering backend
- Safe to hand from the ranking engine to any consumer without copying

Key classes:
- Bitmap: A rendered glyph as an RGBA pixel grid
- FontFace: A font file resolved from a font identifier
- DiffResult: One glyph's score plus its two source bitmaps
- RenderWarning: A non-fatal problem surfaced beside the results
- RankedResults: Results ordered from most to least different
"""

from glyphdiff.domain.bitmap import Bitmap
from glyphdiff.domain.font import FontFace
from glyphdiff.domain.result import DiffResult, RankedResults, RenderWarning, WarningKind

__all__: list[str] = [
    # Enums
    "WarningKind",
    # Core types
    "Bitmap",
    "FontFace",
    "DiffResult",
    "RenderWarning",
    "RankedResults",
]
