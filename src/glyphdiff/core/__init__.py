"""Core rendering and scoring pipeline for glyphdiff.

This module contains the core algorithms for:

- Rasterization (render surfaces, glyph rendering via Pillow/FreeType)
- Scoring (difference blend and alpha-weighted reduction)
- Ranking (concurrent render+score, stable ordering, cancellation)
- Previews (translucent two-font overlays)
- Sessions (published results, debounced re-runs, font swapping)

Key functions:
- difference: Difference blend of two RGBA arrays
- reduce_score: Alpha-weighted red-channel sum of a difference image
- score: Difference bitmap and scalar score of two bitmaps
- compare_glyph: Render one glyph in two fonts and score it
- normalize_glyphs: Split a character set into distinct glyphs

Key classes:
- RenderSurface: Reusable drawing target with scoped reset
- GlyphRasterizer: Renders glyphs into Bitmaps
- RankingEngine: Ranks a character set between two fonts
- PreviewRenderer: Renders overlay previews
- CompareSession: Holds state between interactive runs
"""

from glyphdiff.core.preview import PreviewRenderer
from glyphdiff.core.ranking import RankingEngine, compare_glyph, normalize_glyphs
from glyphdiff.core.rasterizer import GlyphRasterizer, RenderSurface, glyph_origin
from glyphdiff.core.scorer import difference, reduce_score, score
from glyphdiff.core.session import CompareSession

__all__ = [
    # Session classes
    "CompareSession",
    # Rasterizer classes
    "GlyphRasterizer",
    # Preview classes
    "PreviewRenderer",
    # Ranking classes
    "RankingEngine",
    "RenderSurface",
    # Functions
    "compare_glyph",
    "difference",
    "glyph_origin",
    "normalize_glyphs",
    "reduce_score",
    "score",
]
