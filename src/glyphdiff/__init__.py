"""glyphdiff - Rank glyphs by how differently two fonts draw them.

glyphdiff renders a set of characters in two fonts, measures a per-glyph
pixel difference score and ranks the characters from most to least
different.

Example:
    $ glyphdiff "DejaVu Sans" "DejaVu Serif"

This prints the 62 ASCII letters and digits ordered by how much their
renderings in the two fonts differ.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
