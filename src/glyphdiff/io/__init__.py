"""Font I/O layer for glyphdiff.

This module handles locating font files using fonttools. It provides a
clean abstraction layer between font files on disk and the rasterizer.

Key responsibilities:
- Scan font directories (system and user supplied)
- Read family, full and PostScript names from name tables
- Resolve font identifiers to concrete faces

Key classes:
- FontResolver: Resolve font identifiers to FontFace objects
"""

from glyphdiff.io.fonts import FontResolver, read_font_faces, system_font_dirs

__all__ = [
    "FontResolver",
    "read_font_faces",
    "system_font_dirs",
]
