"""Test helpers: small TrueType fonts built on the fly.

Glyphs are unions of axis-aligned rectangles in a 1000 UPM em, so two fonts
that give a character the same rectangles render it identically.
"""

from collections.abc import Callable
from pathlib import Path

from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

Rect = tuple[int, int, int, int]
FontFactory = Callable[..., Path]

TEST_FONT_SIZE = 40

BAR = [(100, 0, 500, 700)]
THIN_BAR = [(100, 0, 250, 700)]
TEE = [(50, 600, 550, 700), (250, 0, 350, 600)]
BOX = [(100, 0, 500, 100), (100, 600, 500, 700), (100, 100, 200, 600), (400, 100, 500, 600)]


def build_font(
    path: Path,
    family: str,
    glyphs: dict[str, list[Rect]],
    style: str = "Regular",
    advance: int = 600,
) -> Path:
    """Write a TrueType font whose glyphs are filled rectangles."""
    names = {ch: f"uni{ord(ch):04X}" for ch in glyphs}
    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder([".notdef", *names.values()])

    glyf = {".notdef": TTGlyphPen(None).glyph()}
    hmtx = {".notdef": (advance, 0)}
    for ch, rects in glyphs.items():
        pen = TTGlyphPen(None)
        for x0, y0, x1, y1 in rects:
            pen.moveTo((x0, y0))
            pen.lineTo((x0, y1))
            pen.lineTo((x1, y1))
            pen.lineTo((x1, y0))
            pen.closePath()
        glyf[names[ch]] = pen.glyph()
        hmtx[names[ch]] = (advance, min((r[0] for r in rects), default=0))

    fb.setupGlyf(glyf)
    fb.setupHorizontalMetrics(hmtx)
    fb.setupCharacterMap({ord(ch): name for ch, name in names.items()})
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupOS2(sTypoAscender=800, sTypoDescender=-200, usWinAscent=800, usWinDescent=200)
    fb.setupNameTable(
        {
            "familyName": family,
            "styleName": style,
            "uniqueFontIdentifier": f"{family}-{style}",
            "fullName": f"{family} {style}",
            "psName": f"{family.replace(' ', '')}-{style.replace(' ', '')}",
            "version": "Version 1.000",
        }
    )
    fb.setupPost()
    path.parent.mkdir(parents=True, exist_ok=True)
    fb.save(str(path))
    return path
