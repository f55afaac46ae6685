"""Ranking results.

This module defines the result store: per-glyph DiffResults, non-fatal
RenderWarnings, and the immutable RankedResults produced by a ranking run.

Font assignment is stored as data on every result (which font produced which
bitmap), so swapping the two fonts is a relabeling that never touches pixels.
"""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import overload

from glyphdiff.domain.bitmap import Bitmap


class WarningKind(str, Enum):
    """Kind of non-fatal problem reported alongside ranked results."""

    RENDER_FAILED = "render_failed"
    FONT_FALLBACK = "font_fallback"


@dataclass(frozen=True)
class RenderWarning:
    """A problem that did not abort the ranking run.

    Attributes:
        kind: What went wrong
        message: Human-readable description
        glyph: Affected glyph (None for font-level warnings)
        font: Affected font identifier, if any
    """

    kind: WarningKind
    message: str
    glyph: str | None = None
    font: str | None = None


@dataclass(frozen=True, eq=False)
class DiffResult:
    """One glyph's dissimilarity score and the two bitmaps it was computed from.

    Attributes:
        glyph: Character that was compared
        score: Alpha-weighted difference score (>= 0, higher = more different)
        font_a: Font identifier labelled "A"
        font_b: Font identifier labelled "B"
        bitmap_a: Rendering of the glyph in font_a
        bitmap_b: Rendering of the glyph in font_b
    """

    glyph: str
    score: float
    font_a: str
    font_b: str
    bitmap_a: Bitmap
    bitmap_b: Bitmap

    def __post_init__(self) -> None:
        if self.score < 0:
            raise ValueError(f"Score must be non-negative, got {self.score}")
        if self.bitmap_a.shape != self.bitmap_b.shape:
            raise ValueError("DiffResult bitmaps must share dimensions")

    def bitmap_for(self, font: str) -> Bitmap:
        """Get the bitmap rendered in the given font.

        Raises:
            KeyError: If the font is neither font_a nor font_b
        """
        if font == self.font_a:
            return self.bitmap_a
        if font == self.font_b:
            return self.bitmap_b
        raise KeyError(font)

    def swapped(self) -> "DiffResult":
        """Relabel font A as font B and vice versa.

        Each bitmap travels with the font that produced it; the score is
        symmetric and stays the same.
        """
        return replace(
            self,
            font_a=self.font_b,
            font_b=self.font_a,
            bitmap_a=self.bitmap_b,
            bitmap_b=self.bitmap_a,
        )


@dataclass(frozen=True)
class RankedResults(Sequence[DiffResult]):
    """Glyphs ordered from most to least different.

    Created once per ranking run and never mutated; re-ranking produces a new
    instance. Warnings are kept separate from the scored results.

    Attributes:
        results: DiffResults sorted by descending score (ties in input order)
        font_a: Font identifier labelled "A"
        font_b: Font identifier labelled "B"
        font_size: Pixel size used for rendering
        warnings: Non-fatal problems encountered during the run
        generation: Identifier of the run that produced these results
    """

    results: tuple[DiffResult, ...]
    font_a: str
    font_b: str
    font_size: int
    warnings: tuple[RenderWarning, ...] = field(default=())
    generation: int = 0

    @overload
    def __getitem__(self, index: int) -> DiffResult: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[DiffResult, ...]: ...

    def __getitem__(self, index: int | slice) -> DiffResult | tuple[DiffResult, ...]:
        return self.results[index]

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self) -> Iterator[DiffResult]:
        return iter(self.results)

    @property
    def glyphs(self) -> list[str]:
        return [r.glyph for r in self.results]

    @property
    def scores(self) -> list[float]:
        return [r.score for r in self.results]

    @property
    def failed_glyphs(self) -> list[str]:
        """Glyphs excluded from results because they failed to render."""
        return [
            w.glyph
            for w in self.warnings
            if w.kind == WarningKind.RENDER_FAILED and w.glyph is not None
        ]

    def rank_of(self, glyph: str) -> int:
        """Get the 1-based rank of a glyph.

        Raises:
            KeyError: If the glyph is not in the results
        """
        for idx, result in enumerate(self.results):
            if result.glyph == glyph:
                return idx + 1
        raise KeyError(glyph)

    def rows(self) -> Iterator[tuple[int, str, float]]:
        """Yield (rank, glyph, score) rows for display, rank starting at 1."""
        for idx, result in enumerate(self.results):
            yield idx + 1, result.glyph, result.score

    def is_monotonic(self) -> bool:
        """Check that scores never increase down the ranking."""
        scores = self.scores
        return all(scores[i] >= scores[i + 1] for i in range(len(scores) - 1))

    def swapped(self) -> "RankedResults":
        """Relabel fonts A and B on every result without re-rendering."""
        return replace(
            self,
            results=tuple(r.swapped() for r in self.results),
            font_a=self.font_b,
            font_b=self.font_a,
        )
