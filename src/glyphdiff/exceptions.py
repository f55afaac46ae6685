"""Exception hierarchy for glyphdiff."""


class GlyphDiffError(Exception):
    """Base exception for all glyphdiff errors."""

    pass


class RenderError(GlyphDiffError):
    """Errors related to glyph rasterization."""

    pass


class GlyphRenderError(RenderError):
    """Backend failed to produce a bitmap for a glyph."""

    def __init__(self, glyph: str | None, font: str, reason: str) -> None:
        self.glyph = glyph
        self.font = font
        self.reason = reason
        super().__init__(f"Failed to render {glyph!r} in font '{font}': {reason}")


class FontResolutionError(GlyphRenderError):
    """Requested font identifier is not available to the rasterizer."""

    def __init__(self, font: str, reason: str) -> None:
        self.glyph = None
        self.font = font
        self.reason = reason
        GlyphDiffError.__init__(self, f"Could not resolve font '{font}': {reason}")


class ScoringError(GlyphDiffError):
    """Errors in bitmap comparison."""

    pass


class DimensionMismatchError(ScoringError):
    """Bitmaps being compared do not share the same dimensions."""

    def __init__(self, shape_a: tuple[int, ...], shape_b: tuple[int, ...]) -> None:
        self.shape_a = shape_a
        self.shape_b = shape_b
        super().__init__(f"Cannot compare bitmaps of shape {shape_a} and {shape_b}")


class RankingError(GlyphDiffError):
    """Errors related to a ranking run."""

    pass


class RankingCancelledError(RankingError):
    """Ranking run was superseded by a newer run before completion."""

    def __init__(self, generation: int, processed_count: int, pending_count: int) -> None:
        self.generation = generation
        self.processed_count = processed_count
        self.pending_count = pending_count
        super().__init__(
            f"Ranking run {generation} cancelled: "
            f"{processed_count} completed, {pending_count} pending"
        )


class RankingFailedError(RankingError):
    """Too many glyphs failed to render for the ranking to be meaningful."""

    def __init__(self, failures: list[tuple[str, str]], total: int) -> None:
        self.failures = failures
        self.total = total
        glyphs = ", ".join(repr(glyph) for glyph, _ in failures)
        super().__init__(f"Ranking failed: {len(failures)} of {total} glyphs failed ({glyphs})")
