"""Concurrent ranking of glyph differences between two fonts.

This module coordinates the full comparison workflow: resolve both fonts,
render every glyph in each font, score each pair and sort the results.
Glyphs are compared in parallel with a ThreadPoolExecutor; every worker
thread owns its own GlyphRasterizer, so render surfaces and FreeType faces
are never shared.

Key components:
- compare_glyph: Render one glyph in both fonts and score the pair
- normalize_glyphs: Turn a character-set string or sequence into glyphs
- RankingEngine: Orchestrates a ranking run with generation-based cancellation
"""

import itertools
import threading
import time
import traceback
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Any

import structlog

from glyphdiff.config import GlyphDiffSettings
from glyphdiff.core.rasterizer import GlyphRasterizer
from glyphdiff.core.scorer import score
from glyphdiff.domain import DiffResult, FontFace, RankedResults, RenderWarning, WarningKind
from glyphdiff.exceptions import (
    FontResolutionError,
    GlyphRenderError,
    RankingCancelledError,
    RankingFailedError,
)
from glyphdiff.io import FontResolver
from glyphdiff.utils import RankingLogger, RankingStats

ProgressCallback = Callable[[int, int, str, bool], None]


def normalize_glyphs(glyphs: str | Iterable[str]) -> list[str]:
    """Split a character set into distinct glyphs, keeping first occurrences.

    A string is split into single characters; any other iterable is taken as
    a sequence of glyph strings.
    """
    return list(dict.fromkeys(glyphs))


def compare_glyph(
    rasterizer: GlyphRasterizer,
    glyph: str,
    font_a: str,
    font_b: str,
    font_size: int,
) -> dict[str, Any]:
    """Render a glyph in both fonts and score the pair.

    Args:
        rasterizer: Rasterizer owned by the calling thread
        glyph: Character to compare
        font_a: First font identifier
        font_b: Second font identifier
        font_size: Pixel size to render at

    Returns:
        Dictionary containing either:
        - Success: {"result": DiffResult, "duration_ms": float}
        - Error: {"error": GlyphRenderError, "glyph": str, "traceback": str,
          "duration_ms": float}
    """
    start_time = time.time()

    try:
        bitmap_a = rasterizer.render(glyph, font_a, font_size)
        bitmap_b = rasterizer.render(glyph, font_b, font_size)
        _, value = score(bitmap_a, bitmap_b)

        duration_ms = (time.time() - start_time) * 1000
        return {
            "result": DiffResult(
                glyph=glyph,
                score=value,
                font_a=font_a,
                font_b=font_b,
                bitmap_a=bitmap_a,
                bitmap_b=bitmap_b,
            ),
            "duration_ms": duration_ms,
        }

    except GlyphRenderError as e:
        duration_ms = (time.time() - start_time) * 1000
        return {
            "error": e,
            "glyph": glyph,
            "traceback": traceback.format_exc(),
            "duration_ms": duration_ms,
        }


class RankingEngine:
    """Ranks glyphs by how differently two fonts render them.

    Every call to ``rank`` takes a new generation number. Starting a newer
    run, or calling ``cancel``, supersedes older runs: they stop collecting,
    cancel their pending work and raise RankingCancelledError instead of
    returning results.

    Example:
        engine = RankingEngine(GlyphDiffSettings())
        ranked = engine.rank("ABC", "DejaVu Sans", "DejaVu Serif", font_size=100)
        for rank, glyph, value in ranked.rows():
            print(rank, glyph, value)
    """

    def __init__(
        self,
        config: GlyphDiffSettings | None = None,
        resolver: FontResolver | None = None,
    ) -> None:
        """Initialize the ranking engine.

        Args:
            config: Settings (defaults used if None)
            resolver: Font resolver (built from the font settings if None)
        """
        self.config = config or GlyphDiffSettings()
        self.resolver = resolver or FontResolver(
            search_paths=self.config.fonts.search_paths,
            include_system_fonts=self.config.fonts.include_system_fonts,
        )
        self.logger = structlog.get_logger("glyphdiff")
        self._generations = itertools.count(1)
        self._current_generation = 0
        self._lock = threading.Lock()
        self._resolve_lock = threading.Lock()
        # Stats of the most recently finished run; cancelled runs never set it.
        self.last_stats: RankingStats | None = None

    @property
    def current_generation(self) -> int:
        with self._lock:
            return self._current_generation

    def begin_run(self) -> int:
        """Start a new generation, superseding any run in flight."""
        with self._lock:
            self._current_generation = next(self._generations)
            return self._current_generation

    def cancel(self) -> None:
        """Supersede the run in flight without starting a new one."""
        self.begin_run()

    def is_current(self, generation: int) -> bool:
        """Check whether a run has not been superseded."""
        with self._lock:
            return generation == self._current_generation

    def resolve_fonts(
        self, fonts: Iterable[str]
    ) -> tuple[dict[str, FontFace | None], list[RenderWarning]]:
        """Resolve font identifiers once for a whole run.

        Returns:
            Tuple of (font -> face mapping, warnings). A None face means the
            fallback font will be used.

        Raises:
            FontResolutionError: If a font cannot be resolved and fallback is
                disabled
        """
        faces: dict[str, FontFace | None] = {}
        warnings: list[RenderWarning] = []

        with self._resolve_lock:
            for font in fonts:
                if font in faces:
                    continue
                try:
                    faces[font] = self.resolver.resolve(font)
                except FontResolutionError as e:
                    if not self.config.fonts.allow_fallback:
                        raise
                    faces[font] = None
                    self.logger.warning("Using fallback font", font=font, reason=e.reason)
                    warnings.append(
                        RenderWarning(
                            kind=WarningKind.FONT_FALLBACK,
                            message=f"Font '{font}' not found; rendered with the default font",
                            font=font,
                        )
                    )

        for font, face in faces.items():
            if face is not None:
                self.logger.info(
                    "Font resolved",
                    font=font,
                    path=str(face.path),
                    face=face.display_name,
                )
        return faces, warnings

    def rank(
        self,
        glyphs: str | Iterable[str],
        font_a: str,
        font_b: str,
        font_size: int | None = None,
        max_workers: int | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> RankedResults:
        """Rank glyphs from most to least different between two fonts.

        Args:
            glyphs: Character-set string or sequence of glyph strings;
                duplicates are compared once
            font_a: First font identifier
            font_b: Second font identifier
            font_size: Pixel size (config font size if None)
            max_workers: Maximum worker threads (config value if None)
            progress_callback: Optional callback(completed, total, glyph, success)
                for progress updates

        Returns:
            RankedResults sorted by descending score, ties in input order,
            with glyphs that failed to render reported as warnings

        Raises:
            ValueError: If font_size is not positive
            FontResolutionError: If a font cannot be resolved and fallback is
                disabled
            RankingFailedError: If too many glyphs fail to render
            RankingCancelledError: If a newer run superseded this one
            KeyboardInterrupt: If the run is interrupted by the user
        """
        generation = self.begin_run()

        size = self.config.render.font_size if font_size is None else font_size
        if size <= 0:
            raise ValueError(f"Font size must be positive, got {size}")
        if max_workers is None:
            max_workers = self.config.ranking.max_workers

        glyph_list = normalize_glyphs(glyphs)
        ranking_logger = RankingLogger(self.logger)
        stats = ranking_logger.stats
        stats.start_time = time.time()

        self.logger.info(
            "Starting ranking run",
            generation=generation,
            font_a=font_a,
            font_b=font_b,
            glyphs=len(glyph_list),
            font_size=size,
            max_workers=max_workers,
        )

        faces, warnings = self.resolve_fonts([font_a, font_b])

        collected = self._compare_parallel(
            glyph_list=glyph_list,
            font_a=font_a,
            font_b=font_b,
            font_size=size,
            faces=faces,
            generation=generation,
            max_workers=max_workers,
            ranking_logger=ranking_logger,
            progress_callback=progress_callback,
        )

        if not self.is_current(generation):
            ranking_logger.log_cancelled(generation, 0)
            raise RankingCancelledError(generation, len(collected), 0)

        # Input order first, then a stable descending sort keeps ties in it.
        in_order = [collected[g] for g in glyph_list if g in collected]
        ordered = sorted(in_order, key=lambda r: r.score, reverse=True)

        failures = stats.errors
        for glyph, message in failures:
            warnings.append(
                RenderWarning(
                    kind=WarningKind.RENDER_FAILED,
                    message=message,
                    glyph=glyph,
                )
            )

        stats.end_time = time.time()

        if failures and len(failures) > len(glyph_list) * self.config.ranking.max_failure_ratio:
            self.logger.error(
                "Ranking failed",
                generation=generation,
                failed=len(failures),
                total=len(glyph_list),
            )
            self.last_stats = stats
            raise RankingFailedError(list(failures), len(glyph_list))

        self.last_stats = stats
        self.logger.info(
            "Ranking complete",
            generation=generation,
            ranked=stats.ranked_count,
            failed=stats.failed_count,
            duration_seconds=round(stats.duration_seconds, 2),
        )

        return RankedResults(
            results=tuple(ordered),
            font_a=font_a,
            font_b=font_b,
            font_size=size,
            warnings=tuple(warnings),
            generation=generation,
        )

    def _compare_parallel(
        self,
        glyph_list: list[str],
        font_a: str,
        font_b: str,
        font_size: int,
        faces: dict[str, FontFace | None],
        generation: int,
        max_workers: int | None,
        ranking_logger: RankingLogger,
        progress_callback: ProgressCallback | None = None,
    ) -> dict[str, DiffResult]:
        """Compare glyphs in parallel using a ThreadPoolExecutor.

        Returns:
            Dictionary mapping glyphs to their DiffResults (failed glyphs are
            recorded in the ranking logger's stats instead)

        Raises:
            RankingCancelledError: If the run is superseded while collecting
        """
        collected: dict[str, DiffResult] = {}
        if not glyph_list:
            return collected

        local = threading.local()
        render_config = self.config.render
        allow_fallback = self.config.fonts.allow_fallback

        def run_task(glyph: str) -> dict[str, Any]:
            rasterizer = getattr(local, "rasterizer", None)
            if rasterizer is None:
                rasterizer = GlyphRasterizer(
                    config=render_config,
                    faces=faces,
                    allow_fallback=allow_fallback,
                )
                local.rasterizer = rasterizer
            ranking_logger.log_glyph_start(glyph)
            return compare_glyph(rasterizer, glyph, font_a, font_b, font_size)

        total = len(glyph_list)
        completed = 0
        pending_futures: dict[Future[dict[str, Any]], str] = {}

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            for glyph in glyph_list:
                pending_futures[executor.submit(run_task, glyph)] = glyph

            try:
                for future in as_completed(list(pending_futures)):
                    glyph = pending_futures.pop(future)
                    result = future.result()
                    success = "error" not in result

                    if success:
                        diff_result: DiffResult = result["result"]
                        collected[glyph] = diff_result
                        ranking_logger.log_glyph_complete(
                            glyph=glyph,
                            score=diff_result.score,
                            duration_ms=result["duration_ms"],
                        )
                    else:
                        ranking_logger.log_glyph_error(
                            glyph=glyph,
                            error=result["error"],
                            traceback=result.get("traceback"),
                        )

                    completed += 1
                    if progress_callback is not None:
                        progress_callback(completed, total, glyph, success)

                    if not self.is_current(generation):
                        pending = len(pending_futures)
                        for f in pending_futures:
                            f.cancel()
                        ranking_logger.log_cancelled(generation, pending)
                        raise RankingCancelledError(generation, completed, pending)

            except (KeyboardInterrupt, Exception):
                self.logger.info("Stopping ranking run", generation=generation)
                executor.shutdown(wait=True, cancel_futures=True)
                raise

        return collected
