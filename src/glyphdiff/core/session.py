"""Interactive comparison sessions.

A CompareSession holds everything a front end needs between runs: the two
font identifiers, the character set, the currently published RankedResults
and the sticky preview index. Font or character-set edits schedule a
debounced re-run; results from a run that was superseded while in flight are
discarded and never replace newer published results.
"""

import threading
from collections.abc import Callable, Iterable

import structlog
from PIL import Image

from glyphdiff.config import GlyphDiffSettings
from glyphdiff.core.preview import PreviewRenderer
from glyphdiff.core.ranking import ProgressCallback, RankingEngine
from glyphdiff.core.rasterizer import GlyphRasterizer
from glyphdiff.domain import RankedResults
from glyphdiff.exceptions import GlyphDiffError, RankingCancelledError

ResultsListener = Callable[[RankedResults], None]
ErrorListener = Callable[[GlyphDiffError], None]


class CompareSession:
    """Stateful comparison of two fonts over a character set.

    Example:
        session = CompareSession("DejaVu Sans", "DejaVu Serif")
        ranked = session.run()
        image = session.display_preview(0)
        session.swap_fonts()
    """

    def __init__(
        self,
        font_a: str,
        font_b: str,
        charset: str | Iterable[str] | None = None,
        config: GlyphDiffSettings | None = None,
        engine: RankingEngine | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            font_a: First font identifier
            font_b: Second font identifier
            charset: Characters to compare (configured charset if None)
            config: Settings (defaults used if None)
            engine: Ranking engine (built from config if None)
        """
        self.config = config or (engine.config if engine else GlyphDiffSettings())
        self.engine = engine or RankingEngine(self.config)
        self.font_a = font_a
        self.font_b = font_b
        self.charset = charset if charset is not None else self.config.ranking.charset
        self.preview_index: int | None = None
        self.preview_image: Image.Image | None = None
        self.logger = structlog.get_logger("glyphdiff")

        self._results: RankedResults | None = None
        self._listeners: list[ResultsListener] = []
        self._error_listeners: list[ErrorListener] = []
        self._last_error: GlyphDiffError | None = None
        self._state_lock = threading.RLock()
        self._timer: threading.Timer | None = None
        self._preview = PreviewRenderer(
            GlyphRasterizer(
                config=self.config.render,
                resolver=self.engine.resolver,
                allow_fallback=self.config.fonts.allow_fallback,
            ),
            config=self.config.preview,
        )

    @property
    def results(self) -> RankedResults | None:
        """The most recently published results."""
        with self._state_lock:
            return self._results

    def subscribe(self, listener: ResultsListener) -> None:
        """Call ``listener`` with every newly published RankedResults."""
        self._listeners.append(listener)

    def subscribe_errors(self, listener: ErrorListener) -> None:
        """Call ``listener`` with the error of every failed run."""
        self._error_listeners.append(listener)

    @property
    def last_error(self) -> GlyphDiffError | None:
        """Error of the latest failed run, cleared when results are published."""
        with self._state_lock:
            return self._last_error

    def run(self, progress_callback: ProgressCallback | None = None) -> RankedResults | None:
        """Rank the current character set with the current fonts.

        Failures are also stored in ``last_error`` and sent to the error
        listeners before being raised.

        Returns:
            The published results, or None if a newer run superseded this one

        Raises:
            FontResolutionError: If a font cannot be resolved
            RankingFailedError: If too many glyphs fail to render
        """
        with self._state_lock:
            charset, font_a, font_b = self.charset, self.font_a, self.font_b

        try:
            ranked = self.engine.rank(
                charset,
                font_a,
                font_b,
                progress_callback=progress_callback,
            )
        except RankingCancelledError as e:
            self.logger.debug("Discarding superseded run", generation=e.generation)
            return None
        except GlyphDiffError as e:
            self._report_error(e)
            raise

        if not self._publish(ranked):
            return None
        return ranked

    def _publish(self, ranked: RankedResults) -> bool:
        with self._state_lock:
            stale = not self.engine.is_current(ranked.generation) or (
                self._results is not None and ranked.generation < self._results.generation
            )
            if stale:
                self.logger.debug("Discarding stale results", generation=ranked.generation)
                return False
            self._results = ranked
            self._last_error = None
            self.restore_preview()

        for listener in list(self._listeners):
            listener(ranked)
        return True

    def _report_error(self, error: GlyphDiffError) -> None:
        with self._state_lock:
            self._last_error = error
        self.logger.error("Ranking failed", error=str(error), error_type=type(error).__name__)
        for listener in list(self._error_listeners):
            listener(error)

    def schedule_run(self) -> None:
        """Re-run after the debounce delay, restarting the delay on each call."""
        with self._state_lock:
            if self._timer is not None:
                self._timer.cancel()
            delay = self.config.session.debounce_ms / 1000.0
            self._timer = threading.Timer(delay, self._run_scheduled)
            self._timer.daemon = True
            self._timer.start()

    def _run_scheduled(self) -> None:
        with self._state_lock:
            self._timer = None
        try:
            self.run()
        except GlyphDiffError:
            # Already stored in last_error and sent to the error listeners.
            return

    @property
    def has_pending_run(self) -> bool:
        with self._state_lock:
            return self._timer is not None

    def flush(self) -> RankedResults | None:
        """Run a pending debounced re-run immediately."""
        with self._state_lock:
            timer, self._timer = self._timer, None
        if timer is None:
            return self.results
        timer.cancel()
        return self.run()

    def set_fonts(self, font_a: str | None = None, font_b: str | None = None) -> None:
        """Change one or both fonts and schedule a debounced re-run."""
        with self._state_lock:
            if font_a is not None:
                self.font_a = font_a
            if font_b is not None:
                self.font_b = font_b
        self.engine.cancel()
        self.schedule_run()

    def set_charset(self, charset: str | Iterable[str]) -> None:
        """Change the character set and schedule a debounced re-run."""
        with self._state_lock:
            self.charset = charset
        self.engine.cancel()
        self.schedule_run()

    def swap_fonts(self) -> None:
        """Exchange fonts A and B.

        Published results are relabeled, not re-rendered; the preview is
        refreshed with the new colour assignment.
        """
        with self._state_lock:
            self.font_a, self.font_b = self.font_b, self.font_a
            if self._results is not None:
                self._results = self._results.swapped()
            self.restore_preview()

    def display_preview(self, index: int) -> Image.Image:
        """Render the overlay preview for a 0-based rank index.

        Raises:
            RuntimeError: If no results have been published
            IndexError: If the index is out of range
        """
        with self._state_lock:
            if self._results is None:
                raise RuntimeError("No results published yet")
            if not 0 <= index < len(self._results):
                raise IndexError(f"Rank index {index} out of range (0-{len(self._results) - 1})")
            image = self._preview.render_result(self._results[index])
            self.preview_index = index
            self.preview_image = image
            return image

    def restore_preview(self) -> Image.Image | None:
        """Re-render the sticky preview, falling back to rank 1 if out of range."""
        with self._state_lock:
            if self._results is None or len(self._results) == 0:
                return None
            index = self.preview_index
            if index is None or index >= len(self._results):
                index = 0
            return self.display_preview(index)

    def close(self) -> None:
        """Cancel any pending re-run and supersede the run in flight."""
        with self._state_lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        self.engine.cancel()

    def __enter__(self) -> "CompareSession":
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        self.close()
