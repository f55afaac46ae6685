"""Logging utilities for glyphdiff."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import structlog


@dataclass
class RankingStats:
    """Statistics from a ranking run."""

    ranked_count: int = 0
    failed_count: int = 0
    cancelled_count: int = 0
    was_cancelled: bool = False
    errors: list[tuple[str, str]] = field(default_factory=list)
    glyph_timings_ms: list[float] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate ranking duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0

    @property
    def avg_glyph_time_ms(self) -> float | None:
        if not self.glyph_timings_ms:
            return None
        return sum(self.glyph_timings_ms) / len(self.glyph_timings_ms)

    @property
    def min_glyph_time_ms(self) -> float | None:
        return min(self.glyph_timings_ms) if self.glyph_timings_ms else None

    @property
    def max_glyph_time_ms(self) -> float | None:
        return max(self.glyph_timings_ms) if self.glyph_timings_ms else None


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root_logger.addHandler(file_handler)

    if not quiet:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console_level.upper()))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("glyphdiff")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level,
    )

    return logger


class RankingLogger:
    """Logger for tracking ranking progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = RankingStats()

    def log_glyph_start(self, glyph: str) -> None:
        """Log start of glyph comparison."""
        self._logger.debug("Comparing glyph", glyph=glyph)

    def log_glyph_complete(self, glyph: str, score: float, duration_ms: float) -> None:
        """Log successful glyph comparison."""
        self._logger.debug(
            "Glyph compared",
            glyph=glyph,
            score=round(score, 3),
            duration_ms=round(duration_ms, 2),
        )
        self._stats.ranked_count += 1
        self._stats.glyph_timings_ms.append(duration_ms)

    def log_glyph_error(
        self,
        glyph: str,
        error: Exception,
        traceback: str | None = None,
    ) -> None:
        """Log glyph rendering error."""
        self._logger.error(
            "Glyph comparison failed",
            glyph=glyph,
            error=str(error),
            error_type=type(error).__name__,
            traceback=traceback,
        )
        self._stats.failed_count += 1
        self._stats.errors.append((glyph, str(error)))

    def log_cancelled(self, generation: int, pending: int) -> None:
        """Log a run abandoned in favour of a newer one."""
        self._logger.info("Ranking run superseded", generation=generation, pending=pending)
        self._stats.was_cancelled = True
        self._stats.cancelled_count = pending

    @property
    def stats(self) -> RankingStats:
        """Get current ranking statistics."""
        return self._stats
