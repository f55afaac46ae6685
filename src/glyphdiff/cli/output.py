"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with progress bars, tables, and formatted messages.
"""


from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text

from glyphdiff.domain import FontFace, RankedResults, RenderWarning

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_WARN = "!"  # Warning
SYM_DOT = "·"  # Separator/secondary info


def create_progress() -> Progress:
    """Create a rich progress bar for glyph comparison.

    Returns:
        Configured Progress instance with bar and time elapsed.
    """
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]glyphdiff[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_font_info(label: str, font: str, face: FontFace | None) -> None:
    """Print how a font identifier was resolved.

    Args:
        label: Font label ("A" or "B")
        font: Font identifier as given
        face: Resolved face, or None if the fallback font is used
    """
    line = Text(f"  {label}  ")
    line.append(font, style="bold")
    if face is None:
        line.append("  (not found, default font)", style="yellow")
    else:
        line.append(f"  {face.display_name} {SYM_DOT} ")
        line.append(str(face.path))
    console.print(line)


def print_results_table(ranked: RankedResults, top: int | None = None) -> None:
    """Print the ranked glyph table.

    Args:
        ranked: Ranking results
        top: Only show this many rows (all if None)
    """
    table = Table(show_edge=False, pad_edge=False, box=None)
    table.add_column("Rank", justify="right", style="dim")
    table.add_column("Character", justify="center", style="bold")
    table.add_column("Difference", justify="right")

    for rank, glyph, value in ranked.rows():
        if top is not None and rank > top:
            break
        table.add_row(str(rank), Text(glyph), f"{value:,.2f}")

    console.print(table)
    if top is not None and len(ranked) > top:
        console.print(f"  {SYM_DOT}{SYM_DOT}{SYM_DOT} (+{len(ranked) - top} more)")


def print_warnings(warnings: tuple[RenderWarning, ...] | list[RenderWarning]) -> None:
    """Print non-fatal warnings separately from the results.

    Args:
        warnings: Warnings from the ranking run
    """
    if not warnings:
        return
    console.print(f"\n[bold yellow]{SYM_WARN} {len(warnings)} warnings[/bold yellow]")
    for warning in warnings:
        line = Text("  ")
        if warning.glyph is not None:
            line.append(repr(warning.glyph), style="bold")
            line.append(" ")
        line.append(warning.message)
        console.print(line)


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_processing_info(glyphs: int, font_size: int, workers: int, is_auto: bool = False) -> None:
    """Print ranking configuration.

    Args:
        glyphs: Number of distinct glyphs compared
        font_size: Pixel size glyphs are rendered at
        workers: Number of parallel workers
        is_auto: Whether the count was auto-detected
    """
    auto_suffix = " (auto)" if is_auto else ""
    console.print(
        f"  {glyphs} glyphs {SYM_DOT} {font_size}px {SYM_DOT} "
        f"{workers} workers{auto_suffix} {SYM_DOT} Ctrl+C to cancel"
    )


def print_success(
    total_time_s: float,
    ranked: int,
    failed: int,
    avg_time_ms: float | None = None,
    min_time_ms: float | None = None,
    max_time_ms: float | None = None,
) -> None:
    """Print success message with summary.

    Args:
        total_time_s: Total ranking time in seconds
        ranked: Number of glyphs ranked
        failed: Number of glyphs that failed to render
        avg_time_ms: Average comparison time per glyph in milliseconds
        min_time_ms: Minimum comparison time per glyph in milliseconds
        max_time_ms: Maximum comparison time per glyph in milliseconds
    """
    time_str = _format_time(total_time_s)

    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {time_str}")

    error_style = "red" if failed > 0 else "green"
    console.print(
        f"  {ranked} glyphs ranked {SYM_DOT} [{error_style}]{failed} failed[/{error_style}]"
    )

    if avg_time_ms is not None:
        timing_str = f"{avg_time_ms:.1f}ms avg"
        if min_time_ms is not None and max_time_ms is not None:
            timing_str += f" ({min_time_ms:.1f}–{max_time_ms:.1f}ms range)"
        console.print(f"  {timing_str}")


def print_preview_saved(path: str, rank: int, glyph: str) -> None:
    """Print where a preview image was written.

    Args:
        path: Output image path
        rank: 1-based rank of the previewed glyph
        glyph: Previewed character
    """
    line = Text(f"\n{SYM_OK} Preview of #{rank} ")
    line.append(repr(glyph), style="bold")
    line.append(" saved to ")
    line.append(path, style="bold")
    console.print(line)


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")


def print_cancellation_notice() -> None:
    """Print cancellation acknowledgment."""
    console.print(f"\n{SYM_DOT} [bold]Cancelled[/bold] {SYM_DOT} no results published")
