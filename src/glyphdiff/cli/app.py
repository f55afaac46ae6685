"""CLI application entry point for glyphdiff.

This module provides the main CLI interface using Typer.
"""

import os
from pathlib import Path
from typing import Annotated

import typer

from glyphdiff import __version__
from glyphdiff.cli.output import (
    console,
    create_progress,
    print_cancellation_notice,
    print_error,
    print_font_info,
    print_header,
    print_preview_saved,
    print_processing_info,
    print_results_table,
    print_step,
    print_success,
    print_warnings,
)
from glyphdiff.config import (
    DEFAULT_CHARSET,
    FontConfig,
    GlyphDiffSettings,
    LoggingConfig,
    RankingConfig,
    RenderConfig,
)
from glyphdiff.core import GlyphRasterizer, PreviewRenderer, RankingEngine, normalize_glyphs
from glyphdiff.domain import RankedResults
from glyphdiff.exceptions import (
    FontResolutionError,
    GlyphDiffError,
    RankingCancelledError,
    RankingFailedError,
)
from glyphdiff.io import FontResolver
from glyphdiff.utils import configure_logging

# Create the Typer app
app = typer.Typer(
    name="glyphdiff",
    help="Rank characters by how differently two fonts render them.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]glyphdiff[/bold blue] v{__version__}")
        raise typer.Exit()


@app.command()
def compare(
    font_a: Annotated[
        str | None,
        typer.Argument(
            help="First font (file path, family, full or PostScript name)",
            show_default=False,
        ),
    ] = None,
    font_b: Annotated[
        str | None,
        typer.Argument(
            help="Second font (file path, family, full or PostScript name)",
            show_default=False,
        ),
    ] = None,
    chars: Annotated[
        str,
        typer.Option(
            "--chars",
            "-c",
            help="Characters to compare",
        ),
    ] = DEFAULT_CHARSET,
    size: Annotated[
        int,
        typer.Option(
            "--size",
            "-s",
            help="Font size in pixels (canvas is twice this)",
            min=1,
            max=4096,
        ),
    ] = 500,
    top: Annotated[
        int | None,
        typer.Option(
            "--top",
            "-t",
            help="Only show the N most different characters",
            min=1,
        ),
    ] = None,
    workers: Annotated[
        int | None,
        typer.Option(
            "--workers",
            "-j",
            help="Number of parallel workers (default: auto)",
            min=1,
        ),
    ] = None,
    font_dirs: Annotated[
        list[Path] | None,
        typer.Option(
            "--font-dir",
            "-d",
            help="Extra directory to search for fonts (repeatable)",
        ),
    ] = None,
    no_system_fonts: Annotated[
        bool,
        typer.Option(
            "--no-system-fonts",
            help="Only search --font-dir directories",
        ),
    ] = False,
    allow_fallback: Annotated[
        bool,
        typer.Option(
            "--allow-fallback",
            help="Use the default font (with a warning) when a font is not found",
        ),
    ] = False,
    swap: Annotated[
        bool,
        typer.Option(
            "--swap",
            help="Swap font A and font B labels in the output",
        ),
    ] = False,
    preview: Annotated[
        int | None,
        typer.Option(
            "--preview",
            "-p",
            help="Write an overlay preview of the character at this rank (1-based)",
            min=1,
        ),
    ] = None,
    preview_out: Annotated[
        Path,
        typer.Option(
            "--preview-out",
            help="Output path for --preview",
        ),
    ] = Path("glyphdiff-preview.png"),
    list_fonts: Annotated[
        bool,
        typer.Option(
            "--list-fonts",
            help="List all resolvable fonts and exit",
        ),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose console output",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Render characters in two fonts and rank them from most to least different.

    Each character is rendered black on white in both fonts, the renderings
    are compared pixel by pixel, and the characters are listed by their
    difference score.

    Example:
        glyphdiff "DejaVu Sans" "DejaVu Serif" --top 10
    """
    # Validate mutually exclusive options
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    if log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR"):
        print_error(
            f"Invalid log level: {log_level}",
            details="Valid values: DEBUG, INFO, WARNING, ERROR",
        )
        raise typer.Exit(code=1)

    if list_fonts:
        _handle_list_fonts(font_dirs or [], not no_system_fonts)
        raise typer.Exit(code=0)

    if font_a is None or font_b is None:
        print_error(
            "Two fonts are required",
            details="Usage: glyphdiff FONT_A FONT_B [OPTIONS]",
        )
        raise typer.Exit(code=1)

    if not chars:
        print_error("--chars must not be empty")
        raise typer.Exit(code=1)

    # Print header
    if not quiet:
        print_header(__version__)

    # Create settings from CLI arguments
    settings = GlyphDiffSettings(
        render=RenderConfig(font_size=size),
        fonts=FontConfig(
            search_paths=font_dirs or [],
            include_system_fonts=not no_system_fonts,
            allow_fallback=allow_fallback,
        ),
        ranking=RankingConfig(charset=chars, max_workers=workers),
        logging=LoggingConfig(
            log_file=log_file,
            log_level="DEBUG" if verbose else log_level,
        ),
    )

    configure_logging(
        log_file=settings.logging.log_file,
        console_level=settings.logging.log_level,
        file_level=settings.logging.file_log_level,
        quiet=quiet,
    )

    try:
        engine = RankingEngine(settings)

        if not quiet:
            print_step("Resolving fonts")
        faces, _ = engine.resolve_fonts([font_a, font_b])
        if not quiet:
            print_font_info("A", font_a, faces[font_a])
            print_font_info("B", font_b, faces[font_b])

        glyph_count = len(normalize_glyphs(chars))
        if not quiet:
            actual_workers = workers if workers else min(32, (os.cpu_count() or 1) + 4)
            print_step("Ranking")
            print_processing_info(glyph_count, size, actual_workers, is_auto=(workers is None))

        try:
            if not quiet:
                with create_progress() as progress:
                    task_id = progress.add_task("Comparing", total=glyph_count)

                    def update_progress(completed: int, *_: object) -> None:
                        progress.update(task_id, completed=completed)

                    ranked = engine.rank(
                        chars,
                        font_a,
                        font_b,
                        font_size=size,
                        max_workers=workers,
                        progress_callback=update_progress,
                    )
            else:
                ranked = engine.rank(chars, font_a, font_b, font_size=size, max_workers=workers)
        except (KeyboardInterrupt, RankingCancelledError):
            if not quiet:
                print_cancellation_notice()
            raise typer.Exit(code=130) from None  # Standard Unix SIGINT exit code

        if swap:
            ranked = ranked.swapped()

        if not quiet:
            print_step(f"Results ({ranked.font_a} vs {ranked.font_b})")
        print_results_table(ranked, top=top)
        print_warnings(ranked.warnings)

        if preview is not None:
            _write_preview(ranked, preview, preview_out, settings, engine.resolver)

        stats = engine.last_stats
        if not quiet and stats is not None:
            print_success(
                total_time_s=stats.duration_seconds,
                ranked=stats.ranked_count,
                failed=stats.failed_count,
                avg_time_ms=stats.avg_glyph_time_ms,
                min_time_ms=stats.min_glyph_time_ms,
                max_time_ms=stats.max_glyph_time_ms,
            )

    except FontResolutionError as e:
        print_error(
            f"Font not found: {e.font}",
            details="Use --list-fonts to see available fonts, or --allow-fallback.",
        )
        raise typer.Exit(code=1)
    except RankingFailedError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except GlyphDiffError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        # Re-raise typer.Exit to allow clean exits
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)


def _handle_list_fonts(font_dirs: list[Path], include_system_fonts: bool) -> None:
    """Handle --list-fonts mode.

    Args:
        font_dirs: Extra directories to search
        include_system_fonts: Also search the system font directories
    """
    resolver = FontResolver(font_dirs, include_system_fonts=include_system_fonts)
    faces = resolver.available_fonts()

    console.print(f"\n[bold]{len(faces)} fonts[/bold]\n")
    for face in faces:
        console.print(f"  {face.display_name}  [dim]{face.path}[/dim]")


def _write_preview(
    ranked: RankedResults,
    rank: int,
    output: Path,
    settings: GlyphDiffSettings,
    resolver: FontResolver,
) -> None:
    """Render the overlay preview for a 1-based rank and save it.

    Args:
        ranked: Ranking results
        rank: 1-based rank to preview
        output: Image path to write
        settings: Settings with render and preview configuration
        resolver: Resolver shared with the ranking engine
    """
    if rank > len(ranked):
        print_error(f"--preview {rank} is out of range (1-{len(ranked)})")
        raise typer.Exit(code=1)

    renderer = PreviewRenderer(
        GlyphRasterizer(
            config=settings.render,
            resolver=resolver,
            allow_fallback=settings.fonts.allow_fallback,
        ),
        config=settings.preview,
    )
    result = ranked[rank - 1]
    renderer.render_result(result).save(output)
    print_preview_saved(str(output), rank, result.glyph)


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
