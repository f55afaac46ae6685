"""Command-line interface for glyphdiff.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Progress bar while glyphs are compared
- Ranked results table with warnings listed separately
- Overlay preview images for a chosen rank
- Font listing for discovering resolvable font names
"""

from glyphdiff.cli.app import cli, main

__all__ = ["cli", "main"]
