"""Configuration management for glyphdiff.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- RenderConfig: Rasterization settings (font size, colours, layout engine)
- FontConfig: Font resolution settings
- RankingConfig: Ranking run settings
- PreviewConfig: Overlay preview colours
- SessionConfig: Interactive session settings
- LoggingConfig: Logging settings
- GlyphDiffSettings: Main application settings
"""

from glyphdiff.config.settings import (
    DEFAULT_CHARSET,
    FontConfig,
    GlyphDiffSettings,
    LayoutEngine,
    LoggingConfig,
    PreviewConfig,
    RankingConfig,
    RenderConfig,
    SessionConfig,
    get_default_settings,
)

__all__ = [
    "DEFAULT_CHARSET",
    "FontConfig",
    "GlyphDiffSettings",
    "LayoutEngine",
    "LoggingConfig",
    "PreviewConfig",
    "RankingConfig",
    "RenderConfig",
    "SessionConfig",
    "get_default_settings",
]
