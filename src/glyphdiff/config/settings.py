"""Configuration settings for glyphdiff."""

from enum import Enum
from pathlib import Path

from PIL import ImageColor
from pydantic import BaseModel, Field, field_validator

DEFAULT_CHARSET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz1234567890"


def _parse_color(value: str | tuple[int, ...]) -> tuple[int, int, int, int]:
    """Parse a CSS-style colour into an RGBA tuple.

    Accepts anything ``PIL.ImageColor`` understands ("#fff", "white",
    "rgb(255, 0, 0)") plus ``rgba(r, g, b, a)`` with a fractional alpha as
    written in CSS.
    """
    if isinstance(value, (tuple, list)):
        channels = tuple(int(c) for c in value)
        if len(channels) == 3:
            channels = (*channels, 255)
        if len(channels) != 4 or not all(0 <= c <= 255 for c in channels):
            raise ValueError(f"Invalid colour tuple: {value!r}")
        return channels  # type: ignore[return-value]

    text = value.strip().lower()
    if text.startswith("rgba(") and text.endswith(")"):
        parts = [p.strip() for p in text[5:-1].split(",")]
        if len(parts) != 4:
            raise ValueError(f"Invalid rgba colour: {value!r}")
        red, green, blue = (int(p) for p in parts[:3])
        alpha = float(parts[3])
        if alpha <= 1.0:
            alpha *= 255
        return (red, green, blue, round(alpha))

    rgba = ImageColor.getcolor(value, "RGBA")
    return rgba  # type: ignore[return-value]


class LayoutEngine(str, Enum):
    """Text layout engine used by the rasterizer."""

    AUTO = "auto"
    BASIC = "basic"
    RAQM = "raqm"


class RenderConfig(BaseModel):
    """Configuration for glyph rasterization."""

    font_size: int = Field(
        default=500,
        ge=1,
        le=4096,
        description="Font pixel size (canvas side is twice this)",
    )
    background: tuple[int, int, int, int] = Field(
        default=(255, 255, 255, 255),
        description="Surface background colour",
    )
    fill: tuple[int, int, int, int] = Field(
        default=(0, 0, 0, 255),
        description="Glyph fill colour",
    )
    layout_engine: LayoutEngine = Field(
        default=LayoutEngine.AUTO,
        description="Pillow layout engine (auto picks raqm when available)",
    )

    @field_validator("background", "fill", mode="before")
    @classmethod
    def _validate_color(cls, value: str | tuple[int, ...]) -> tuple[int, int, int, int]:
        return _parse_color(value)

    @property
    def canvas_size(self) -> int:
        """Side length of the square render surface."""
        return self.font_size * 2


class FontConfig(BaseModel):
    """Configuration for font resolution."""

    search_paths: list[Path] = Field(
        default_factory=list,
        description="Extra directories scanned for font files",
    )
    include_system_fonts: bool = Field(
        default=True,
        description="Also scan the platform's standard font directories",
    )
    allow_fallback: bool = Field(
        default=False,
        description="Render with the default font (and warn) when a font cannot be resolved",
    )


class RankingConfig(BaseModel):
    """Configuration for ranking runs."""

    charset: str = Field(
        default=DEFAULT_CHARSET,
        min_length=1,
        description="Characters compared when none are given",
    )
    max_workers: int | None = Field(
        default=None,
        ge=1,
        description="Max worker threads (None = auto)",
    )
    max_failure_ratio: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Fail the whole run when more than this share of glyphs fail",
    )


class PreviewConfig(BaseModel):
    """Configuration for the two-font overlay preview."""

    color_a: tuple[int, int, int, int] = Field(
        default=(255, 0, 0, 128),
        description="Overlay colour for font A",
    )
    color_b: tuple[int, int, int, int] = Field(
        default=(0, 0, 255, 64),
        description="Overlay colour for font B",
    )

    @field_validator("color_a", "color_b", mode="before")
    @classmethod
    def _validate_color(cls, value: str | tuple[int, ...]) -> tuple[int, int, int, int]:
        return _parse_color(value)


class SessionConfig(BaseModel):
    """Configuration for interactive comparison sessions."""

    debounce_ms: int = Field(
        default=1000,
        ge=0,
        description="Delay after the last change before re-ranking",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class GlyphDiffSettings(BaseModel):
    """Main application settings."""

    render: RenderConfig = Field(default_factory=RenderConfig)
    fonts: FontConfig = Field(default_factory=FontConfig)
    ranking: RankingConfig = Field(default_factory=RankingConfig)
    preview: PreviewConfig = Field(default_factory=PreviewConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> GlyphDiffSettings:
    """Get default application settings."""
    return GlyphDiffSettings()
