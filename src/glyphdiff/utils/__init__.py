"""Utility functions for glyphdiff.

This module provides utility functions including:

- Logging setup and configuration
- Ranking statistics and progress logging
"""

from glyphdiff.utils.logging import (
    RankingLogger,
    RankingStats,
    configure_logging,
)

__all__ = [
    "RankingLogger",
    "RankingStats",
    "configure_logging",
]
