"""Domain-specific configuration accessors."""
from __future__ import annotations

from .css import CssConfig
from .logging import LoggingConfig
from .pipeline import PipelineConfig
from .theme import ThemeConfig

__all__ = [
    "CssConfig",
    "LoggingConfig",
    "PipelineConfig",
    "ThemeConfig",
]
