"""Domain-specific configuration for theme paths."""
from __future__ import annotations

from functools import cached_property
from pathlib import Path

from ..base import BaseDomainConfig


class ThemeConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "theme"

    @cached_property
    def stylesheets_path(self) -> Path:
        """Absolute path of the theme's stylesheet root (compiler import path)."""
        return self._resolve_path(str(self.section.get("stylesheets_dir") or "theme/assets/stylesheets"))


__all__ = ["ThemeConfig"]
