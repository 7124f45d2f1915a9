"""Domain-specific configuration for the preprocessing pipeline."""
from __future__ import annotations

from functools import cached_property
from pathlib import Path

from ..base import BaseDomainConfig


class PipelineConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "pipeline"

    @cached_property
    def cache_path(self) -> Path:
        """Directory compiled artifacts are stored in."""
        return self._resolve_path(str(self.section.get("cache_dir") or ".assetpipe/cache"))


__all__ = ["PipelineConfig"]
