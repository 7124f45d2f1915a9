"""assetpipe configuration system.

Usage:
    from assetpipe.core.config import ConfigManager
    from assetpipe.core.config.domains import CssConfig

    manager = ConfigManager(repo_root=Path("/path/to/project"))
    config = manager.load_config()

    css = CssConfig(repo_root=Path("/path/to/project"))
    css.compiler_path
"""
from __future__ import annotations

from .base import BaseDomainConfig
from .cache import clear_all_caches, get_cached_config, is_cached
from .domains import CssConfig, LoggingConfig, PipelineConfig, ThemeConfig
from .manager import ConfigManager

__all__ = [
    "ConfigManager",
    "BaseDomainConfig",
    "get_cached_config",
    "clear_all_caches",
    "is_cached",
    "CssConfig",
    "LoggingConfig",
    "PipelineConfig",
    "ThemeConfig",
]
