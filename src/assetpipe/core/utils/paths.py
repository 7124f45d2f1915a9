"""Project root resolution.

Resolution priority:
1. ``ASSETPIPE_PROJECT_ROOT`` environment variable
2. Nearest ancestor of the working directory containing ``.assetpipe/``
3. The working directory itself
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from assetpipe.core.exceptions import ConfigError

PROJECT_ROOT_ENV = "ASSETPIPE_PROJECT_ROOT"
PROJECT_CONFIG_DIR_NAME = ".assetpipe"


def resolve_project_root(start: Optional[Path] = None) -> Path:
    """Resolve the project root.

    Raises:
        ConfigError: If ``ASSETPIPE_PROJECT_ROOT`` points at a missing path
    """
    env_root = os.environ.get(PROJECT_ROOT_ENV)
    if env_root:
        env_path = Path(env_root).expanduser().resolve()
        if not env_path.is_dir():
            raise ConfigError(
                f"{PROJECT_ROOT_ENV} points at missing directory: {env_path}",
                context={"path": str(env_path)},
            )
        return env_path

    cwd = (start or Path.cwd()).resolve()
    for candidate in (cwd, *cwd.parents):
        if (candidate / PROJECT_CONFIG_DIR_NAME).is_dir():
            return candidate
    return cwd


def get_project_config_dir(repo_root: Path) -> Path:
    """Return ``<repo_root>/.assetpipe`` (not created)."""
    return Path(repo_root) / PROJECT_CONFIG_DIR_NAME


__all__ = [
    "PROJECT_ROOT_ENV",
    "PROJECT_CONFIG_DIR_NAME",
    "resolve_project_root",
    "get_project_config_dir",
]
