"""Shared CLI utility functions."""
from __future__ import annotations

import argparse
from pathlib import Path

from assetpipe.core.utils.paths import resolve_project_root


def get_repo_root(args: argparse.Namespace) -> Path:
    """Project root from ``--repo-root`` or auto-detection."""
    if getattr(args, "repo_root", None):
        return Path(args.repo_root).resolve()
    return resolve_project_root()


def resolve_source(args: argparse.Namespace) -> Path:
    """Absolute path of the ``source`` argument (relative to the cwd)."""
    return Path(args.source).expanduser().absolute()
