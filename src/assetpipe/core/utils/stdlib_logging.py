from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from assetpipe.core.utils.io import ensure_directory

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_INSTALLED_HANDLERS: list[logging.Handler] = []


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_stdlib_logging(*, level: str = "INFO", log_path: Optional[Path] = None) -> None:
    """Configure the root logger for a CLI invocation.

    Installs a stderr handler at ``level`` and, when ``log_path`` is given, a
    file handler next to it. Handlers installed by a previous call are
    replaced, so repeated calls are idempotent.
    """
    root = logging.getLogger()
    root.setLevel(_level_from_name(level))

    for h in _INSTALLED_HANDLERS:
        root.removeHandler(h)
        h.close()
    _INSTALLED_HANDLERS.clear()

    fmt = logging.Formatter(LOG_FORMAT)

    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(_level_from_name(level))
    sh.setFormatter(fmt)
    root.addHandler(sh)
    _INSTALLED_HANDLERS.append(sh)

    if log_path is not None:
        resolved = Path(log_path).resolve()
        ensure_directory(resolved.parent)
        fh = logging.FileHandler(resolved, encoding="utf-8")
        fh.setLevel(_level_from_name(level))
        fh.setFormatter(fmt)
        root.addHandler(fh)
        _INSTALLED_HANDLERS.append(fh)


def reset_stdlib_logging_for_tests() -> None:
    """Test-only: remove handlers installed by ``configure_stdlib_logging``."""
    root = logging.getLogger()
    for h in _INSTALLED_HANDLERS:
        root.removeHandler(h)
        h.close()
    _INSTALLED_HANDLERS.clear()


__all__ = ["configure_stdlib_logging", "reset_stdlib_logging_for_tests"]
