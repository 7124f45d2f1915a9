"""Cache keys for stylesheet sources.

The real import graph of a stylesheet is not parsed. Instead every source
with a matching extension under the parent of the requested file's
directory counts as a dependency, which is a superset of what ``@import``
can reach from sibling directories.
"""
from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Iterable, List, Union

logger = logging.getLogger(__name__)

STYLESHEET_EXTENSIONS = ("sass", "scss")


def _normalize_extensions(extensions: Iterable[str]) -> frozenset[str]:
    return frozenset(str(ext).lstrip(".").lower() for ext in extensions)


def dependency_root(file_path: Union[str, Path]) -> Path:
    """``parent(directory(file_path))`` in absolute form."""
    return Path(file_path).absolute().parent.parent


def dependency_set(
    file_path: Union[str, Path],
    extensions: Iterable[str] = STYLESHEET_EXTENSIONS,
) -> List[Path]:
    """Every matching source under the dependency root, sorted lexicographically."""
    exts = _normalize_extensions(extensions)
    base = dependency_root(file_path)
    found = [
        p for p in base.rglob("*")
        if p.suffix.lstrip(".").lower() in exts and p.is_file()
    ]
    return sorted(found, key=str)


def mtime_token(path: Path, bucket_seconds: int = 0) -> str:
    """Modification time as a string.

    With ``bucket_seconds`` 0 the full nanosecond mtime is used; otherwise
    the mtime is quantized into buckets of that many seconds.
    """
    st = path.stat()
    if bucket_seconds and bucket_seconds > 0:
        return str(int(st.st_mtime // bucket_seconds))
    return str(st.st_mtime_ns)


def fingerprint(
    file_path: Union[str, Path],
    *,
    extensions: Iterable[str] = STYLESHEET_EXTENSIONS,
    bucket_seconds: int = 0,
) -> str:
    """Hex digest of the dependency set state plus the requested path.

    Deterministic for a fixed file-system state. Changes when any file in the
    dependency set is added, removed or touched. The requested path is
    appended last so two files sharing a dependency set still differ.
    """
    requested = Path(file_path).absolute()
    seed: List[str] = []
    for dep in dependency_set(requested, extensions):
        try:
            seed.append(f"{dep}{mtime_token(dep, bucket_seconds)}")
        except FileNotFoundError:
            # Removed between enumeration and stat (editor save-by-rename).
            logger.debug("Dependency vanished while fingerprinting: %s", dep)
    seed.append(str(requested))
    return hashlib.sha256("".join(seed).encode("utf-8")).hexdigest()


__all__ = [
    "STYLESHEET_EXTENSIONS",
    "dependency_root",
    "dependency_set",
    "mtime_token",
    "fingerprint",
]
