"""I/O utilities for assetpipe.

- core: atomic writes, directory management, text I/O
- yaml: YAML reading for config layers
"""
from __future__ import annotations

from .core import (
    PathLike,
    atomic_write,
    ensure_directory,
    read_text,
    write_text,
)
from .yaml import (
    dump_yaml_string,
    iter_yaml_files,
    read_yaml,
)

__all__ = [
    # core
    "PathLike",
    "ensure_directory",
    "atomic_write",
    "read_text",
    "write_text",
    # yaml
    "read_yaml",
    "dump_yaml_string",
    "iter_yaml_files",
]
