"""Dictionary merging used by the layered configuration loader."""
from __future__ import annotations

from typing import Any, Dict


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into ``base`` without mutating either.

    Nested mappings merge key by key; any other value (lists included)
    in ``override`` replaces the one in ``base``.

    Example:
        >>> deep_merge({"css": {"compress": False, "munge": False}}, {"css": {"munge": True}})
        {'css': {'compress': False, 'munge': True}}
    """
    result: Dict[str, Any] = dict(base)
    for key, value in (override or {}).items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        elif isinstance(value, list):
            result[key] = list(value)
        else:
            result[key] = value
    return result


__all__ = ["deep_merge"]
