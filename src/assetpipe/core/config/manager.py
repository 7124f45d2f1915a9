"""
assetpipe configuration management (YAML layers + environment overrides).
"""
from __future__ import annotations

import copy
import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Tuple

import yaml

from assetpipe.core.exceptions import ConfigError
from assetpipe.core.utils.io import iter_yaml_files, read_yaml
from assetpipe.core.utils.merge import deep_merge
from assetpipe.core.utils.paths import (
    PROJECT_ROOT_ENV,
    get_project_config_dir,
    resolve_project_root,
)
from assetpipe.data import get_data_path

from .cache import ENV_PREFIX, get_cached_config

logger = logging.getLogger(__name__)

CONFIG_SCHEMA = "config/config.schema"

# Legacy setting -> canonical setting. Consulted once per layer at load time.
DEPRECATED_ALIASES: Dict[Tuple[str, ...], Tuple[str, ...]] = {
    ("compass", "compass_path"): ("css", "compiler_path"),
    ("compass", "output_style"): ("css", "output_style"),
    ("css", "compass_path"): ("css", "compiler_path"),
    ("css", "yui_compress"): ("css", "compress"),
    ("css", "yui_munge"): ("css", "munge"),
}

# Env vars sharing the prefix that are not config overrides.
_RESERVED_ENV_KEYS = frozenset({PROJECT_ROOT_ENV})


def _pop_nested(root: Dict[str, Any], path: Tuple[str, ...]) -> Tuple[bool, Any]:
    cur: Any = root
    for part in path[:-1]:
        if not isinstance(cur, dict) or not isinstance(cur.get(part), dict):
            return False, None
        cur = cur[part]
    if not isinstance(cur, dict) or path[-1] not in cur:
        return False, None
    return True, cur.pop(path[-1])


def _has_nested(root: Dict[str, Any], path: Tuple[str, ...]) -> bool:
    cur: Any = root
    for part in path:
        if not isinstance(cur, dict) or part not in cur:
            return False
        cur = cur[part]
    return True


def _set_nested(root: Dict[str, Any], path: Tuple[str, ...], value: Any) -> None:
    cur = root
    for part in path[:-1]:
        nxt = cur.get(part)
        if not isinstance(nxt, dict):
            nxt = {}
            cur[part] = nxt
        cur = nxt
    cur[path[-1]] = value


def apply_deprecated_aliases(layer: Dict[str, Any], *, source: str) -> Dict[str, Any]:
    """Rewrite legacy keys in one config layer onto their canonical names.

    If a layer sets both the legacy and the canonical key, the canonical key
    wins. Legacy sections left empty afterwards are removed.
    """
    out = copy.deepcopy(layer) if layer else {}
    for old, new in DEPRECATED_ALIASES.items():
        found, value = _pop_nested(out, old)
        if not found:
            continue
        old_name, new_name = ".".join(old), ".".join(new)
        logger.warning(
            "Setting '%s' (in %s) is deprecated; use '%s' instead.",
            old_name,
            source,
            new_name,
        )
        if not _has_nested(out, new):
            _set_nested(out, new, value)
        if out.get(old[0]) == {}:
            del out[old[0]]
    return out


class ConfigManager:
    """Load, merge, and validate assetpipe configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: ASSETPIPE_<section>__<key>
    2. Project config: <repo>/.assetpipe/config/*.yaml (alphabetical order)
    3. Bundled defaults: assetpipe.data/config/*.yaml (alphabetical order)
    """

    def __init__(self, repo_root: Optional[Path] = None) -> None:
        self.repo_root = Path(repo_root) if repo_root else resolve_project_root()

        self.core_config_dir = get_data_path("config")
        self.project_config_dir = get_project_config_dir(self.repo_root) / "config"

    # ========== Value coercion for env overrides ==========

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _iter_env_overrides(self) -> Iterator[Tuple[Tuple[str, ...], Any, str]]:
        for key in sorted(os.environ.keys()):
            if not key.startswith(ENV_PREFIX) or key in _RESERVED_ENV_KEYS:
                continue
            raw = key[len(ENV_PREFIX):]
            if "__" not in raw:
                continue
            segs = raw.split("__")
            if any(seg == "" for seg in segs):
                raise ConfigError(
                    f"Malformed {ENV_PREFIX}* key: empty segment in '{key}'.",
                    context={"env": key},
                )
            yield tuple(seg.lower() for seg in segs), self._coerce_type(os.environ[key]), key

    # ========== Layer loading ==========

    def _load_directory(self, directory: Path, cfg: Dict[str, Any]) -> Dict[str, Any]:
        """Merge every YAML file in ``directory`` into ``cfg`` (missing dirs are ignored)."""
        for path in iter_yaml_files(directory):
            try:
                layer = read_yaml(path, default={}, raise_on_error=True) or {}
            except (OSError, yaml.YAMLError) as exc:
                raise ConfigError(f"Invalid YAML in {path}: {exc}", context={"path": str(path)}) from exc
            if not isinstance(layer, dict):
                raise ConfigError(
                    f"Config file must contain a mapping: {path}",
                    context={"path": str(path)},
                )
            cfg = deep_merge(cfg, apply_deprecated_aliases(layer, source=str(path)))
        return cfg

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> Dict[str, Any]:
        env_layer: Dict[str, Any] = {}
        for path, value, _raw in self._iter_env_overrides():
            _set_nested(env_layer, path, value)
        if not env_layer:
            return cfg
        return deep_merge(cfg, apply_deprecated_aliases(env_layer, source="environment"))

    def _load_config_uncached(self) -> Dict[str, Any]:
        """Load and merge configuration from all sources (uncached, unvalidated)."""
        cfg: Dict[str, Any] = {}
        cfg = self._load_directory(self.core_config_dir, cfg)
        cfg = self._load_directory(self.project_config_dir, cfg)
        cfg = self.apply_env_overrides(cfg)
        return cfg

    def validate_schema(self, config: Dict[str, Any]) -> None:
        from assetpipe.core.schemas import validate_payload

        validate_payload(config, CONFIG_SCHEMA)

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Load configuration through the central cache.

        The returned dict is shared; treat it as immutable.
        """
        cfg = get_cached_config(repo_root=self.repo_root)
        if validate:
            self.validate_schema(cfg)
        return cfg

    # ========== Accessor Methods ==========

    def get_all(self) -> Dict[str, Any]:
        return self.load_config(validate=False)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value by dot-notation key.

        Example:
            >>> manager.get('css.compiler_path')
            '/usr/bin/compass'
            >>> manager.get('nonexistent.key', 'fallback')
            'fallback'
        """
        current: Any = self.load_config(validate=False)
        for part in key.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current


__all__ = ["ConfigManager", "DEPRECATED_ALIASES", "apply_deprecated_aliases"]
