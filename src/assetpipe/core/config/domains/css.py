"""Domain-specific configuration for stylesheet compilation."""
from __future__ import annotations

from functools import cached_property
from typing import Any, Dict, List, Optional

from assetpipe.core.exceptions import ConfigError

from ..base import BaseDomainConfig

DEFAULT_COMPILER_PATH = "/usr/bin/compass"
DEFAULT_OUTPUT_STYLE = "compressed"


class CssConfig(BaseDomainConfig):
    """Typed access to the ``css`` section.

    Legacy ``compass.*`` keys have already been folded into this section by
    the config loader.
    """

    def _config_section(self) -> str:
        return "css"

    @cached_property
    def compiler_path(self) -> str:
        value = self.section.get("compiler_path") or DEFAULT_COMPILER_PATH
        return str(value)

    @cached_property
    def output_style(self) -> Optional[str]:
        value = self.section.get("output_style", DEFAULT_OUTPUT_STYLE)
        return str(value) if value else None

    @cached_property
    def require_libs(self) -> List[str]:
        raw = self.section.get("require_libs") or []
        if isinstance(raw, str):
            raw = [raw]
        if not isinstance(raw, list):
            raise ConfigError(
                "css.require_libs must be a list of library names",
                context={"value": raw},
            )
        return [str(lib) for lib in raw if lib]

    @cached_property
    def compress(self) -> bool:
        return bool(self.section.get("compress", False))

    @cached_property
    def munge(self) -> bool:
        return bool(self.section.get("munge", False))

    @cached_property
    def timeout_seconds(self) -> Optional[float]:
        value = self.section.get("timeout_seconds", 120)
        if value in (None, 0):
            return None
        return float(value)

    @cached_property
    def fingerprint_bucket_seconds(self) -> int:
        return int(self.section.get("fingerprint_bucket_seconds", 0) or 0)

    def get_all_settings(self) -> Dict[str, Any]:
        return {
            "compiler_path": self.compiler_path,
            "output_style": self.output_style,
            "require_libs": self.require_libs,
            "compress": self.compress,
            "munge": self.munge,
            "timeout_seconds": self.timeout_seconds,
            "fingerprint_bucket_seconds": self.fingerprint_bucket_seconds,
        }


__all__ = ["CssConfig", "DEFAULT_COMPILER_PATH", "DEFAULT_OUTPUT_STYLE"]
