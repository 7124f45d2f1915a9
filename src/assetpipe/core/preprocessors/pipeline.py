"""Generic preprocessing pipeline.

Routes a source file to the preprocessor registered for its extension,
serves a stored artifact when the fingerprint still matches, and otherwise
compiles. A failed compile is served as the preprocessor's fallback
artifact; a missing compiler is not recoverable here and propagates.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from assetpipe.core.exceptions import CompileError, ConfigError, UnsupportedAssetError
from assetpipe.core.utils.io import read_text, write_text

from .base import Artifact, Preprocessor

logger = logging.getLogger(__name__)

# CSS only honours @charset as the very first bytes of a stylesheet.
_CHARSET_RE = re.compile(r'@charset\s+("[^"]*"|\x27[^\x27]*\x27)\s*;[ \t]*(\r?\n)?')


class PreprocessorRegistry:
    """Extension -> preprocessor lookup."""

    def __init__(self, preprocessors: Iterable[Preprocessor] = ()) -> None:
        self._by_extension: Dict[str, Preprocessor] = {}
        for pre in preprocessors:
            self.register(pre)

    def register(self, preprocessor: Preprocessor) -> None:
        for ext in sorted(preprocessor.supported_extensions()):
            key = ext.lstrip(".").lower()
            current = self._by_extension.get(key)
            if current is not None and current is not preprocessor:
                raise ConfigError(
                    f"Extension '{key}' is already handled by {type(current).__name__}",
                    context={"extension": key},
                )
            self._by_extension[key] = preprocessor

    def extensions(self) -> List[str]:
        return sorted(self._by_extension)

    def for_path(self, path: Union[str, Path]) -> Preprocessor:
        ext = Path(path).suffix.lstrip(".").lower()
        pre = self._by_extension.get(ext)
        if pre is None:
            raise UnsupportedAssetError(
                f"No preprocessor for '.{ext}' files: {path}",
                context={"path": str(path), "extension": ext},
            )
        return pre


class Pipeline:
    """Fingerprint-keyed compile cache in front of a preprocessor registry."""

    def __init__(self, registry: PreprocessorRegistry, cache_dir: Union[str, Path]) -> None:
        self.registry = registry
        self.cache_dir = Path(cache_dir)

    def _cache_name_pattern(self, source: Path, preprocessor: Preprocessor) -> "re.Pattern[str]":
        ext = re.escape(preprocessor.output_extension())
        return re.compile(rf"{re.escape(source.stem)}-[0-9a-f]{{64}}(-[0-9a-f]+)?\.{ext}")

    def cache_path_for(self, source: Path, preprocessor: Preprocessor, fingerprint: str) -> Path:
        """``<cache_dir>/<stem>-<fingerprint>[-<variant>].<ext>``."""
        variant = preprocessor.cache_variant()
        name = f"{source.stem}-{fingerprint}"
        if variant:
            name += f"-{variant}"
        return self.cache_dir / f"{name}.{preprocessor.output_extension()}"

    def _stamped(self, preprocessor: Preprocessor, source: Path, fingerprint: str, body: str) -> str:
        """Prefix ``body`` with a provenance comment, after any leading ``@charset``."""
        stamp = preprocessor.comment_line(f"assetpipe: {source.name} ({fingerprint})")
        match = _CHARSET_RE.match(body)
        if match is None:
            return stamp + body
        head = match.group(0)
        if not head.endswith("\n"):
            head += "\n"
        return head + stamp + body[match.end():]

    def _prune(self, source: Path, preprocessor: Preprocessor, keep: Path) -> None:
        """Remove superseded artifacts stored for the same source stem."""
        if not self.cache_dir.is_dir():
            return
        pattern = self._cache_name_pattern(source, preprocessor)
        for stale in self.cache_dir.iterdir():
            if stale == keep or not pattern.fullmatch(stale.name):
                continue
            try:
                stale.unlink()
                logger.debug("Pruned stale artifact %s", stale)
            except FileNotFoundError:
                continue

    def process(self, path: Union[str, Path], *, use_cache: bool = True) -> Artifact:
        """Return a servable artifact for ``path``.

        Raises:
            FileNotFoundError: If ``path`` does not exist
            UnsupportedAssetError: If no preprocessor handles the extension
            CompilerNotFoundError: If the compiler is misconfigured
        """
        source = Path(path).absolute()
        if not source.is_file():
            raise FileNotFoundError(f"Source file not found: {source}")

        preprocessor = self.registry.for_path(source)
        fp = preprocessor.fingerprint(source)
        cached = self.cache_path_for(source, preprocessor, fp)

        if use_cache and cached.is_file():
            logger.debug("Cache hit for %s -> %s", source, cached)
            return Artifact(
                body=read_text(cached),
                content_type=preprocessor.content_type(),
                source=source,
                fingerprint=fp,
                from_cache=True,
            )

        logger.debug("Cache miss for %s (%s)", source, fp)
        try:
            artifact = preprocessor.compile(source)
        except CompileError as exc:
            logger.warning("Serving fallback stylesheet for %s: %s", source, exc)
            return preprocessor.format_error(exc.describe()).with_meta(
                source=source,
                fingerprint=fp,
                failed=True,
            )

        body = self._stamped(preprocessor, source, fp, artifact.body)
        write_text(cached, body)
        self._prune(source, preprocessor, keep=cached)
        logger.info("Compiled %s -> %s", source, cached)
        return artifact.with_meta(body=body, source=source, fingerprint=fp)


def build_default_pipeline(repo_root: Optional[Path] = None) -> Pipeline:
    """Pipeline wired from validated configuration with the Sass preprocessor registered.

    Raises:
        ConfigError: If the merged configuration fails schema validation
    """
    from assetpipe.core.config import ConfigManager
    from assetpipe.core.config.domains import PipelineConfig

    from .sass import SassPreprocessor

    ConfigManager(repo_root).load_config(validate=True)
    registry = PreprocessorRegistry([SassPreprocessor.from_config(repo_root)])
    return Pipeline(registry, PipelineConfig(repo_root=repo_root).cache_path)


__all__ = ["PreprocessorRegistry", "Pipeline", "build_default_pipeline"]
