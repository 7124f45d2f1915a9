"""Preprocessor contract shared by every asset compiler.

A preprocessor turns one source file into one servable artifact. The
pipeline only talks to preprocessors through this interface: it routes by
``supported_extensions``, checks its cache with ``fingerprint``, calls
``compile`` on a miss and ``format_error`` when compilation fails.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from pathlib import Path
from typing import FrozenSet, Optional, Union

from assetpipe.core.exceptions import CompileError


@dataclass(frozen=True)
class Artifact:
    """Compiled output (or a fallback standing in for it)."""

    body: str
    content_type: str
    source: Optional[Path] = None
    fingerprint: Optional[str] = None
    from_cache: bool = False
    failed: bool = False

    def with_meta(self, **changes) -> "Artifact":
        return replace(self, **changes)


class Preprocessor(ABC):
    """Interface implemented by concrete compiler modules."""

    @abstractmethod
    def supported_extensions(self) -> FrozenSet[str]:
        """Lower-case input extensions without the dot."""

    @abstractmethod
    def output_extension(self) -> str:
        """Extension (without the dot) of produced artifacts."""

    @abstractmethod
    def content_type(self) -> str:
        """MIME type of produced artifacts."""

    @abstractmethod
    def comment_line(self, text: str) -> str:
        """``text`` as a single comment line in the output format."""

    @abstractmethod
    def fingerprint(self, file_path: Path) -> str:
        """Digest that changes whenever the artifact for ``file_path`` may change."""

    @abstractmethod
    def compile(self, file_path: Path) -> Artifact:
        """Produce a fresh artifact.

        Raises:
            CompileError: The compiler ran and failed.
            CompilerNotFoundError: The compiler is not available at all.
        """

    @abstractmethod
    def format_error(self, description: Union[str, CompileError]) -> Artifact:
        """Servable artifact describing a failed compile."""

    def cache_variant(self) -> str:
        """Short token for the settings that shape the output; empty when none do."""
        return ""

    def handles(self, file_path: Path) -> bool:
        return Path(file_path).suffix.lstrip(".").lower() in self.supported_extensions()


__all__ = ["Artifact", "Preprocessor"]
