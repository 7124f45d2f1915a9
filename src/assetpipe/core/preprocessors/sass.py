"""Compile Sass/SCSS files with an external compiler executable.

The compiler is invoked as::

    <compiler_path> compile <file> --paths <theme stylesheets dir>
        [--output-style <style>] [--require <lib> ...] [--compress] [--munge]

Settings come from the ``css`` config section (see ``CssConfig``); the
legacy ``compass.compass_path`` / ``compass.output_style`` names are folded
in by the config loader.
"""
from __future__ import annotations

import hashlib
import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, Optional, Tuple, Union

from assetpipe.core.exceptions import CompileError, CompilerNotFoundError
from assetpipe.core.utils.subprocess import ProcessSpec, run_process

from .base import Artifact, Preprocessor
from .fingerprint import STYLESHEET_EXTENSIONS, fingerprint

logger = logging.getLogger(__name__)

CONTENT_TYPE = "text/css"
OUTPUT_EXTENSION = "css"
COMPILE_SUBCOMMAND = "compile"

# Cleared for the child; a host-provided value breaks the compiler on some
# macOS stacks (MAMP).
CLEARED_ENV_VARS = ("DYLD_LIBRARY_PATH",)

ERROR_BANNER = (
    "Damn, we're having problems compiling the Sass. "
    "Check the CSS source code for more infos!"
)
ERROR_RULE = (
    'body::before {{ content: "{banner}"; font-family: monospace; white-space: pre; '
    "display: block; background: #eee; padding: 20px; }}"
).format(banner=ERROR_BANNER)


@dataclass(frozen=True)
class SassSettings:
    compiler_path: str
    stylesheets_path: Path
    output_style: Optional[str] = "compressed"
    require_libs: Tuple[str, ...] = ()
    compress: bool = False
    munge: bool = False
    timeout_seconds: Optional[float] = 120.0
    fingerprint_bucket_seconds: int = 0

    @classmethod
    def from_config(cls, repo_root: Optional[Path] = None) -> "SassSettings":
        from assetpipe.core.config.domains import CssConfig, ThemeConfig

        css = CssConfig(repo_root=repo_root)
        theme = ThemeConfig(repo_root=repo_root)
        return cls(
            compiler_path=css.compiler_path,
            stylesheets_path=theme.stylesheets_path,
            output_style=css.output_style,
            require_libs=tuple(css.require_libs),
            compress=css.compress,
            munge=css.munge,
            timeout_seconds=css.timeout_seconds,
            fingerprint_bucket_seconds=css.fingerprint_bucket_seconds,
        )


def resolve_executable(path: str) -> str:
    """Return an executable path for ``path`` or raise ``CompilerNotFoundError``.

    Bare command names are looked up on ``PATH``.
    """
    candidate: Optional[str] = path
    if path and os.sep not in path and (os.altsep is None or os.altsep not in path):
        candidate = shutil.which(path)
    if not candidate:
        raise CompilerNotFoundError(f"Compiler executable not found: {path}", path=path)

    p = Path(candidate)
    if not p.is_file():
        raise CompilerNotFoundError(f"Compiler executable not found: {path}", path=path)
    if not os.access(p, os.X_OK):
        raise CompilerNotFoundError(f"Compiler is not executable: {path}", path=path)
    return str(p)


def _comment_safe(text: str) -> str:
    """Keep ``text`` from closing the surrounding block comment."""
    return text.replace("*/", "* /")


class SassPreprocessor(Preprocessor):
    """Sass/SCSS -> CSS through an external compiler process."""

    def __init__(self, settings: SassSettings) -> None:
        self.settings = settings

    @classmethod
    def from_config(cls, repo_root: Optional[Path] = None) -> "SassPreprocessor":
        return cls(SassSettings.from_config(repo_root))

    # ----- format metadata -----

    def supported_extensions(self) -> FrozenSet[str]:
        return frozenset(STYLESHEET_EXTENSIONS)

    def output_extension(self) -> str:
        return OUTPUT_EXTENSION

    def content_type(self) -> str:
        return CONTENT_TYPE

    def comment_line(self, text: str) -> str:
        return f"/* {_comment_safe(text)} */\n"

    # ----- cache key -----

    def fingerprint(self, file_path: Path) -> str:
        return fingerprint(
            file_path,
            extensions=STYLESHEET_EXTENSIONS,
            bucket_seconds=self.settings.fingerprint_bucket_seconds,
        )

    def cache_variant(self) -> str:
        s = self.settings
        token = "|".join(
            [
                s.compiler_path,
                str(s.stylesheets_path),
                s.output_style or "",
                ",".join(s.require_libs),
                str(int(s.compress)),
                str(int(s.munge)),
            ]
        )
        return hashlib.sha256(token.encode("utf-8")).hexdigest()[:12]

    # ----- compilation -----

    def build_command(self, file_path: Path, executable: Optional[str] = None) -> ProcessSpec:
        s = self.settings
        args = [COMPILE_SUBCOMMAND, str(file_path), "--paths", str(s.stylesheets_path)]
        if s.output_style:
            args += ["--output-style", s.output_style]
        for lib in s.require_libs:
            args += ["--require", lib]
        if s.compress:
            args.append("--compress")
        if s.munge:
            args.append("--munge")

        env = {name: "" for name in CLEARED_ENV_VARS}
        return ProcessSpec(
            executable=executable or s.compiler_path,
            args=tuple(args),
            env_overrides=env,
        )

    def compile(self, file_path: Path) -> Artifact:
        executable = resolve_executable(self.settings.compiler_path)
        spec = self.build_command(Path(file_path), executable=executable)
        timeout = self.settings.timeout_seconds

        try:
            result = run_process(spec, timeout=timeout)
        except subprocess.TimeoutExpired as exc:
            stderr = exc.stderr if isinstance(exc.stderr, str) else ""
            raise CompileError(
                f"Timed out after {timeout}s running the following command: {spec.command_line}",
                stderr,
                command_line=spec.command_line,
            ) from exc
        except OSError as exc:
            raise CompilerNotFoundError(
                f"Could not execute compiler {executable}: {exc}",
                path=executable,
            ) from exc

        if not result.ok:
            logger.warning("Sass compilation failed (exit %s) for %s", result.returncode, file_path)
            raise CompileError(
                f"Failed to run the following command: {result.command_line}",
                result.stderr,
                command_line=result.command_line,
                returncode=result.returncode,
            )

        return Artifact(body=result.stdout, content_type=CONTENT_TYPE, source=Path(file_path))

    # ----- fallback -----

    def format_error(self, description: Union[str, CompileError]) -> Artifact:
        """Stylesheet that shows a banner on the page and keeps the details in a comment.

        The description only ever lands inside the comment, so the output is
        one comment plus one rule whatever the description contains.
        """
        if isinstance(description, CompileError):
            description = description.describe()
        body = "/************************\n"
        body += _comment_safe(str(description))
        if not body.endswith("\n"):
            body += "\n"
        body += "************************/\n\n"
        body += ERROR_RULE
        return Artifact(body=body, content_type=CONTENT_TYPE, failed=True)


__all__ = [
    "CONTENT_TYPE",
    "OUTPUT_EXTENSION",
    "CLEARED_ENV_VARS",
    "ERROR_BANNER",
    "ERROR_RULE",
    "SassSettings",
    "SassPreprocessor",
    "resolve_executable",
]
