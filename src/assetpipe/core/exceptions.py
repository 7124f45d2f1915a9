from __future__ import annotations

from typing import Any, Dict, Mapping


class AssetpipeError(Exception):
    """Base exception for assetpipe."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ConfigError(AssetpipeError, ValueError):
    """Raised when configuration is missing, malformed or fails schema validation."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        AssetpipeError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class CompilerNotFoundError(ConfigError, FileNotFoundError):
    """Raised when the configured compiler executable is missing or not executable.

    This is a misconfiguration, not a bad stylesheet: it is raised before any
    process is spawned and is never turned into a fallback artifact.
    """

    def __init__(self, message: str = "", *, path: str | None = None) -> None:
        ConfigError.__init__(self, message, context={"path": path} if path else None)
        FileNotFoundError.__init__(self, message)
        self.path = path


class CompileError(AssetpipeError, RuntimeError):
    """Raised when the external compiler exits non-zero or times out."""

    def __init__(
        self,
        message: str,
        error_output: str = "",
        *,
        command_line: str | None = None,
        returncode: int | None = None,
    ) -> None:
        ctx: Dict[str, Any] = {}
        if command_line:
            ctx["command_line"] = command_line
        if returncode is not None:
            ctx["returncode"] = returncode
        AssetpipeError.__init__(self, message, context=ctx)
        RuntimeError.__init__(self, message)
        self.error_output = error_output or ""
        self.command_line = command_line
        self.returncode = returncode

    def describe(self) -> str:
        """Message plus captured error output, as shown in the fallback artifact."""
        description = str(self)
        if self.error_output:
            description = f"{description}\n\n{self.error_output}"
        if not description.endswith("\n"):
            description += "\n"
        return description

    def to_json_error(self) -> Dict[str, Any]:
        payload = super().to_json_error()
        payload["error_output"] = self.error_output
        return payload


class UnsupportedAssetError(AssetpipeError, LookupError):
    """Raised when no preprocessor handles a file extension."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        AssetpipeError.__init__(self, message, context=context)
        LookupError.__init__(self, message)


__all__ = [
    "AssetpipeError",
    "ConfigError",
    "CompilerNotFoundError",
    "CompileError",
    "UnsupportedAssetError",
]
