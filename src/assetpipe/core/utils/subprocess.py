from __future__ import annotations

"""Blocking external process execution.

A command is described by a ``ProcessSpec`` value (executable, arguments,
environment overrides) and run by ``run_process``, which captures stdout and
stderr separately and returns a ``ProcessResult``.

- No shell=True
- Child runs in its own process group so a timeout kills the whole tree
"""

import logging
import os
import shlex
import signal
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessSpec:
    """Everything needed to spawn one external command."""

    executable: str
    args: Tuple[str, ...] = ()
    env_overrides: Mapping[str, str] = field(default_factory=dict)
    cwd: Optional[Path] = None

    @property
    def argv(self) -> list[str]:
        return [str(self.executable), *(str(a) for a in self.args)]

    @property
    def command_line(self) -> str:
        return shlex.join(self.argv)

    def build_env(self, base: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """Inherited environment with ``env_overrides`` applied on top."""
        env = dict(os.environ if base is None else base)
        env.update({str(k): str(v) for k, v in self.env_overrides.items()})
        return env


@dataclass(frozen=True)
class ProcessResult:
    returncode: int
    stdout: str
    stderr: str
    command_line: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _popen_process_group_kwargs() -> dict[str, Any]:
    if os.name == "posix":
        return {"start_new_session": True}
    if os.name == "nt":
        creationflags = getattr(subprocess, "CREATE_NEW_PROCESS_GROUP", None)
        if isinstance(creationflags, int):
            return {"creationflags": creationflags}
    return {}


def _terminate_process_group(proc: subprocess.Popen[Any]) -> None:
    if proc.poll() is not None:
        return
    if os.name == "posix":
        try:
            os.killpg(proc.pid, signal.SIGTERM)
        except OSError:
            proc.terminate()
        try:
            proc.wait(timeout=0.2)
        except subprocess.TimeoutExpired:
            pass
        if proc.poll() is None:
            try:
                os.killpg(proc.pid, signal.SIGKILL)
            except OSError:
                proc.kill()
        try:
            proc.wait(timeout=0.2)
        except subprocess.TimeoutExpired:
            pass
        return

    proc.kill()
    try:
        proc.wait(timeout=0.2)
    except subprocess.TimeoutExpired:
        pass


def run_process(spec: ProcessSpec, *, timeout: Optional[float] = None) -> ProcessResult:
    """Run ``spec`` to completion and capture both output streams.

    Args:
        spec: Command description
        timeout: Seconds to wait before killing the process group (None waits forever)

    Returns:
        ProcessResult with exit status and decoded stdout/stderr

    Raises:
        subprocess.TimeoutExpired: When the command exceeds ``timeout``; the
            process group has been terminated by then.
        OSError: When the executable cannot be spawned.
    """
    argv = spec.argv
    logger.debug("Running: %s", spec.command_line)

    proc = subprocess.Popen(
        argv,
        cwd=str(spec.cwd) if spec.cwd is not None else None,
        env=spec.build_env(),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        encoding="utf-8",
        errors="replace",
        **_popen_process_group_kwargs(),
    )
    try:
        stdout, stderr = proc.communicate(timeout=timeout)
    except subprocess.TimeoutExpired as exc:
        _terminate_process_group(proc)
        try:
            stdout, stderr = proc.communicate(timeout=0.2)
        except subprocess.TimeoutExpired:
            stdout = getattr(exc, "output", None)
            stderr = getattr(exc, "stderr", None)
        logger.warning("Timed out after %ss: %s", timeout, spec.command_line)
        raise subprocess.TimeoutExpired(argv, timeout or 0, output=stdout, stderr=stderr) from None

    returncode = proc.returncode if proc.returncode is not None else 0
    logger.debug("Exited with %s: %s", returncode, spec.command_line)
    return ProcessResult(
        returncode=returncode,
        stdout=stdout or "",
        stderr=stderr or "",
        command_line=spec.command_line,
    )


__all__ = ["ProcessSpec", "ProcessResult", "run_process"]
