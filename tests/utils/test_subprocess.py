from __future__ import annotations

import subprocess
import sys
import time
from pathlib import Path

import pytest

from assetpipe.core.utils.subprocess import ProcessSpec, run_process


def _python(code: str, **kwargs) -> ProcessSpec:
    return ProcessSpec(executable=sys.executable, args=("-c", code), **kwargs)


def test_stdout_and_stderr_are_captured_separately() -> None:
    result = run_process(
        _python("import sys; sys.stdout.write('out'); sys.stderr.write('err'); sys.exit(3)")
    )

    assert result.stdout == "out"
    assert result.stderr == "err"
    assert result.returncode == 3
    assert result.ok is False


def test_env_overrides_apply_on_top_of_inherited_env(monkeypatch) -> None:
    monkeypatch.setenv("ASSETPIPE_TEST_INHERITED", "kept")
    monkeypatch.setenv("DYLD_LIBRARY_PATH", "/bad")
    spec = _python(
        "import os; print(os.environ['ASSETPIPE_TEST_INHERITED'], repr(os.environ.get('DYLD_LIBRARY_PATH')))",
        env_overrides={"DYLD_LIBRARY_PATH": ""},
    )

    result = run_process(spec)

    assert result.ok
    assert result.stdout.strip() == "kept ''"


def test_build_env_does_not_touch_base() -> None:
    base = {"A": "1"}
    spec = ProcessSpec(executable="true", env_overrides={"B": "2"})

    assert spec.build_env(base) == {"A": "1", "B": "2"}
    assert base == {"A": "1"}


def test_cwd_is_honoured(tmp_path: Path) -> None:
    result = run_process(_python("import os; print(os.getcwd())", cwd=tmp_path))

    assert Path(result.stdout.strip()).resolve() == tmp_path.resolve()


def test_timeout_kills_process_and_raises() -> None:
    started = time.monotonic()

    with pytest.raises(subprocess.TimeoutExpired):
        run_process(_python("import time; time.sleep(30)"), timeout=0.5)

    assert time.monotonic() - started < 10


def test_command_line_is_shell_quoted() -> None:
    spec = ProcessSpec(executable="/opt/my tools/compass", args=("compile", "a b.scss"))

    assert spec.argv == ["/opt/my tools/compass", "compile", "a b.scss"]
    assert spec.command_line == "'/opt/my tools/compass' compile 'a b.scss'"


def test_missing_executable_raises_oserror(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        run_process(ProcessSpec(executable=str(tmp_path / "does-not-exist")))
