import os
import sys
from pathlib import Path

import pytest
import yaml

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'assetpipe' and tests/ importable for helpers
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from assetpipe.core.config.cache import clear_all_caches
from assetpipe.core.utils.paths import PROJECT_ROOT_ENV
from assetpipe.core.utils.stdlib_logging import reset_stdlib_logging_for_tests


@pytest.fixture(autouse=True)
def _reset_assetpipe_state():
    """Config caches and CLI-installed log handlers must not leak between tests."""
    clear_all_caches()
    yield
    clear_all_caches()
    reset_stdlib_logging_for_tests()


@pytest.fixture
def isolated_project_env(tmp_path, monkeypatch):
    """
    Isolated project root for tests.

    Creates ``<tmp>/project/.assetpipe/config``, points ASSETPIPE_PROJECT_ROOT
    at it and strips any ASSETPIPE_* overrides from the developer environment.
    """
    root = tmp_path / "project"
    (root / ".assetpipe" / "config").mkdir(parents=True)

    for key in list(os.environ):
        if key.startswith("ASSETPIPE_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("DYLD_LIBRARY_PATH", raising=False)
    monkeypatch.setenv(PROJECT_ROOT_ENV, str(root))
    monkeypatch.chdir(root)
    return root


@pytest.fixture
def write_project_config(isolated_project_env):
    """Write ``.assetpipe/config/<name>.yaml`` in the isolated project."""

    def _write(name: str, data) -> Path:
        path = isolated_project_env / ".assetpipe" / "config" / f"{name}.yaml"
        path.write_text(yaml.safe_dump(data), encoding="utf-8")
        clear_all_caches()
        return path

    return _write


@pytest.fixture
def stylesheet_tree(isolated_project_env):
    """A small theme stylesheet tree; returns a name -> path mapping."""
    base = isolated_project_env / "theme" / "assets" / "stylesheets"
    files = {
        "screen": base / "screen.scss",
        "print": base / "print.sass",
        "base": base / "partials" / "_base.scss",
        "script": isolated_project_env / "theme" / "assets" / "javascripts" / "app.js",
    }
    files["screen"].parent.mkdir(parents=True, exist_ok=True)
    files["base"].parent.mkdir(parents=True, exist_ok=True)
    files["script"].parent.mkdir(parents=True, exist_ok=True)
    files["screen"].write_text('@import "partials/base";\nbody { color: red; }\n', encoding="utf-8")
    files["print"].write_text("body\n  color: black\n", encoding="utf-8")
    files["base"].write_text("$gap: 4px;\n", encoding="utf-8")
    files["script"].write_text("console.log('x');\n", encoding="utf-8")
    return files
