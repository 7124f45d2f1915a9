from __future__ import annotations

import json
from pathlib import Path

import pytest

from assetpipe.cli._dispatcher import build_parser, discover_commands, discover_domains, main
from helpers.compilers import make_stub_compiler


@pytest.fixture
def configured_compiler(tmp_path: Path, write_project_config):
    def _configure(**stub_kwargs) -> Path:
        compiler = make_stub_compiler(tmp_path / "bin", **stub_kwargs)
        write_project_config("css", {"css": {"compiler_path": str(compiler)}})
        return compiler

    return _configure


def test_discovers_css_and_config_domains() -> None:
    assert {"css", "config"} <= set(discover_domains())
    assert set(discover_commands("css")) == {"compile", "fingerprint", "info"}
    assert "show" in discover_commands("config")


def test_parser_exposes_version() -> None:
    parser = build_parser()

    with pytest.raises(SystemExit) as excinfo:
        parser.parse_args(["--version"])
    assert excinfo.value.code == 0


def test_no_domain_prints_help(capsys) -> None:
    assert main([]) == 0
    assert "usage: assetpipe" in capsys.readouterr().out


def test_css_info_json(isolated_project_env, capsys) -> None:
    assert main(["css", "info", "--json"]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["supported_extensions"] == ["sass", "scss"]
    assert data["output_extension"] == "css"
    assert data["content_type"] == "text/css"
    assert data["compiler_path"] == "/usr/bin/compass"
    assert data["command"][:2] == ["/usr/bin/compass", "compile"]
    assert "--paths" in data["command"]


def test_css_compile_prints_css(configured_compiler, stylesheet_tree, capsys) -> None:
    configured_compiler(stdout="body{color:red}")

    assert main(["css", "compile", str(stylesheet_tree["screen"])]) == 0

    out = capsys.readouterr().out
    assert out.startswith("/* assetpipe: screen.scss (")
    assert out.endswith("body{color:red}")


def test_css_compile_failure_emits_fallback(configured_compiler, stylesheet_tree, capsys) -> None:
    configured_compiler(stderr="Invalid CSS after", exit_code=1)

    assert main(["css", "compile", str(stylesheet_tree["screen"])]) == 1

    out = capsys.readouterr().out
    assert "Invalid CSS after" in out
    assert "Damn, we're having problems compiling the Sass." in out


def test_css_compile_json_with_output_file(configured_compiler, stylesheet_tree, tmp_path, capsys) -> None:
    configured_compiler(stdout="p{margin:0}")
    target = tmp_path / "out" / "screen.css"

    rc = main(["css", "compile", str(stylesheet_tree["screen"]), "--json", "-o", str(target)])

    assert rc == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["status"] == "success"
    assert payload["failed"] is False
    assert payload["output"] == str(target)
    assert "body" not in payload
    assert target.read_text(encoding="utf-8").endswith("p{margin:0}")


def test_css_compile_missing_compiler_reports_error(write_project_config, stylesheet_tree, capsys) -> None:
    write_project_config("css", {"css": {"compiler_path": "/definitely/not/here/compass"}})

    assert main(["css", "compile", str(stylesheet_tree["screen"]), "--json"]) == 1

    err = json.loads(capsys.readouterr().err)
    assert err["error"] == "css_compile_error"
    assert err["details"]["code"] == "CompilerNotFoundError"


def test_css_fingerprint_json_lists_dependencies(stylesheet_tree, capsys) -> None:
    rc = main(["css", "fingerprint", str(stylesheet_tree["screen"]), "--json", "--list"])

    assert rc == 0
    payload = json.loads(capsys.readouterr().out)
    assert len(payload["fingerprint"]) == 64
    assert payload["dependencies"] == sorted(
        str(stylesheet_tree[name]) for name in ("screen", "print", "base")
    )


def test_css_fingerprint_missing_source(isolated_project_env, capsys) -> None:
    assert main(["css", "fingerprint", "nope.scss"]) == 1
    assert "Source file not found" in capsys.readouterr().err


def test_config_show_key_json(write_project_config, capsys) -> None:
    write_project_config("css", {"css": {"compiler_path": "/opt/compass"}})

    assert main(["config", "show", "css.compiler_path", "--json"]) == 0

    assert json.loads(capsys.readouterr().out) == {"css.compiler_path": "/opt/compass"}


def test_config_show_yaml(isolated_project_env, capsys) -> None:
    assert main(["config", "show", "css.output_style", "--format", "yaml"]) == 0

    assert capsys.readouterr().out.strip() == "css:\n  output_style: compressed"


def test_config_show_unknown_key(isolated_project_env, capsys) -> None:
    assert main(["config", "show", "css.nope"]) == 1
    assert "Key not found: css.nope" in capsys.readouterr().out
