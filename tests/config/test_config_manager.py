from __future__ import annotations

import logging
from pathlib import Path

import pytest

from assetpipe.core.config import ConfigManager, CssConfig, LoggingConfig, PipelineConfig, ThemeConfig
from assetpipe.core.config.cache import get_cached_config
from assetpipe.core.config.manager import apply_deprecated_aliases
from assetpipe.core.exceptions import ConfigError
from assetpipe.core.preprocessors import SassSettings


def test_bundled_defaults(isolated_project_env: Path) -> None:
    cfg = ConfigManager(isolated_project_env).load_config()

    assert cfg["css"]["compiler_path"] == "/usr/bin/compass"
    assert cfg["css"]["output_style"] == "compressed"
    assert cfg["css"]["require_libs"] == []
    assert cfg["css"]["compress"] is False
    assert cfg["css"]["munge"] is False
    assert cfg["theme"]["stylesheets_dir"] == "theme/assets/stylesheets"
    assert cfg["pipeline"]["cache_dir"] == ".assetpipe/cache"


def test_project_config_overrides_defaults(write_project_config, isolated_project_env) -> None:
    write_project_config("css", {"css": {"compiler_path": "/opt/compass", "munge": True}})

    manager = ConfigManager(isolated_project_env)

    assert manager.get("css.compiler_path") == "/opt/compass"
    assert manager.get("css.munge") is True
    assert manager.get("css.output_style") == "compressed"


def test_env_overrides_are_coerced(isolated_project_env, monkeypatch) -> None:
    monkeypatch.setenv("ASSETPIPE_CSS__COMPRESS", "true")
    monkeypatch.setenv("ASSETPIPE_css__timeout_seconds", "2.5")
    monkeypatch.setenv("ASSETPIPE_css__fingerprint_bucket_seconds", "60")
    monkeypatch.setenv("ASSETPIPE_css__require_libs", '["susy", "breakpoint"]')
    monkeypatch.setenv("ASSETPIPE_css__compiler_path", " /usr/local/bin/compass ")

    css = ConfigManager(isolated_project_env).load_config()["css"]

    assert css["compress"] is True
    assert css["timeout_seconds"] == 2.5
    assert css["fingerprint_bucket_seconds"] == 60
    assert css["require_libs"] == ["susy", "breakpoint"]
    assert css["compiler_path"] == "/usr/local/bin/compass"


def test_env_beats_project_file(write_project_config, isolated_project_env, monkeypatch) -> None:
    write_project_config("css", {"css": {"output_style": "expanded"}})
    monkeypatch.setenv("ASSETPIPE_css__output_style", "nested")

    assert ConfigManager(isolated_project_env).get("css.output_style") == "nested"


def test_project_root_variable_is_not_an_override(isolated_project_env) -> None:
    cfg = ConfigManager(isolated_project_env).load_config()

    assert "project_root" not in cfg
    assert "project" not in cfg


def test_malformed_env_key_is_rejected(isolated_project_env, monkeypatch) -> None:
    monkeypatch.setenv("ASSETPIPE_css____compress", "true")

    with pytest.raises(ConfigError, match="empty segment"):
        ConfigManager(isolated_project_env).load_config()


def test_legacy_compass_keys_map_onto_css(write_project_config, isolated_project_env, caplog) -> None:
    write_project_config(
        "legacy",
        {"compass": {"compass_path": "/opt/legacy/compass", "output_style": "expanded"}},
    )

    with caplog.at_level(logging.WARNING, logger="assetpipe.core.config.manager"):
        cfg = ConfigManager(isolated_project_env).load_config()

    assert cfg["css"]["compiler_path"] == "/opt/legacy/compass"
    assert cfg["css"]["output_style"] == "expanded"
    assert "compass" not in cfg
    messages = [r.getMessage() for r in caplog.records]
    assert any("compass.compass_path" in m and "css.compiler_path" in m for m in messages)
    assert any("compass.output_style" in m and "css.output_style" in m for m in messages)


def test_legacy_env_override(isolated_project_env, monkeypatch) -> None:
    monkeypatch.setenv("ASSETPIPE_compass__compass_path", "/env/compass")

    assert CssConfig(repo_root=isolated_project_env).compiler_path == "/env/compass"


def test_canonical_key_wins_within_a_layer(caplog) -> None:
    layer = {
        "compass": {"compass_path": "/old"},
        "css": {"compiler_path": "/new"},
    }

    with caplog.at_level(logging.WARNING, logger="assetpipe.core.config.manager"):
        out = apply_deprecated_aliases(layer, source="test.yaml")

    assert out == {"css": {"compiler_path": "/new"}}
    assert layer["compass"] == {"compass_path": "/old"}
    assert "test.yaml" in caplog.text


def test_later_layer_legacy_key_overrides_earlier_canonical(write_project_config, isolated_project_env) -> None:
    write_project_config("a_new", {"css": {"compiler_path": "/from/a"}})
    write_project_config("b_old", {"compass": {"compass_path": "/from/b"}})

    assert ConfigManager(isolated_project_env).get("css.compiler_path") == "/from/b"


def test_unrelated_legacy_keys_are_kept() -> None:
    out = apply_deprecated_aliases({"compass": {"images_dir": "img"}}, source="x")

    assert out == {"compass": {"images_dir": "img"}}


def test_schema_violation_raises(write_project_config, isolated_project_env) -> None:
    write_project_config("css", {"css": {"compress": "yes", "require_libs": "susy"}})

    with pytest.raises(ConfigError) as excinfo:
        ConfigManager(isolated_project_env).load_config(validate=True)

    message = str(excinfo.value)
    assert "css.compress" in message
    assert "css.require_libs" in message


def test_invalid_yaml_raises(isolated_project_env) -> None:
    bad = isolated_project_env / ".assetpipe" / "config" / "broken.yaml"
    bad.write_text("css: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Invalid YAML"):
        ConfigManager(isolated_project_env).load_config()


def test_non_mapping_file_raises(isolated_project_env) -> None:
    bad = isolated_project_env / ".assetpipe" / "config" / "list.yaml"
    bad.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="mapping"):
        ConfigManager(isolated_project_env).load_config()


def test_get_with_default(isolated_project_env) -> None:
    manager = ConfigManager(isolated_project_env)

    assert manager.get("css.nope", "fallback") == "fallback"
    assert manager.get("nope.deeper") is None


def test_cache_is_invalidated_by_config_edits(write_project_config, isolated_project_env) -> None:
    first = get_cached_config(isolated_project_env)
    assert get_cached_config(isolated_project_env) is first

    write_project_config("css", {"css": {"compiler_path": "/edited"}})

    assert get_cached_config(isolated_project_env)["css"]["compiler_path"] == "/edited"


def test_domain_paths_resolve_against_project_root(write_project_config, isolated_project_env) -> None:
    write_project_config(
        "paths",
        {
            "theme": {"stylesheets_dir": "site/scss"},
            "pipeline": {"cache_dir": "/var/cache/assetpipe"},
            "logging": {"level": "debug", "file": "logs/assetpipe.log"},
        },
    )

    root = isolated_project_env.resolve()
    assert ThemeConfig(repo_root=isolated_project_env).stylesheets_path == root / "site" / "scss"
    assert PipelineConfig(repo_root=isolated_project_env).cache_path == Path("/var/cache/assetpipe").resolve()
    log_cfg = LoggingConfig(repo_root=isolated_project_env)
    assert log_cfg.level == "DEBUG"
    assert log_cfg.file_path == root / "logs" / "assetpipe.log"


def test_css_config_accessors(write_project_config, isolated_project_env) -> None:
    write_project_config(
        "css",
        {"css": {"timeout_seconds": 0, "output_style": None, "require_libs": "susy"}},
    )

    css = CssConfig(repo_root=isolated_project_env)

    assert css.timeout_seconds is None
    assert css.output_style is None
    assert css.require_libs == ["susy"]
    assert css.get_all_settings()["compiler_path"] == "/usr/bin/compass"


def test_css_config_rejects_non_list_require_libs(write_project_config, isolated_project_env) -> None:
    write_project_config("css", {"css": {"require_libs": {"a": 1}}})

    with pytest.raises(ConfigError):
        CssConfig(repo_root=isolated_project_env).require_libs


def test_missing_project_root_directory(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("ASSETPIPE_PROJECT_ROOT", str(tmp_path / "gone"))

    with pytest.raises(ConfigError):
        ConfigManager()


def test_legacy_css_setting_names_are_honoured(write_project_config, isolated_project_env, caplog) -> None:
    write_project_config(
        "css",
        {"css": {"compass_path": "/opt/compass", "yui_compress": True, "yui_munge": True}},
    )

    with caplog.at_level(logging.WARNING, logger="assetpipe.core.config.manager"):
        settings = SassSettings.from_config(isolated_project_env)

    assert settings.compiler_path == "/opt/compass"
    assert settings.compress is True
    assert settings.munge is True
    cfg = ConfigManager(isolated_project_env).load_config()
    assert not {"compass_path", "yui_compress", "yui_munge"} & set(cfg["css"])
    for old in ("css.compass_path", "css.yui_compress", "css.yui_munge"):
        assert old in caplog.text


def test_legacy_css_names_lose_to_canonical_in_same_file() -> None:
    out = apply_deprecated_aliases(
        {"css": {"yui_compress": True, "compress": False}},
        source="css.yaml",
    )

    assert out == {"css": {"compress": False}}


def test_fractional_fingerprint_bucket_is_rejected(write_project_config, isolated_project_env) -> None:
    write_project_config("css", {"css": {"fingerprint_bucket_seconds": 0.5}})

    with pytest.raises(ConfigError, match="fingerprint_bucket_seconds"):
        ConfigManager(isolated_project_env).load_config(validate=True)
