"""
nexus-proxy — unit tests for config loader

File: tests/unit/config/test_loader.py
Last updated: 2026-10-19

Purpose
- Validate deterministic config loading from defaults, TOML, env overrides, and explicit overrides.

What this test file should cover
- Precedence: overrides > env > file > defaults.
- Deterministic env var path mapping and type coercion.
- Path normalization relative to the config file.
- Deterministic effective config dumping.

Functional requirements
- Works offline, without a config file in the working directory.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from nexus_proxy.config.loader import (
    ConfigLoadError,
    dump_effective_config,
    load_config,
    normalize_paths,
)
from nexus_proxy.config.schema import ConfigValidationError, default_config


def _write_config(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_loader_precedence_default_file_env_overrides(tmp_path: Path) -> None:
    default_path = _write_config(tmp_path / "empty.toml", "")
    config_path = _write_config(
        tmp_path / "nexus_proxy.toml",
        """
[naming]
type_suffix = "Shim"
""".strip(),
    )
    env = {"NEXUS_PROXY_NAMING_TYPE_SUFFIX": "Wrapper"}

    default_loaded = load_config(default_path, environ={})
    file_loaded = load_config(config_path, environ={})
    env_loaded = load_config(config_path, environ=env)
    override_loaded = load_config(
        config_path, environ=env, overrides={"naming.type_suffix": "Facade"}
    )

    assert default_loaded["naming"]["type_suffix"] == "Proxy"
    assert file_loaded["naming"]["type_suffix"] == "Shim"
    assert env_loaded["naming"]["type_suffix"] == "Wrapper"
    assert override_loaded["naming"]["type_suffix"] == "Facade"


def test_env_values_are_coerced_to_the_default_types(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path / "nexus_proxy.toml", "")

    loaded = load_config(
        config_path,
        environ={
            "NEXUS_PROXY_GENERATION_COPY_MEMBER_METADATA": "off",
            "NEXUS_PROXY_OBSERVABILITY_QUEUE_SIZE": " 128 ",
            "NEXUS_PROXY_OBSERVABILITY_LOG_LEVEL": "DEBUG",
            "NEXUS_PROXY_UNRELATED": "ignored",
        },
    )

    assert loaded["generation"]["copy_member_metadata"] is False
    assert loaded["observability"]["queue_size"] == 128
    assert loaded["observability"]["log_level"] == "DEBUG"


@pytest.mark.parametrize(
    ("name", "value", "message"),
    [
        ("NEXUS_PROXY_OBSERVABILITY_QUEUE_SIZE", "many", "must be an integer"),
        ("NEXUS_PROXY_GENERATION_WARN_ON_IDENTITY_EQUALITY", "perhaps", "must be a boolean"),
    ],
)
def test_env_values_that_cannot_be_coerced_are_rejected(
    tmp_path: Path, name: str, value: str, message: str
) -> None:
    config_path = _write_config(tmp_path / "nexus_proxy.toml", "")

    with pytest.raises(ConfigLoadError, match=message):
        load_config(config_path, environ={name: value})


def test_mapping_overrides_merge_into_sections(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path / "nexus_proxy.toml", "")

    loaded = load_config(
        config_path,
        environ={},
        overrides={"observability": {"log_format": "text"}, "observability.queue_size": 7},
    )

    assert loaded["observability"]["log_format"] == "text"
    assert loaded["observability"]["queue_size"] == 7
    assert loaded["observability"]["log_level"] == "WARNING"
    with pytest.raises(ConfigLoadError, match="invalid override key"):
        load_config(config_path, environ={}, overrides={"..": 1})


def test_path_fields_are_resolved_relative_to_the_config_file(tmp_path: Path) -> None:
    config_dir = tmp_path / "conf"
    config_path = _write_config(
        config_dir / "nexus_proxy.toml",
        """
[generation]
policy_file = "policies/intercept.yaml"

[observability]
log_file = "../logs/proxy.log"
""".strip(),
    )

    loaded = load_config(config_path, environ={})

    assert loaded["generation"]["policy_file"] == (
        (config_dir / "policies" / "intercept.yaml").resolve().as_posix()
    )
    assert loaded["observability"]["log_file"] == (
        (tmp_path / "logs" / "proxy.log").resolve().as_posix()
    )


def test_empty_path_fields_stay_empty(tmp_path: Path) -> None:
    normalized = normalize_paths(default_config(), base_dir=tmp_path)

    assert normalized["generation"]["policy_file"] == ""
    assert normalized["observability"]["log_file"] == ""


def test_missing_default_file_is_tolerated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    assert load_config(environ={}) == default_config()

    _write_config(tmp_path / "nexus_proxy.toml", '[naming]\nmodule_name = "acme.proxies"\n')
    assert load_config(environ={})["naming"]["module_name"] == "acme.proxies"


def test_missing_explicit_file_and_invalid_toml_are_errors(tmp_path: Path) -> None:
    broken = _write_config(tmp_path / "broken.toml", "[naming\n")

    with pytest.raises(ConfigLoadError, match="config file not found"):
        load_config(tmp_path / "absent.toml", environ={})
    with pytest.raises(ConfigLoadError, match="invalid TOML"):
        load_config(broken, environ={})


def test_invalid_file_values_fail_validation(tmp_path: Path) -> None:
    config_path = _write_config(
        tmp_path / "nexus_proxy.toml",
        """
[naming]
module_name = "not a module"

[extras]
enabled = true
""".strip(),
    )

    with pytest.raises(ConfigValidationError) as exc_info:
        load_config(config_path, environ={})

    paths = {issue.path for issue in exc_info.value.issues}
    assert paths == {"naming.module_name", "extras"}


def test_effective_config_dump_is_deterministic(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path / "nexus_proxy.toml", "")

    first = dump_effective_config(load_config(config_path, environ={}))
    second = dump_effective_config(load_config(config_path, environ={}))

    assert first == second
    assert list(json.loads(first)) == ["generation", "meta", "naming", "observability"]
