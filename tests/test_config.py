# tests/test_config.py
"""Configuration layering."""

from pathlib import Path

import pytest

from specguard.config.settings import SpecguardConfig, find_config_file, resolve_effective_config
from specguard.errors import ConfigError


def _write_config(root: Path, body: str) -> Path:
    cfg_dir = root / ".specguard"
    cfg_dir.mkdir(parents=True, exist_ok=True)
    path = cfg_dir / "config.yml"
    path.write_text(body, encoding="utf-8")
    return path


CONFIG = """\
defaults:
  output_format: json
  intent_denylist: [redis]
environments:
  ci:
    fail_on_warnings: true
    output_format: llm
"""


def test_builtin_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cfg = resolve_effective_config()
    assert cfg == SpecguardConfig()
    assert cfg.output_format == "rich"


def test_file_environment_and_cli_layers(tmp_path):
    path = _write_config(tmp_path, CONFIG)
    cfg = resolve_effective_config(config_path=path)
    assert cfg.output_format == "json"
    assert cfg.intent_denylist == ["redis"]

    cfg = resolve_effective_config("ci", config_path=path)
    assert cfg.output_format == "llm"
    assert cfg.fail_on_warnings is True

    cfg = resolve_effective_config("ci", {"output_format": "rich", "strict_fields": None}, config_path=path)
    assert cfg.output_format == "rich"
    assert cfg.strict_fields is False


def test_flat_file(tmp_path):
    path = _write_config(tmp_path, "strict_fields: true\n")
    assert resolve_effective_config(config_path=path).strict_fields is True


def test_unknown_environment(tmp_path):
    path = _write_config(tmp_path, CONFIG)
    with pytest.raises(ConfigError, match="Unknown environment 'prod'"):
        resolve_effective_config("prod", config_path=path)


def test_environment_without_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(ConfigError):
        resolve_effective_config("ci")


def test_invalid_key(tmp_path):
    path = _write_config(tmp_path, "defaults:\n  colour: blue\n")
    with pytest.raises(ConfigError):
        resolve_effective_config(config_path=path)


def test_invalid_yaml(tmp_path):
    path = _write_config(tmp_path, "defaults: [unclosed\n")
    with pytest.raises(ConfigError, match="invalid YAML"):
        resolve_effective_config(config_path=path)


def test_find_config_file_walks_up(tmp_path):
    path = _write_config(tmp_path, CONFIG)
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    assert find_config_file(nested) == path.resolve()
