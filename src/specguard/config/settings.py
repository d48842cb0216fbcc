# src/specguard/config/settings.py
"""
Project configuration for specguard.

Lookup order (later wins):
  1) built-in defaults
  2) .specguard/config.yml (found by walking up from the working directory)
  3) `environments.<name>` overrides from that file
  4) CLI overrides (None values are ignored)

Algorithmic thresholds (alignment weights, minimum test count, sentence
limit) are part of the contract semantics and are not configurable.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from specguard.errors import ConfigError
from specguard.logging import get_logger

_logger = get_logger(__name__)

CONFIG_DIR = ".specguard"
CONFIG_FILE = "config.yml"


class SpecguardConfig(BaseModel):
    """Effective configuration after all layers are applied."""

    model_config = ConfigDict(extra="forbid")

    output_format: Literal["rich", "json", "llm"] = "rich"
    strict_fields: bool = False
    intent_denylist: List[str] = Field(
        default_factory=list,
        description="Extra implementation-detail terms flagged in INTENT (C3).",
    )
    max_workers: Optional[int] = Field(None, ge=1)
    fail_on_warnings: bool = False


class _ConfigFile(BaseModel):
    model_config = ConfigDict(extra="forbid")

    defaults: Dict[str, Any] = Field(default_factory=dict)
    environments: Dict[str, Dict[str, Any]] = Field(default_factory=dict)


def find_config_file(start: Optional[Path] = None) -> Optional[Path]:
    """Walk up from `start` (default: cwd) looking for .specguard/config.yml."""
    current = Path(start or os.getcwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_DIR / CONFIG_FILE
        if candidate.is_file():
            return candidate
    return None


def load_config_file(path: Path) -> _ConfigFile:
    try:
        raw = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"{path}: invalid YAML: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: top level must be a mapping")

    # Flat files are allowed: every key that isn't `environments` is a default.
    if "defaults" not in raw:
        envs = raw.pop("environments", {}) or {}
        raw = {"defaults": raw, "environments": envs}
    try:
        return _ConfigFile.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"{path}: {e}") from e


def resolve_effective_config(
    env_name: Optional[str] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
    config_path: Optional[Path] = None,
) -> SpecguardConfig:
    """
    Merge defaults, config file, environment profile and CLI overrides.

    Raises:
        ConfigError: config file is malformed, or `env_name` is unknown
    """
    merged: Dict[str, Any] = {}

    path = config_path or find_config_file()
    if path is not None:
        _logger.debug("Loading config from %s", path)
        cfg_file = load_config_file(path)
        merged.update(cfg_file.defaults)
        if env_name:
            if env_name not in cfg_file.environments:
                known = ", ".join(sorted(cfg_file.environments)) or "none"
                raise ConfigError(f"Unknown environment '{env_name}' (known: {known})")
            merged.update(cfg_file.environments[env_name])
    elif env_name:
        raise ConfigError(f"Environment '{env_name}' requested but no {CONFIG_DIR}/{CONFIG_FILE} found")

    for key, value in (cli_overrides or {}).items():
        if value is not None:
            merged[key] = value

    try:
        return SpecguardConfig.model_validate(merged)
    except ValidationError as e:
        raise ConfigError(str(e)) from e
