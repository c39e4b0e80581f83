"""Configuration hierarchy — merges sources in priority order.

Precedence (later overrides earlier):
  1. Package defaults
  2. Global config   (~/.hrxml/config.yaml)
  3. Project config   (hrxml.yaml in the cwd or nearest parent)
  4. Environment variables (HRXML_<KEY>, e.g. HRXML_SLOTS)
  5. Runtime arguments
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from hrxml.config.defaults import get_defaults

logger = logging.getLogger(__name__)

_GLOBAL_CONFIG_PATH = Path.home() / ".hrxml" / "config.yaml"
_PROJECT_CONFIG_NAME = "hrxml.yaml"
ENV_PREFIX = "HRXML_"


def load_config_hierarchy(**runtime_overrides: Any) -> dict[str, Any]:
    """Load and merge configuration from all sources."""
    defaults = get_defaults()
    config = dict(defaults)

    for path in (_GLOBAL_CONFIG_PATH, _find_project_config()):
        if path is not None:
            config.update(_load_yaml_config(path) or {})

    for key, default in defaults.items():
        value = os.environ.get(ENV_PREFIX + key.upper())
        if value is not None:
            config[key] = _coerce_env_value(value, default)

    # None means "not set"
    config.update({k: v for k, v in runtime_overrides.items() if v is not None})
    return config


def _load_yaml_config(path: Path) -> dict[str, Any] | None:
    if not path.is_file():
        return None
    try:
        data = yaml.safe_load(path.read_text())
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        logger.warning("Config file %s is not a mapping, ignoring", path)
        return None
    return data


def _find_project_config() -> Path | None:
    cwd = Path.cwd()
    return next(
        (p / _PROJECT_CONFIG_NAME for p in (cwd, *cwd.parents) if (p / _PROJECT_CONFIG_NAME).exists()),
        None,
    )


def _coerce_env_value(value: str, default: Any) -> Any:
    """Convert an env string to the type of the key's default (str if unset)."""
    if default is None or isinstance(default, str):
        return value
    try:
        return type(default)(value)
    except ValueError:
        logger.warning("Cannot convert %r to %s, keeping the string", value, type(default).__name__)
        return value
