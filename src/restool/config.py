"""Configuration loader for restool defaults.

Defaults are read from ``restool.yaml`` in the working directory, from the
path named by ``RESTOOL_CONFIG``, or from an explicit path. A missing file
yields the built-in defaults; command-line flags override whatever is loaded.

Example ``restool.yaml``::

    series: E96
    error_threshold: 0.5%
    color: never
    output: text
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .errors import InvalidInputError
from .search.core import check_threshold
from .series import DEFAULT_SERIES_NAME, get_series
from .units import parse_error_threshold

DEFAULT_CONFIG_PATH = Path("restool.yaml")
CONFIG_ENV_VAR = "RESTOOL_CONFIG"

COLOR_MODES = ("auto", "always", "never")
OUTPUT_FORMATS = ("text", "json")

_KNOWN_KEYS = frozenset({"series", "error_threshold", "color", "output"})


class RestoolConfigError(ValueError):
    """Raised when the configuration file is invalid."""


@dataclass(frozen=True)
class RestoolConfig:
    """Defaults applied to every command."""

    series: str = DEFAULT_SERIES_NAME
    error_threshold: float = 0.0
    color: str = "auto"
    output: str = "text"


def load_config(
    config_path: Path | None = None,
    project_root: Path | None = None,
) -> RestoolConfig:
    """Load restool configuration from a YAML file.

    Args:
        config_path: Explicit config file. Must exist when given.
        project_root: Directory searched for ``restool.yaml``. Defaults to the
            current working directory.

    Returns:
        RestoolConfig with file values layered over the defaults.

    Raises:
        RestoolConfigError: If the file is missing (explicit path only),
            is not valid YAML, or holds unknown keys or invalid values.
    """
    path = _resolve_path(config_path, project_root)
    if path is None:
        return RestoolConfig()

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise RestoolConfigError(f"Cannot read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise RestoolConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return RestoolConfig()
    if not isinstance(data, dict):
        raise RestoolConfigError(f"Config must be a mapping, got {type(data).__name__}")

    return _parse_config(data)


def _resolve_path(config_path: Path | None, project_root: Path | None) -> Path | None:
    if config_path is not None:
        if not config_path.exists():
            raise RestoolConfigError(f"Config file not found: {config_path}")
        return config_path
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return _resolve_path(Path(env_path), project_root)
    default = (project_root or Path.cwd()) / DEFAULT_CONFIG_PATH
    return default if default.exists() else None


def _parse_config(data: Mapping[str, Any]) -> RestoolConfig:
    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise RestoolConfigError(f"Unknown config keys: {', '.join(map(str, unknown))}")

    defaults = RestoolConfig()
    try:
        series = get_series(str(data.get("series", defaults.series))).name
        threshold = check_threshold(parse_error_threshold(data.get("error_threshold", defaults.error_threshold)))
    except InvalidInputError as e:
        raise RestoolConfigError(str(e)) from e

    color = str(data.get("color", defaults.color)).lower()
    if color not in COLOR_MODES:
        raise RestoolConfigError(f"color must be one of {', '.join(COLOR_MODES)}, got {color!r}")
    output = str(data.get("output", defaults.output)).lower()
    if output not in OUTPUT_FORMATS:
        raise RestoolConfigError(f"output must be one of {', '.join(OUTPUT_FORMATS)}, got {output!r}")

    return RestoolConfig(series=series, error_threshold=threshold, color=color, output=output)
