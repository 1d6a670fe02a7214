"""Tests for restool.yaml configuration loading.

These tests verify:
1. Defaults when no file is present
2. Explicit path, RESTOOL_CONFIG and working-directory lookup
3. Value normalization and validation
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from restool.config import (
    CONFIG_ENV_VAR,
    RestoolConfig,
    RestoolConfigError,
    load_config,
)


def _write_config(path: Path, content: object) -> Path:
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(content, f)
    return path


class TestConfigLookup:
    """Test where configuration is read from."""

    def test_defaults_when_missing(self, tmp_path: Path) -> None:
        config = load_config(project_root=tmp_path)
        assert config == RestoolConfig()
        assert config.series == "E24"
        assert config.error_threshold == 0.0
        assert config.color == "auto"
        assert config.output == "text"

    def test_project_root_file(self, tmp_path: Path) -> None:
        _write_config(tmp_path / "restool.yaml", {"series": "E96"})
        assert load_config(project_root=tmp_path).series == "E96"

    def test_explicit_path(self, tmp_path: Path) -> None:
        path = _write_config(tmp_path / "custom.yaml", {"series": "E12", "output": "json"})
        config = load_config(config_path=path, project_root=tmp_path)
        assert config.series == "E12"
        assert config.output == "json"

    def test_explicit_path_must_exist(self, tmp_path: Path) -> None:
        with pytest.raises(RestoolConfigError, match="not found"):
            load_config(config_path=tmp_path / "missing.yaml")

    def test_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = _write_config(tmp_path / "env.yaml", {"color": "never"})
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert load_config(project_root=tmp_path / "elsewhere").color == "never"

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "nope.yaml"))
        with pytest.raises(RestoolConfigError):
            load_config(project_root=tmp_path)

    def test_explicit_path_wins_over_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        env_path = _write_config(tmp_path / "env.yaml", {"series": "E6"})
        explicit = _write_config(tmp_path / "explicit.yaml", {"series": "E48"})
        monkeypatch.setenv(CONFIG_ENV_VAR, str(env_path))
        assert load_config(config_path=explicit).series == "E48"

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "restool.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(project_root=tmp_path) == RestoolConfig()


class TestConfigValues:
    """Test normalization and validation of config values."""

    def test_values_normalized(self, tmp_path: Path) -> None:
        path = tmp_path / "restool.yaml"
        path.write_text("series: e192\nerror_threshold: 0.5%\ncolor: NEVER\noutput: JSON\n", encoding="utf-8")
        config = load_config(project_root=tmp_path)
        assert config.series == "E192"
        assert config.error_threshold == pytest.approx(0.005)
        assert config.color == "never"
        assert config.output == "json"

    def test_numeric_threshold(self, tmp_path: Path) -> None:
        _write_config(tmp_path / "restool.yaml", {"error_threshold": 0.02})
        assert load_config(project_root=tmp_path).error_threshold == 0.02

    @pytest.mark.parametrize(
        ("content", "message"),
        [
            ({"series": "E7"}, "Unknown series"),
            ({"error_threshold": 0.5}, "threshold"),
            ({"error_threshold": "lots"}, "threshold"),
            ({"color": "rainbow"}, "color"),
            ({"output": "yaml"}, "output"),
            ({"seris": "E24"}, "Unknown config keys: seris"),
        ],
    )
    def test_invalid_values(self, tmp_path: Path, content: dict[str, object], message: str) -> None:
        _write_config(tmp_path / "restool.yaml", content)
        with pytest.raises(RestoolConfigError, match=message):
            load_config(project_root=tmp_path)

    def test_non_mapping(self, tmp_path: Path) -> None:
        _write_config(tmp_path / "restool.yaml", ["E24"])
        with pytest.raises(RestoolConfigError, match="mapping"):
            load_config(project_root=tmp_path)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "restool.yaml").write_text("series: [E24\n", encoding="utf-8")
        with pytest.raises(RestoolConfigError, match="Invalid YAML"):
            load_config(project_root=tmp_path)

    def test_config_error_is_value_error(self) -> None:
        assert issubclass(RestoolConfigError, ValueError)
