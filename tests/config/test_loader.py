"""Tests for config/loader.py module.

Covers:
- config_files()
- read_config_file()
- merge_layers()
- load_config() precedence and error mapping
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from bcrange.config.loader import config_files, load_config, merge_layers, read_config_file
from bcrange.config.models import AnalysisConfig
from bcrange.core.errors import ConfigError, ErrorCode


@pytest.fixture
def no_global_config(tmp_path: Path):
    with patch("bcrange.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
        yield


def _write_repo_config(root: Path, text: str) -> None:
    config_dir = root / ".bcrange"
    config_dir.mkdir(exist_ok=True)
    (config_dir / "config.yaml").write_text(text)


class TestReadConfigFile:
    """Tests for read_config_file."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        """Returns empty dict when file doesn't exist."""
        assert read_config_file(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        """Loads valid YAML content."""
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("analysis:\n  shared_range_mode: true\n")
        assert read_config_file(yaml_file) == {"analysis": {"shared_range_mode": True}}

    def test_returns_empty_for_empty_file(self, tmp_path: Path) -> None:
        """Returns empty dict for empty file."""
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")
        assert read_config_file(yaml_file) == {}

    def test_raises_config_error_for_invalid_yaml(self, tmp_path: Path) -> None:
        """Raises ConfigError for invalid YAML syntax."""
        yaml_file = tmp_path / "invalid.yaml"
        yaml_file.write_text("scan:\n  exclude_folders: [unclosed")
        with pytest.raises(ConfigError) as exc_info:
            read_config_file(yaml_file)
        assert exc_info.value.code == ErrorCode.CONFIG_PARSE_ERROR

    def test_raises_config_error_for_non_mapping(self, tmp_path: Path) -> None:
        """A top-level list is rejected."""
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            read_config_file(yaml_file)


class TestMergeLayers:
    """Tests for merge_layers."""

    def test_override_wins(self) -> None:
        """Override values replace base values."""
        assert merge_layers({"a": 1, "b": 2}, {"b": 3}) == {"a": 1, "b": 3}

    def test_nested_dicts_merged(self) -> None:
        """Nested dicts are merged recursively."""
        base = {"scan": {"max_workers": 2, "encoding": "utf-8"}}
        override = {"scan": {"max_workers": 4}}
        assert merge_layers(base, override) == {"scan": {"max_workers": 4, "encoding": "utf-8"}}

    def test_does_not_mutate_base(self) -> None:
        """The base dict is left untouched."""
        base = {"a": {"b": 1}}
        merge_layers(base, {"a": {"b": 2}})
        assert base == {"a": {"b": 1}}

    def test_many_layers(self) -> None:
        """The last layer wins; no layers is an empty mapping."""
        assert merge_layers({"a": 1}, {"a": 2}, {"a": 3}) == {"a": 3}
        assert merge_layers() == {}


class TestConfigFiles:
    """Tests for config_files."""

    def test_global_then_repo(self, tmp_path: Path) -> None:
        """The repo file comes last so it wins."""
        with patch("bcrange.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "g.yaml"):
            assert config_files(tmp_path / "ws") == [
                tmp_path / "g.yaml",
                tmp_path / "ws" / ".bcrange" / "config.yaml",
            ]


@pytest.mark.usefixtures("no_global_config")
class TestLoadConfig:
    """Tests for load_config function."""

    def test_defaults(self, tmp_path: Path) -> None:
        """Returns defaults when no config files exist."""
        config = load_config(tmp_path)
        assert config.logging.level == "WARNING"
        assert config.scan.manifest_name == "app.json"
        assert config.scan.max_workers == 8
        assert config.analysis.shared_range_mode is False

    def test_loads_repo_config(self, tmp_path: Path) -> None:
        """Loads config from the repo .bcrange directory."""
        _write_repo_config(
            tmp_path, "analysis:\n  shared_range_mode: true\nscan:\n  exclude_folders: [Legacy]\n"
        )
        config = load_config(tmp_path)
        assert config.analysis.shared_range_mode is True
        assert config.scan.exclude_folders == ["Legacy"]

    def test_repo_overrides_global(self, tmp_path: Path) -> None:
        """Repo YAML wins over global YAML, key by key."""
        global_file = tmp_path / "global.yaml"
        global_file.write_text("scan:\n  max_workers: 2\n  encoding: latin-1\n")
        _write_repo_config(tmp_path, "scan:\n  max_workers: 4\n")
        with patch("bcrange.config.loader.GLOBAL_CONFIG_PATH", global_file):
            config = load_config(tmp_path)
        assert config.scan.max_workers == 4
        assert config.scan.encoding == "latin-1"

    def test_env_vars_override_yaml(self, tmp_path: Path) -> None:
        """Environment variables override YAML config."""
        _write_repo_config(tmp_path, "analysis:\n  shared_range_mode: false\n")
        with patch.dict(os.environ, {"BCRANGE__ANALYSIS__SHARED_RANGE_MODE": "true"}):
            config = load_config(tmp_path)
        assert config.analysis.shared_range_mode is True

    def test_kwargs_override_all(self, tmp_path: Path) -> None:
        """Keyword arguments override everything."""
        _write_repo_config(tmp_path, "analysis:\n  shared_range_mode: false\n")
        config = load_config(tmp_path, analysis=AnalysisConfig(shared_range_mode=True))
        assert config.analysis.shared_range_mode is True

    def test_invalid_value_raises_config_error(self, tmp_path: Path) -> None:
        """Validation failures become ConfigError."""
        _write_repo_config(tmp_path, "scan:\n  max_workers: 0\n")
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path)
        assert exc_info.value.code == ErrorCode.CONFIG_INVALID_VALUE
        assert "max_workers" in exc_info.value.details["setting"]

    def test_unknown_encoding_raises_config_error(self, tmp_path: Path) -> None:
        """A bad codec name fails at load time, before any file is read."""
        _write_repo_config(tmp_path, "scan:\n  encoding: no-such-codec\n")
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path)
        assert exc_info.value.details["setting"].endswith("encoding")
