"""Layered configuration for a workspace.

Later layers win, key by key:

    built-in defaults
    ~/.config/bcrange/config.yaml
    <workspace>/.bcrange/config.yaml
    BCRANGE__SECTION__KEY environment variables
    keyword arguments to load_config()
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from bcrange.config.models import (
    AnalysisConfig,
    BcRangeConfig,
    LoggingConfig,
    ScanConfig,
)
from bcrange.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/bcrange/config.yaml").expanduser()
REPO_CONFIG_DIR = ".bcrange"
REPO_CONFIG_NAME = "config.yaml"


def config_files(workspace_root: Path) -> list[Path]:
    """YAML files consulted for a workspace, lowest precedence first."""
    return [GLOBAL_CONFIG_PATH, workspace_root / REPO_CONFIG_DIR / REPO_CONFIG_NAME]


def read_config_file(path: Path) -> dict[str, Any]:
    """Parse one YAML layer. A missing or empty file is an empty layer."""
    if not path.is_file():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "expected a mapping of sections")
    return data


def merge_layers(*layers: dict[str, Any]) -> dict[str, Any]:
    """Merge mappings left to right; nested sections merge instead of replacing."""
    merged: dict[str, Any] = {}
    for layer in layers:
        for key, value in layer.items():
            current = merged.get(key)
            if isinstance(current, dict) and isinstance(value, dict):
                merged[key] = merge_layers(current, value)
            else:
                merged[key] = value
    return merged


class _YamlLayers(PydanticBaseSettingsSource):
    """Feeds already-merged YAML sections to pydantic-settings."""

    def __init__(self, settings_cls: type[BaseSettings], sections: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._sections = sections

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        value = self._sections.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        return self._sections


def _settings_for(sections: dict[str, Any]) -> type[BaseSettings]:
    # A fresh class per load keeps the YAML layers out of shared class state
    class WorkspaceSettings(BaseSettings):
        model_config = SettingsConfigDict(
            env_prefix="BCRANGE__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        scan: ScanConfig = ScanConfig()
        analysis: AnalysisConfig = AnalysisConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            return (init_settings, env_settings, _YamlLayers(settings_cls, sections))

    return WorkspaceSettings


def _invalid_value(exc: ValidationError) -> ConfigError:
    first = exc.errors()[0]
    setting = ".".join(str(part) for part in first["loc"])
    return ConfigError.invalid_value(setting, first.get("input"), first["msg"])


def load_config(workspace_root: Path | None = None, **kwargs: Any) -> BcRangeConfig:
    """Resolve the configuration for a workspace.

    Args:
        workspace_root: Directory holding ``.bcrange/config.yaml``. Defaults
            to the current directory.
        **kwargs: Section overrides, e.g. ``analysis=AnalysisConfig(...)``.

    Raises:
        ConfigError: A YAML file is malformed or a value fails validation.
    """
    layers = [read_config_file(path) for path in config_files(workspace_root or Path.cwd())]
    settings_cls = _settings_for(merge_layers(*layers))
    try:
        settings = settings_cls(**kwargs)
    except ValidationError as e:
        raise _invalid_value(e) from e
    return BcRangeConfig.model_validate(settings.model_dump())
