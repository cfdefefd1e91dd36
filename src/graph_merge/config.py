"""Configuration management for graph-merge using pydantic-settings.

Settings priority (highest to lowest):
1. CLI flags (applied after MergeConfig creation)
2. Environment variables (GRAPH_MERGE_* prefix)
3. .env file
4. graph-merge.yaml project config
5. Default values
"""

import logging
from pathlib import Path

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

logger = logging.getLogger(__name__)

PROJECT_FILE = "graph-merge.yaml"

# Map graph-merge.yaml keys to MergeConfig field names
_YAML_TO_FIELD = {
    "graph": "graph_config",
    "rules": "rules_path",
    "workers": "workers",
}


class _ProjectYamlSource(PydanticBaseSettingsSource):
    """Read project config from graph-merge.yaml (lower priority than env vars)."""

    def get_field_value(self, field, field_name):  # type: ignore[override]
        return None, field_name, False

    def __call__(self) -> dict:
        project_file = Path(PROJECT_FILE)
        if not project_file.exists():
            return {}

        raw = yaml.safe_load(project_file.read_text()) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"{PROJECT_FILE} must contain a mapping of settings")

        result: dict = {}
        for yaml_key, field_name in _YAML_TO_FIELD.items():
            if yaml_key in raw:
                result[field_name] = raw[yaml_key]
        return result


class MergeConfig(BaseSettings):
    """Configuration settings for graph-merge.

    All environment variables are prefixed with GRAPH_MERGE_
    (e.g. GRAPH_MERGE_WORKERS=4). Empty values are treated as unset.

    Example:
        >>> config = MergeConfig()
        >>> print(config.workers)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GRAPH_MERGE_",
        extra="ignore",
        env_ignore_empty=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            _ProjectYamlSource(settings_cls),
            file_secret_settings,
        )

    graph_config: Path | None = Field(
        default=None,
        description="Graph connection configuration file (YAML)"
    )

    rules_path: Path | None = Field(
        default=None,
        description="YAML file of merge rules (registered rules are used if not set)"
    )

    workers: int = Field(
        default=1,
        ge=1,
        description="Threads used to compute grouping keys"
    )
