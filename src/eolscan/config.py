"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (EOLSCAN__ANALYSIS__EOL_THRESHOLD_DAYS=30)
  2. eolscan.yaml           (searched in cwd, then platform config dir)
  3. Hardcoded defaults

The config file is optional: every field has a default.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_API_URL = "https://endoflife.date/api/v1"


def _find_config_file() -> str | None:
    """Return the path of the first eolscan.yaml found, or None."""
    candidates = [
        Path("eolscan.yaml"),
        Path(platformdirs.user_config_dir("eolscan")) / "eolscan.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class ApiSettings(BaseModel):
    base_url: str = DEFAULT_API_URL
    cache_ttl_seconds: int = Field(default=3600, gt=0)
    timeout_seconds: float = Field(default=30.0, gt=0)
    user_agent: str = "eolscan/1.0"


class AnalysisSettings(BaseModel):
    """Thresholds, filters and pipeline knobs consumed by the analyzer."""

    eol_threshold_days: int = Field(default=90, gt=0)
    staleness_threshold_days: int = Field(default=365, gt=0)
    include_discontinued: bool = False
    min_release_date: date | None = None
    max_release_date: date | None = None
    max_versions: int | None = Field(default=None, gt=0)
    version_sort_order: Literal["newest-first", "oldest-first"] = "newest-first"
    concurrency: int = Field(default=5, gt=0)
    semantic_fallback: bool = True

    output_matrix: bool = False
    exclude_eol_from_matrix: bool = False
    exclude_approaching_eol_from_matrix: bool = False

    fail_on_eol: bool = False
    fail_on_approaching_eol: bool = False
    fail_on_stale: bool = False

    @model_validator(mode="after")
    def check_date_range(self) -> AnalysisSettings:
        if (
            self.min_release_date is not None
            and self.max_release_date is not None
            and self.min_release_date > self.max_release_date
        ):
            raise ValueError("min_release_date must not be after max_release_date")
        return self


class ProductSettings(BaseModel):
    # ["all"] expands to every product in the catalog
    names: list[str] = []
    releases: dict[str, list[str]] = {}
    filter_by_category: str | None = None
    filter_by_tag: str | None = None


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: EOLSCAN__API__BASE_URL=...
        env_prefix="EOLSCAN__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    api: ApiSettings = ApiSettings()
    analysis: AnalysisSettings = AnalysisSettings()
    products: ProductSettings = ProductSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
