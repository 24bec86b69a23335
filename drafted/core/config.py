"""Configuration models and YAML loader for the candidate dashboard."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator


class DatabaseConfig(BaseModel):
    """Database configuration."""

    path: str = "data/candidates.db"


class SourceConfig(BaseModel):
    """Candidate source fetch limits and cache lifetime."""

    fetch_limit: int = Field(default=2000, ge=1)
    refresh_limit: int = Field(default=10000, ge=1)
    cache_ttl_seconds: float = Field(default=300.0, ge=0.0)


class DashboardConfig(BaseModel):
    """Paging, debounce and filter-option settings for the dashboard view."""

    page_size: int = Field(default=20, ge=1)
    search_debounce_ms: int = Field(default=300, ge=0)
    university_option_limit: int = Field(default=50, ge=1)
    major_option_limit: int = Field(default=30, ge=1)
    first_graduation_year: int = 2024
    last_graduation_year: int = 2029

    @model_validator(mode="after")
    def year_range_ordered(self) -> "DashboardConfig":
        if self.last_graduation_year < self.first_graduation_year:
            msg = "last_graduation_year must not be before first_graduation_year"
            raise ValueError(msg)
        return self

    @property
    def graduation_years(self) -> list[str]:
        return [
            str(year)
            for year in range(self.first_graduation_year, self.last_graduation_year + 1)
        ]


class ExportConfig(BaseModel):
    """Where CSV exports are written and how they are named."""

    output_dir: str = "exports"
    filename_prefix: str = "drafted-candidates"


class Settings(BaseModel):
    """Top-level settings loaded from YAML."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    source: SourceConfig = Field(default_factory=SourceConfig)
    dashboard: DashboardConfig = Field(default_factory=DashboardConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)
