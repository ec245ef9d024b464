from __future__ import annotations

import re
from datetime import time
from functools import lru_cache
from pathlib import Path
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .domain.models import DEFAULT_EVENT_COLORS

PROJECT_ROOT = Path(__file__).resolve().parents[2]

_HEX_COLOR = re.compile(r"^#[0-9A-F]{6}$")


class UiSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str = "My Calendar"

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("ui.title must not be empty")
        return text


class EventDefaultsSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    colors: list[str] = Field(default_factory=lambda: list(DEFAULT_EVENT_COLORS))
    default_start_time: time = time(9, 0)
    default_end_time: time = time(10, 0)

    @field_validator("colors")
    @classmethod
    def validate_colors(cls, values: list[str]) -> list[str]:
        normalized: list[str] = []
        for raw_color in values:
            if not isinstance(raw_color, str):
                raise ValueError("events.colors entries must be strings")
            color = raw_color.strip().upper()
            if not color.startswith("#"):
                color = f"#{color}"
            if not _HEX_COLOR.match(color):
                raise ValueError(f"events.colors entry is not a #RRGGBB color: {raw_color}")
            normalized.append(color)

        deduplicated = list(dict.fromkeys(normalized))
        if not deduplicated:
            raise ValueError("events.colors must contain at least one color")
        return deduplicated

    @model_validator(mode="after")
    def validate_default_times(self) -> EventDefaultsSettings:
        if self.default_end_time <= self.default_start_time:
            raise ValueError("events.default_end_time must be after events.default_start_time")
        return self

    @property
    def default_color(self) -> str:
        return self.colors[0]


class ConflictSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    horizon_days: int = Field(default=0, ge=0, le=366)


class BackupSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    enabled: bool = True
    interval_hours: int = Field(default=24, ge=1, le=24 * 7)
    folder: Path = Path("data/backups")
    keep: int = Field(default=7, ge=1, le=365)

    @field_validator("folder")
    @classmethod
    def validate_folder(cls, value: Path) -> Path:
        text = str(value).strip()
        if not text:
            raise ValueError("backup.folder must not be empty")
        return Path(text)


class PlannerYamlSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    ui: UiSettings = Field(default_factory=UiSettings)
    events: EventDefaultsSettings = Field(default_factory=EventDefaultsSettings)
    conflicts: ConflictSettings = Field(default_factory=ConflictSettings)
    backup: BackupSettings = Field(default_factory=BackupSettings)


class EnvSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    planner_env: Literal["dev", "test", "prod"] = "dev"
    planner_timezone: str = "Europe/Berlin"
    planner_config_path: Path = Path("config/planner.yaml")
    planner_db_path: Path = Path("data/planner.db")

    @field_validator("planner_timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except ZoneInfoNotFoundError as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value


class AppSettings(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    env: EnvSettings
    yaml: PlannerYamlSettings
    project_root: Path
    config_path: Path
    db_path: Path
    backup_path: Path
    timezone: ZoneInfo


def _resolve_project_path(path: Path, root: Path = PROJECT_ROOT) -> Path:
    if path.is_absolute():
        return path
    return (root / path).resolve()


def _load_yaml_settings(path: Path) -> PlannerYamlSettings:
    if not path.exists():
        raise FileNotFoundError(f"Planner config file not found: {path}")

    raw_config = yaml.safe_load(path.read_text(encoding="utf-8"))
    if raw_config is None:
        raw_config = {}
    if not isinstance(raw_config, dict):
        raise ValueError("Planner config must be a YAML mapping/object at the top level")
    return PlannerYamlSettings.model_validate(raw_config)


def build_settings(
    env: EnvSettings,
    yaml_settings: PlannerYamlSettings,
    *,
    project_root: Path = PROJECT_ROOT,
) -> AppSettings:
    return AppSettings(
        env=env,
        yaml=yaml_settings,
        project_root=project_root,
        config_path=_resolve_project_path(env.planner_config_path, project_root),
        db_path=_resolve_project_path(env.planner_db_path, project_root),
        backup_path=_resolve_project_path(yaml_settings.backup.folder, project_root),
        timezone=ZoneInfo(env.planner_timezone),
    )


@lru_cache(maxsize=1)
def load_settings() -> AppSettings:
    env = EnvSettings()
    config_path = _resolve_project_path(env.planner_config_path)
    yaml_settings = _load_yaml_settings(config_path)
    return build_settings(env, yaml_settings)
