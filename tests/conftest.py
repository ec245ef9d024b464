"""Shared fixtures: isolated settings on a temporary SQLite database."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from planner.main import create_app
from planner.settings import (
    AppSettings,
    BackupSettings,
    EnvSettings,
    PlannerYamlSettings,
    build_settings,
)


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> AppSettings:
    monkeypatch.chdir(tmp_path)
    env = EnvSettings(
        planner_env="test",
        planner_timezone="UTC",
        planner_config_path=tmp_path / "planner.yaml",
        planner_db_path=tmp_path / "planner.db",
    )
    yaml_settings = PlannerYamlSettings(
        backup=BackupSettings(enabled=False, folder=tmp_path / "backups"),
    )
    return build_settings(env, yaml_settings, project_root=tmp_path)


@pytest.fixture
def client(settings: AppSettings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client
