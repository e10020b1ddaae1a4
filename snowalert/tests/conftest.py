"""Shared test fixtures."""

import json
import sqlite3
from datetime import date
from pathlib import Path

import pytest
import yaml

from snowalert.config.defaults import DEFAULT_LOCATION
from snowalert.config.schema import AppConfig
from snowalert.storage.database import connect, run_migrations
from snowalert.storage.state_store import StateStore

FIXTURE_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def db(tmp_path: Path) -> sqlite3.Connection:
    """Migrated temporary SQLite database."""
    conn = connect(tmp_path / "test.db")
    run_migrations(conn)
    yield conn
    conn.close()


@pytest.fixture
def store(db: sqlite3.Connection) -> StateStore:
    return StateStore(db)


@pytest.fixture
def default_config() -> AppConfig:
    return AppConfig(default_location=DEFAULT_LOCATION)


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "forecast": {"max_retries": 1},
        "notifications": {"backend": "log"},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURE_DIR


@pytest.fixture
def sedona_raw() -> dict:
    """16-day Open-Meteo payload starting 2026-03-01."""
    with open(FIXTURE_DIR / "openmeteo_daily_sedona.json") as f:
        return json.load(f)


@pytest.fixture
def short_raw() -> dict:
    """Only 4 days of data."""
    with open(FIXTURE_DIR / "openmeteo_daily_short.json") as f:
        return json.load(f)


class FakeClock:
    def __init__(self, today: date):
        self.today = today

    def __call__(self) -> date:
        return self.today


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(date(2026, 3, 1))
