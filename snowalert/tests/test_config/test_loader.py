"""Tests for config loading, validation, and get/set."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from snowalert.config.defaults import DEFAULT_LOCATION
from snowalert.config.loader import (
    config_hash,
    get_config_value,
    load_config,
    save_config,
    set_config_value,
)
from snowalert.config.schema import AppConfig, NotifierBackend


class TestLoadConfig:
    def test_load_from_yaml(self, config_yaml_path: Path):
        config = load_config(config_yaml_path)
        assert config.forecast.max_retries == 1
        assert config.notifications.backend == NotifierBackend.LOG

    def test_default_location_injected(self, config_yaml_path: Path):
        config = load_config(config_yaml_path)
        assert config.default_location.name == "Sedona, AZ"
        assert config.default_location.latitude == 34.8697

    def test_explicit_location_not_overridden(self, tmp_path: Path):
        data = {"default_location": {"name": "Taos", "latitude": 36.41, "longitude": -105.57}}
        path = tmp_path / "custom.yaml"
        with open(path, "w") as f:
            yaml.dump(data, f)
        config = load_config(path)
        assert config.default_location.name == "Taos"

    def test_empty_yaml_uses_defaults(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        config = load_config(path)
        assert config.ops.check_interval_minutes == 360
        assert config.forecast.forecast_days == 16
        assert config.default_location == DEFAULT_LOCATION

    def test_fixtures_config(self, fixtures_dir: Path):
        config = load_config(fixtures_dir / "config_default.yaml")
        assert config.forecast.max_retries == 2

    def test_unknown_key_rejected(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("ops:\n  poll_everything: true\n")
        with pytest.raises(ValidationError):
            load_config(path)

    def test_out_of_range_latitude_rejected(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("default_location:\n  name: Nowhere\n  latitude: 95\n  longitude: 0\n")
        with pytest.raises(ValidationError):
            load_config(path)


class TestConfigHash:
    def test_deterministic(self):
        c1 = AppConfig(default_location=DEFAULT_LOCATION)
        c2 = AppConfig(default_location=DEFAULT_LOCATION)
        assert config_hash(c1) == config_hash(c2)

    def test_different_config_different_hash(self):
        c1 = AppConfig(default_location=DEFAULT_LOCATION)
        c2 = AppConfig()
        assert config_hash(c1) != config_hash(c2)


class TestGetConfigValue:
    def test_dotted_key(self, default_config: AppConfig):
        assert get_config_value(default_config, "ops.check_interval_minutes") == 360

    def test_top_level(self, default_config: AppConfig):
        val = get_config_value(default_config, "notifications")
        assert val.backend == NotifierBackend.LOG

    def test_invalid_key(self, default_config: AppConfig):
        with pytest.raises((KeyError, AttributeError)):
            get_config_value(default_config, "nonexistent.key")


class TestSetConfigValue:
    def test_set_and_revalidate(self, default_config: AppConfig):
        new_config = set_config_value(default_config, "ops.check_interval_minutes", 60)
        assert new_config.ops.check_interval_minutes == 60
        assert default_config.ops.check_interval_minutes == 360

    def test_int_coercion(self, default_config: AppConfig):
        new_config = set_config_value(default_config, "forecast.forecast_days", "10")
        assert new_config.forecast.forecast_days == 10

    def test_bool_coercion(self, default_config: AppConfig):
        new_config = set_config_value(default_config, "notifications.enabled", "false")
        assert new_config.notifications.enabled is False

    def test_float_coercion(self, default_config: AppConfig):
        new_config = set_config_value(default_config, "default_location.latitude", "35.2")
        assert new_config.default_location.latitude == 35.2

    def test_enum_value(self, default_config: AppConfig):
        new_config = set_config_value(default_config, "notifications.backend", "webhook")
        assert new_config.notifications.backend == NotifierBackend.WEBHOOK

    def test_invalid_value_raises(self, default_config: AppConfig):
        with pytest.raises(ValidationError):
            set_config_value(default_config, "forecast.forecast_days", 30)


class TestSaveConfig:
    def test_round_trips_through_yaml(self, default_config: AppConfig, tmp_path: Path):
        path = tmp_path / "saved.yaml"
        changed = set_config_value(default_config, "ops.request_delay_ms", 250)

        save_config(changed, path)

        assert load_config(path) == changed
