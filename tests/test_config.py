"""Tests for MilightConfig loading and saving."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from milight.exceptions import ConfigFileInvalidError, ConfigValidationError
from milight.models import MilightConfig


class TestMilightConfig:
    """Test defaults and validation."""

    @pytest.mark.unit
    def test_defaults(self):
        """Test the default settings."""
        config = MilightConfig()
        assert config.port == 8899
        assert config.min_packet_delay == 0.1
        assert config.timer_cadence == 5.0
        assert config.history_size == 100
        assert config.debounce_window == pytest.approx(0.3)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "field,value",
        [("port", 0), ("port", 65536), ("min_packet_delay", 0), ("history_size", 0), ("host", "")],
    )
    def test_invalid_values(self, field, value):
        """Test out of range settings are rejected."""
        with pytest.raises(ValidationError):
            MilightConfig(**{field: value})


class TestConfigFile:
    """Test reading and writing the JSON file."""

    @pytest.mark.unit
    def test_missing_file_gives_defaults(self, tmp_path: Path):
        """Test a missing file is not an error."""
        config = MilightConfig.load_or_default(tmp_path / "missing.json")
        assert config == MilightConfig()

    @pytest.mark.unit
    def test_save_and_load(self, tmp_path: Path):
        """Test saved settings load back."""
        path = tmp_path / "nested" / "config.json"
        MilightConfig(host="192.168.0.20", history_size=10).save(path)

        loaded = MilightConfig.load_or_default(path)

        assert loaded.host == "192.168.0.20"
        assert loaded.history_size == 10

    @pytest.mark.unit
    def test_partial_file_uses_defaults(self, tmp_path: Path):
        """Test missing keys fall back to defaults."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"host": "10.0.0.5"}))

        config = MilightConfig.load_or_default(path)

        assert config.host == "10.0.0.5"
        assert config.port == 8899

    @pytest.mark.unit
    def test_invalid_json(self, tmp_path: Path):
        """Test broken JSON raises ConfigFileInvalidError."""
        path = tmp_path / "config.json"
        path.write_text("{ host: ")

        with pytest.raises(ConfigFileInvalidError):
            MilightConfig.load_or_default(path)

    @pytest.mark.unit
    def test_empty_file(self, tmp_path: Path):
        """Test an empty file raises ConfigFileInvalidError."""
        path = tmp_path / "config.json"
        path.write_text("   ")

        with pytest.raises(ConfigFileInvalidError):
            MilightConfig.load_or_default(path)

    @pytest.mark.unit
    def test_invalid_value_in_file(self, tmp_path: Path):
        """Test a bad value names the offending field."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"port": 70000}))

        with pytest.raises(ConfigValidationError) as exc_info:
            MilightConfig.load_or_default(path)

        assert exc_info.value.field == "port"
        assert exc_info.value.file_path == str(path)
        assert "8899" in exc_info.value.recovery_hint
