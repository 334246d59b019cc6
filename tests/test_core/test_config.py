"""Tests for configuration models."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from pondsim.core.config import (
    OutputConfig,
    PondConfig,
    SimulationConfig,
    WeatherConfig,
    load_config,
    save_config,
    validate_config,
)


class TestPondConfig:
    """Tests for PondConfig."""

    def test_defaults(self) -> None:
        """Defaults describe the reference Spirulina raceway."""
        config = PondConfig()
        assert config.area_ha == 0.425
        assert config.depth == 0.2
        assert config.initial_density == 0.3
        assert config.harvest_mode == "none"
        assert config.light_model == "steele"
        assert config.temperature_model == "gaussian"

    def test_to_geometry(self) -> None:
        """Geometry is derived from the design targets."""
        geom = PondConfig().to_geometry()
        assert geom.width == pytest.approx(17.0)
        assert geom.total_length == pytest.approx(250.0)

    def test_frozen(self) -> None:
        """Config is immutable."""
        config = PondConfig()
        with pytest.raises(ValidationError):
            config.depth = 0.3  # type: ignore[misc]

    def test_non_positive_depth(self) -> None:
        """Depth must be positive."""
        with pytest.raises(ValidationError):
            PondConfig(depth=0.0)

    def test_initial_density_floor(self) -> None:
        """Initial density cannot go below the biomass floor."""
        with pytest.raises(ValidationError):
            PondConfig(initial_density=0.001)

    def test_initial_temperature_optional(self) -> None:
        """None means start from the first-hour air temperature."""
        assert PondConfig(initial_temperature=None).initial_temperature is None

    def test_unknown_harvest_mode(self) -> None:
        """Only known harvest modes are accepted."""
        with pytest.raises(ValidationError):
            PondConfig(harvest_mode="continuous")  # type: ignore[arg-type]

    def test_unknown_light_model(self) -> None:
        """Light model must be registered."""
        with pytest.raises(ValidationError, match="Unknown light model"):
            PondConfig(light_model="monod")

    def test_unknown_temperature_model(self) -> None:
        """Temperature model must be registered."""
        with pytest.raises(ValidationError, match="Unknown temperature model"):
            PondConfig(temperature_model="arrhenius")

    def test_berm_too_wide(self) -> None:
        """A berm wider than the channel leaves no culture surface."""
        with pytest.raises(ValidationError, match="no culture surface"):
            PondConfig(area_ha=0.01, aspect_ratio=20.0, berm_width=5.0)

    def test_batch_target_below_threshold(self) -> None:
        """Batch harvest must dilute below its trigger."""
        with pytest.raises(ValidationError, match="must be below"):
            PondConfig(
                harvest_mode="batch", harvest_threshold=1.0, harvest_target=1.0
            )

    def test_semi_continuous_allows_any_target(self) -> None:
        """Target ordering is only enforced for batch mode."""
        config = PondConfig(
            harvest_mode="semi-continuous", harvest_threshold=1.0, harvest_target=1.5
        )
        assert config.harvest_target == 1.5


class TestWeatherConfig:
    """Tests for WeatherConfig."""

    def test_defaults(self) -> None:
        """Default is a synthetic Phoenix summer."""
        config = WeatherConfig()
        assert config.source == "synthetic"
        assert config.latitude == 33.45
        assert config.start_date == date(2024, 6, 15)
        assert config.rain_hour is None

    def test_file_source_requires_file(self) -> None:
        """File source without a path is rejected."""
        with pytest.raises(ValidationError, match="requires 'file'"):
            WeatherConfig(source="file")

    def test_invalid_latitude(self) -> None:
        """Latitude is bounded."""
        with pytest.raises(ValidationError):
            WeatherConfig(latitude=95.0)

    def test_rain_hour_bounds(self) -> None:
        """Rain hour must be a valid hour."""
        assert WeatherConfig(rain_hour=16).rain_hour == 16
        with pytest.raises(ValidationError):
            WeatherConfig(rain_hour=24)

    def test_cloud_cover_percent(self) -> None:
        """Cloud cover is a percentage."""
        with pytest.raises(ValidationError):
            WeatherConfig(cloud_cover=150.0)

    def test_to_synthetic(self) -> None:
        """Synthetic parameters carry over."""
        config = WeatherConfig(days=3, temp_mean=20.0, rain_hour=5, rain_mm=2.0)
        synthetic = config.to_synthetic()

        assert synthetic.days == 3
        assert synthetic.temp_mean == 20.0
        assert synthetic.rain_hour == 5
        assert synthetic.rain_mm == 2.0
        assert synthetic.latitude == config.latitude


class TestSimulationConfig:
    """Tests for SimulationConfig."""

    def test_defaults(self) -> None:
        """Top-level defaults."""
        config = SimulationConfig()
        assert config.total_days == 14
        assert config.start_hour == 7
        assert not config.output.csv.enabled
        assert not config.output.json_.enabled

    def test_extra_fields_forbidden(self) -> None:
        """Unknown top-level keys are rejected."""
        with pytest.raises(ValidationError):
            SimulationConfig.model_validate({"reactor": {}})

    def test_start_hour_bounds(self) -> None:
        """Start hour must be 0-23."""
        with pytest.raises(ValidationError):
            SimulationConfig(start_hour=24)

    def test_output_json_alias(self) -> None:
        """JSON output is configured under the 'json' key."""
        output = OutputConfig.model_validate(
            {"json": {"enabled": True, "path": "out/r.json"}}
        )
        assert output.json_.enabled
        assert output.json_.path == "out/r.json"

    def test_validate_config_nested(self) -> None:
        """Nested dictionaries validate into models."""
        config = validate_config(
            {
                "name": "Test",
                "total_days": 3,
                "pond": {"harvest_mode": "batch", "harvest_threshold": 1.2},
                "weather": {"days": 3},
            }
        )
        assert config.name == "Test"
        assert config.pond.harvest_mode == "batch"
        assert config.weather.days == 3

    def test_validate_config_invalid(self) -> None:
        """Invalid nested values raise."""
        with pytest.raises(ValidationError):
            validate_config({"pond": {"depth": -1}})


class TestConfigFiles:
    """Tests for loading and saving configuration files."""

    def test_load_yaml(self, tmp_path: Path) -> None:
        """Load YAML configuration."""
        path = tmp_path / "config.yaml"
        path.write_text(
            "name: Yaml Pond\n"
            "total_days: 5\n"
            "pond:\n"
            "  depth: 0.25\n"
            "weather:\n"
            "  start_date: '2024-07-01'\n"
        )
        config = load_config(path)

        assert config.name == "Yaml Pond"
        assert config.total_days == 5
        assert config.pond.depth == 0.25
        assert config.weather.start_date == date(2024, 7, 1)

    def test_load_yml_extension(self, tmp_path: Path) -> None:
        """.yml is treated as YAML."""
        path = tmp_path / "config.yml"
        path.write_text("total_days: 2\n")
        assert load_config(path).total_days == 2

    def test_load_json(self, tmp_path: Path) -> None:
        """Load JSON configuration."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"name": "Json Pond", "start_hour": 0}))
        config = load_config(path)

        assert config.name == "Json Pond"
        assert config.start_hour == 0

    def test_load_empty_yaml(self, tmp_path: Path) -> None:
        """An empty file gives defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == SimulationConfig()

    def test_load_missing(self, tmp_path: Path) -> None:
        """Missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_save_yaml_round_trip(self, tmp_path: Path) -> None:
        """Saved YAML loads back to an equal config."""
        config = SimulationConfig(
            name="Round Trip",
            pond=PondConfig(harvest_mode="semi-continuous", initial_temperature=None),
            weather=WeatherConfig(rain_hour=16, rain_mm=4.0),
        )
        path = tmp_path / "nested" / "config.yaml"
        save_config(config, path)

        assert path.exists()
        assert load_config(path) == config

    def test_save_uses_json_alias(self, tmp_path: Path) -> None:
        """Output section is written under the 'json' key."""
        path = tmp_path / "config.yaml"
        save_config(SimulationConfig(), path)

        data = yaml.safe_load(path.read_text())
        assert "json" in data["output"]
        assert "json_" not in data["output"]

    def test_save_json(self, tmp_path: Path) -> None:
        """Save as JSON."""
        path = tmp_path / "config.json"
        save_config(SimulationConfig(total_days=4), path)

        data = json.loads(path.read_text())
        assert data["total_days"] == 4
        assert data["weather"]["start_date"] == "2024-06-15"
