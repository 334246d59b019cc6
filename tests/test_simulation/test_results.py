"""Tests for result summaries and export."""

from __future__ import annotations

import csv
import json
from pathlib import Path

import numpy as np
import pytest

from pondsim.core.config import PondConfig, SimulationConfig
from pondsim.core.state import SimulationResult, TimestepRecord
from pondsim.simulation.engine import run_simulation
from pondsim.simulation.results import (
    config_header_lines,
    result_to_dict,
    summarize_timesteps,
    timestep_arrays,
    timesteps_to_csv,
    write_json,
)
from pondsim.simulation.weather import WeatherDay


@pytest.fixture
def harvest_result(sunny_days: list[WeatherDay]) -> SimulationResult:
    """Three sunny days with a low semi-continuous threshold."""
    config = PondConfig(harvest_mode="semi-continuous", harvest_threshold=0.35)
    return run_simulation(sunny_days, config, total_days=3)


class TestTimestepArrays:
    """Tests for column arrays."""

    def test_columns_and_dtypes(self, harvest_result: SimulationResult) -> None:
        """One array per field with integer and boolean columns preserved."""
        cols = timestep_arrays(harvest_result.timesteps)

        assert list(cols) == TimestepRecord.field_names()
        assert cols["hour"].dtype == np.int64
        assert cols["harvest_occurred"].dtype == bool
        assert cols["q_net"].dtype == np.float64
        assert cols["q_net"].shape == (72,)
        assert cols["weather_date"][0] == "2024-06-15"

    def test_empty(self) -> None:
        """No records give empty arrays."""
        cols = timestep_arrays([])
        assert cols["biomass_concentration"].size == 0


class TestSummarize:
    """Tests for summary statistics."""

    def test_empty_records(self) -> None:
        """No records give a zero summary."""
        summary = summarize_timesteps([], total_days=1)
        assert summary.harvest_count == 0
        assert summary.avg_temperature == 0.0

    def test_matches_records(self, harvest_result: SimulationResult) -> None:
        """Summary values agree with the records."""
        records = harvest_result.timesteps
        summary = harvest_result.summary
        temps = [r.pond_temperature for r in records]

        assert summary.total_days == 3
        assert summary.min_temperature == pytest.approx(min(temps))
        assert summary.max_temperature == pytest.approx(max(temps))
        assert summary.avg_temperature == pytest.approx(sum(temps) / len(temps))
        assert summary.total_harvested_kg == pytest.approx(
            sum(r.harvest_mass_kg for r in records)
        )
        assert summary.final_density == pytest.approx(
            records[-1].biomass_concentration
        )
        assert summary.peak_density == pytest.approx(
            max(r.biomass_concentration for r in records)
        )
        assert summary.total_evaporation_l == pytest.approx(
            sum(r.evap_l for r in records)
        )

    def test_productivity_over_productive_hours(
        self, harvest_result: SimulationResult
    ) -> None:
        """Averages exclude hours without growth."""
        productive = [
            r.productivity_areal
            for r in harvest_result.timesteps
            if r.productivity_areal > 0
        ]
        assert harvest_result.summary.avg_productivity_areal == pytest.approx(
            sum(productive) / len(productive)
        )

    def test_harvest_count_from_records(
        self, harvest_result: SimulationResult
    ) -> None:
        """Counting harvest starts in the records matches the engine count."""
        recount = summarize_timesteps(harvest_result.timesteps, total_days=3)
        assert harvest_result.summary.harvest_count > 0
        assert recount.harvest_count == harvest_result.summary.harvest_count


class TestExport:
    """Tests for CSV and JSON output."""

    def test_csv(self, tmp_path: Path, harvest_result: SimulationResult) -> None:
        """One row per hour with the record fields as header."""
        path = timesteps_to_csv(harvest_result, tmp_path / "out" / "timesteps.csv")

        with path.open(newline="") as f:
            rows = list(csv.DictReader(f))

        assert len(rows) == 72
        assert list(rows[0]) == TimestepRecord.field_names()
        assert int(rows[0]["hour"]) == 7
        assert float(rows[-1]["biomass_concentration"]) == pytest.approx(
            harvest_result.summary.final_density
        )

    def test_json(self, tmp_path: Path, harvest_result: SimulationResult) -> None:
        """Summary, geometry and records are written."""
        path = write_json(harvest_result, tmp_path / "results.json")

        data = json.loads(path.read_text())
        assert data["summary"]["harvest_count"] == harvest_result.summary.harvest_count
        assert data["geometry"]["width"] == pytest.approx(17.0)
        assert len(data["timesteps"]) == 72
        assert data == json.loads(json.dumps(result_to_dict(harvest_result)))

    def test_csv_without_config_has_no_comments(
        self, tmp_path: Path, harvest_result: SimulationResult
    ) -> None:
        """The header is the first line unless a configuration is given."""
        path = timesteps_to_csv(harvest_result, tmp_path / "timesteps.csv")

        first = path.read_text().splitlines()[0]
        assert first.startswith("weather_date,day,hour,")

    def test_csv_with_config_header(
        self, tmp_path: Path, harvest_result: SimulationResult
    ) -> None:
        """Configuration lines precede the header and rows carry the weather date."""
        config = SimulationConfig(
            name="Harvest Test",
            pond=PondConfig(harvest_mode="semi-continuous", harvest_threshold=0.35),
        )
        path = timesteps_to_csv(harvest_result, tmp_path / "timesteps.csv", config)

        lines = path.read_text().splitlines()
        comments = [line for line in lines if line.startswith("#")]
        assert comments == config_header_lines(config)
        assert lines[: len(comments)] == comments
        assert comments[0].startswith("# Harvest Test:")
        assert "harvest: semi-continuous" in comments[3]
        assert "Initial temp: 25.0 C" in comments[4]

        rows = list(csv.DictReader(lines[len(comments) :]))
        assert len(rows) == 72
        assert [rows[i]["weather_date"] for i in (0, 24, 48)] == [
            "2024-06-15",
            "2024-06-16",
            "2024-06-17",
        ]

    def test_config_header_initial_temperature_from_air(self) -> None:
        """A missing initial temperature is reported as air temperature."""
        config = SimulationConfig(pond=PondConfig(initial_temperature=None))
        assert config_header_lines(config)[4].endswith("Initial temp: air")
