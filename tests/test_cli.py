"""Tests for CLI interface."""

from __future__ import annotations

import csv
import json
from pathlib import Path

import yaml
from typer.testing import CliRunner

from pondsim.core.config import load_config
from pondsim.main import app

runner = CliRunner()

ONE_DAY_CONFIG = """
name: "CLI Test"
total_days: 1
pond:
  depth: 0.2
weather:
  source: synthetic
  days: 1
"""


def write_config(tmp_path: Path, text: str = ONE_DAY_CONFIG) -> Path:
    """Write a configuration file for a test."""
    config = tmp_path / "test.yaml"
    config.write_text(text)
    return config


class TestRunCommand:
    """Tests for the run command."""

    def test_run_with_config_file(self, tmp_path: Path) -> None:
        """Run a one-day configuration."""
        result = runner.invoke(app, ["run", str(write_config(tmp_path)), "-q"])

        assert result.exit_code == 0

    def test_run_prints_summary(self, tmp_path: Path) -> None:
        """Console format shows the summary table."""
        result = runner.invoke(
            app, ["run", str(write_config(tmp_path)), "-o", str(tmp_path / "out")]
        )

        assert result.exit_code == 0
        assert "Running:" in result.stdout
        assert "Simulation Summary" in result.stdout
        assert "Final density" in result.stdout

    def test_run_with_both_config_and_scenario_errors(self, tmp_path: Path) -> None:
        """Config file and scenario are mutually exclusive."""
        result = runner.invoke(
            app, ["run", str(write_config(tmp_path)), "--scenario", "batch"]
        )

        assert result.exit_code == 1
        assert "Cannot specify both" in result.stdout

    def test_run_with_missing_config_errors(self) -> None:
        """Missing config file errors."""
        result = runner.invoke(app, ["run", "/nonexistent/path.yaml"])

        assert result.exit_code == 1
        assert "not found" in result.stdout

    def test_run_with_invalid_config_errors(self, tmp_path: Path) -> None:
        """Invalid values are reported."""
        config = write_config(tmp_path, "pond:\n  depth: -1\n")

        result = runner.invoke(app, ["run", str(config)])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.stdout

    def test_run_with_unknown_scenario(self) -> None:
        """Unknown scenario names list the alternatives."""
        result = runner.invoke(app, ["run", "--scenario", "photobioreactor"])

        assert result.exit_code == 1
        assert "Unknown scenario" in result.stdout

    def test_run_with_unknown_format(self, tmp_path: Path) -> None:
        """Unknown output formats are rejected."""
        result = runner.invoke(app, ["run", str(write_config(tmp_path)), "-f", "xml"])

        assert result.exit_code == 1
        assert "Unknown format" in result.stdout

    def test_run_with_unknown_harvest_mode(self, tmp_path: Path) -> None:
        """Unknown harvest modes are rejected."""
        result = runner.invoke(
            app, ["run", str(write_config(tmp_path)), "--harvest", "weekly"]
        )

        assert result.exit_code == 1
        assert "Unknown harvest mode" in result.stdout

    def test_run_with_days_override(self, tmp_path: Path) -> None:
        """--days changes the run length and the synthetic weather."""
        output_dir = tmp_path / "results"

        result = runner.invoke(
            app,
            [
                "run",
                str(write_config(tmp_path)),
                "-d",
                "2",
                "-f",
                "json",
                "-o",
                str(output_dir),
                "-q",
            ],
        )

        assert result.exit_code == 0
        data = json.loads((output_dir / "results.json").read_text())
        assert data["summary"]["total_days"] == 2
        assert len(data["timesteps"]) == 48

    def test_run_with_harvest_override(self, tmp_path: Path) -> None:
        """--harvest changes the harvest mode."""
        output_dir = tmp_path / "results"

        result = runner.invoke(
            app,
            [
                "run",
                "--scenario",
                "spirulina-summer",
                "-d",
                "1",
                "--harvest",
                "semi-continuous",
                "-o",
                str(output_dir),
            ],
        )

        assert result.exit_code == 0
        assert "Harvest: semi-continuous" in result.stdout

    def test_run_with_invalid_override(self, tmp_path: Path) -> None:
        """Overrides are validated against the rest of the configuration."""
        config = write_config(
            tmp_path,
            ONE_DAY_CONFIG.replace("  depth: 0.2", "  harvest_target: 3.0"),
        )

        result = runner.invoke(app, ["run", str(config), "--harvest", "batch"])

        assert result.exit_code == 1
        assert "Invalid override" in result.stdout

    def test_run_with_output_dir(self, tmp_path: Path) -> None:
        """Console format with an output directory writes JSON."""
        output_dir = tmp_path / "results"

        result = runner.invoke(
            app, ["run", str(write_config(tmp_path)), "-o", str(output_dir), "-q"]
        )

        assert result.exit_code == 0
        assert (output_dir / "results.json").exists()

    def test_run_with_csv_format(self, tmp_path: Path) -> None:
        """CSV format writes one row per hour."""
        output_dir = tmp_path / "csv_results"

        result = runner.invoke(
            app,
            ["run", str(write_config(tmp_path)), "-f", "csv", "-o", str(output_dir), "-q"],
        )

        assert result.exit_code == 0
        with (output_dir / "timesteps.csv").open(newline="") as f:
            lines = f.read().splitlines()
        comments = [line for line in lines if line.startswith("#")]
        rows = list(csv.DictReader(line for line in lines if not line.startswith("#")))
        assert comments[0].startswith("# CLI Test:")
        assert len(rows) == 24
        assert "biomass_concentration" in rows[0]
        assert rows[0]["weather_date"] == "2024-06-15"

    def test_run_uses_configured_outputs(self, tmp_path: Path) -> None:
        """Without --output-dir the configured output paths are used."""
        json_path = tmp_path / "out" / "run.json"
        csv_path = tmp_path / "out" / "run.csv"
        config = write_config(
            tmp_path,
            ONE_DAY_CONFIG
            + "output:\n"
            + f"  csv:\n    enabled: true\n    path: '{csv_path}'\n"
            + f"  json:\n    enabled: true\n    path: '{json_path}'\n",
        )

        result = runner.invoke(app, ["run", str(config), "-q"])

        assert result.exit_code == 0
        assert json_path.exists()
        assert csv_path.exists()

    def test_run_quiet_mode(self, tmp_path: Path) -> None:
        """Quiet mode suppresses output."""
        result = runner.invoke(app, ["run", str(write_config(tmp_path)), "-q"])

        assert result.exit_code == 0
        assert "Running:" not in result.stdout

    def test_run_no_args_errors(self) -> None:
        """Run without a config or scenario errors."""
        result = runner.invoke(app, ["run"])

        assert result.exit_code == 1
        assert "Provide a config file" in result.stdout


class TestListCommand:
    """Tests for the list command."""

    def test_list_shows_scenarios(self) -> None:
        """List command shows the scenario table."""
        result = runner.invoke(app, ["list"])

        assert result.exit_code == 0
        assert "Available Scenarios" in result.stdout
        assert "batch" in result.stdout
        assert "winter" in result.stdout


class TestInitCommand:
    """Tests for the init command."""

    def test_init_creates_valid_yaml(self, tmp_path: Path) -> None:
        """Init writes a configuration that loads back."""
        output = tmp_path / "new-pond.yaml"

        result = runner.invoke(app, ["init", "Test Pond", "-o", str(output)])

        assert result.exit_code == 0
        assert "Created:" in result.stdout
        config = load_config(output)
        assert config.name == "Test Pond"
        assert config.pond.harvest_mode == "semi-continuous"

    def test_init_writes_yaml_sections(self, tmp_path: Path) -> None:
        """Starter file has the top-level sections."""
        output = tmp_path / "subdir" / "custom.yaml"

        result = runner.invoke(app, ["init", "Custom", "-o", str(output)])

        assert result.exit_code == 0
        data = yaml.safe_load(output.read_text())
        assert {"pond", "weather", "output"} <= set(data)


class TestValidateCommand:
    """Tests for the validate command."""

    def test_validate_valid(self, tmp_path: Path) -> None:
        """Valid configuration prints the pond dimensions."""
        result = runner.invoke(app, ["validate", str(write_config(tmp_path))])

        assert result.exit_code == 0
        assert "Valid:" in result.stdout
        assert "250.0m x 17.0m" in result.stdout

    def test_validate_invalid(self, tmp_path: Path) -> None:
        """Invalid configuration fails."""
        config = write_config(tmp_path, "pond:\n  harvest_mode: weekly\n")

        result = runner.invoke(app, ["validate", str(config)])

        assert result.exit_code == 1
        assert "Invalid" in result.stdout

    def test_validate_missing(self, tmp_path: Path) -> None:
        """Missing file fails."""
        result = runner.invoke(app, ["validate", str(tmp_path / "missing.yaml")])

        assert result.exit_code == 1
        assert "not found" in result.stdout
