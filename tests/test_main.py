"""Tests for pondsim.main module."""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from pondsim.main import app, main

runner = CliRunner()


def test_app_shows_help() -> None:
    """App shows help when called with no args."""
    result = runner.invoke(app, [])
    # With no_args_is_help=True, typer shows help but exits with code 2
    assert result.exit_code == 2
    assert "Usage:" in result.stdout


def test_main_returns_exit_code(monkeypatch: pytest.MonkeyPatch) -> None:
    """main() converts the CLI exit into a return code."""
    monkeypatch.setattr("sys.argv", ["pondsim", "list"])
    assert main() == 0


def test_main_reports_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    """Errors surface as a non-zero return code."""
    monkeypatch.setattr("sys.argv", ["pondsim", "run"])
    assert main() == 1
