"""
Tests for the Typer CLI.
"""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from freebusy.adapters.file_source import SAMPLE_SNAPSHOT_PATH, FileSnapshotSource
from freebusy.cli.app import _day_style, app
from freebusy.services.calendar_view import CalendarViewService

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text("grid:\n  default_start_hour: 8\n  default_end_hour: 18\n", encoding="utf-8")
    return path


def test_export_prints_text(config_file: Path):
    result = runner.invoke(
        app,
        ["export", "--snapshot", str(SAMPLE_SNAPSHOT_PATH), "--tz", "America/New_York", "--config", str(config_file)],
    )

    assert result.exit_code == 0
    assert "Availability (EST) - Dec 29, 2025 to Jan 9, 2026" in result.output
    assert "Mon, Dec 29: 9 AM - 10 AM; 11 AM - 2 PM; 3 PM - 5 PM" in result.output
    assert "Generated: " in result.output


def test_export_writes_output_file(tmp_path: Path, config_file: Path):
    target = tmp_path / "availability.txt"
    result = runner.invoke(
        app,
        ["export", "--snapshot", str(SAMPLE_SNAPSHOT_PATH), "--tz", "America/Chicago",
         "--output", str(target), "--config", str(config_file)],
    )

    assert result.exit_code == 0
    text = target.read_text(encoding="utf-8")
    assert text.startswith("Availability (CST)")
    assert "Mon, Dec 29: 8 AM - 9 AM; 10 AM - 1 PM; 2 PM - 4 PM" in text


def test_export_defaults_to_owner_zone(config_file: Path):
    result = runner.invoke(app, ["export", "--config", str(config_file)])

    assert result.exit_code == 0
    assert "Times shown in EST (America/New_York)." in result.output


def test_export_rejects_unsupported_zone(config_file: Path):
    result = runner.invoke(app, ["export", "--tz", "Europe/Berlin", "--config", str(config_file)])

    assert result.exit_code == 1
    assert "Unsupported time zone" in result.output


def test_export_missing_snapshot(tmp_path: Path, config_file: Path):
    result = runner.invoke(
        app, ["export", "--snapshot", str(tmp_path / "missing.json"), "--config", str(config_file)]
    )

    assert result.exit_code == 1
    assert "Error" in result.output


def test_missing_config_file(tmp_path: Path):
    result = runner.invoke(app, ["export", "--config", str(tmp_path / "missing.yaml")])

    assert result.exit_code == 1


def test_grid(config_file: Path):
    result = runner.invoke(
        app, ["grid", "--snapshot", str(SAMPLE_SNAPSHOT_PATH), "--tz", "America/Chicago", "--config", str(config_file)]
    )

    assert result.exit_code == 0
    assert "Central" in result.output
    assert "busy" in result.output


def test_watch_single_iteration(config_file: Path):
    result = runner.invoke(
        app,
        ["watch", "--snapshot", str(SAMPLE_SNAPSHOT_PATH), "--iterations", "1", "--interval", "0",
         "--config", str(config_file)],
    )

    assert result.exit_code == 0
    assert "Fri, Jan 2: 9 AM - 3 PM" in result.output


def test_zones():
    result = runner.invoke(app, ["zones"])

    assert result.exit_code == 0
    assert "America/Chicago" in result.output
    assert "Pacific/Honolulu" in result.output


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "freebusy" in result.output


def test_days_without_working_hours_are_greyed():
    view = CalendarViewService().build_view(FileSnapshotSource().load(), "America/New_York")
    styles = [_day_style(view, day) for day in view.weeks[0].days]

    # Mon-Fri have hours; the weekend has none.
    assert styles == [None, None, None, None, None, "dim", "dim"]


def test_days_use_default_hours_without_rules():
    snapshot = FileSnapshotSource().load().model_copy(update={"working_hours": None})
    view = CalendarViewService().build_view(snapshot, "America/New_York")

    assert all(_day_style(view, day) is None for day in view.weeks[0].days)
