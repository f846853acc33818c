from __future__ import annotations

import json

from typer.testing import CliRunner

from orgmigrate.main import app

runner = CliRunner()


def test_dry_run_prints_json_report(sample_source_path) -> None:
    result = runner.invoke(
        app,
        ["run", "--dry-run", "--no-persist", "--json", "--env", "production", "--source", str(sample_source_path)],
    )

    assert result.exit_code == 0, result.output
    assert "Migrating" in result.output
    report = json.loads(result.output[result.output.index("{"):])
    assert report["organizations"] == 2
    assert report["testimonials"] == 2
    assert report["errors"] == []
    assert report["cleared"] is False


def test_dry_run_table_output(sample_source_path) -> None:
    result = runner.invoke(
        app,
        ["run", "--dry-run", "--no-persist", "-e", "development", "-s", str(sample_source_path)],
    )

    assert result.exit_code == 0, result.output
    assert "Organizations" in result.output
    assert "No errors." in result.output


def test_dry_run_persists_report(sample_source_path, tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("RESULTS_DIR", str(tmp_path))

    result = runner.invoke(
        app, ["run", "--dry-run", "--json", "--source", str(sample_source_path)]
    )

    assert result.exit_code == 0, result.output
    assert (tmp_path / "latest.json").exists()


def test_missing_source_exits_with_failure(tmp_path) -> None:
    result = runner.invoke(
        app, ["run", "--dry-run", "--no-persist", "--source", str(tmp_path / "missing.json")]
    )

    assert result.exit_code == 1


def test_info_shows_clearing_state(monkeypatch) -> None:
    monkeypatch.setenv("APP_ENV", "development")

    result = runner.invoke(app, ["info"])

    assert result.exit_code == 0
    assert "env=development" in result.output
    assert "clearing=on" in result.output


def test_tables_lists_both_orders() -> None:
    result = runner.invoke(app, ["tables"])

    assert result.exit_code == 0
    assert result.output.startswith("Creation order: organizations, programs")
    assert "Clearing order: volunteer_applications, contact_submissions" in result.output
