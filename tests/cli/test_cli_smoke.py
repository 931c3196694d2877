"""Smoke tests for the odds harvester CLI without network calls."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from odds_harvester.cli import EXIT_PIPELINE_FAILED, EXIT_REPORT_NOT_WRITTEN, app
from odds_harvester.errors import RemoteCallError
from odds_harvester.pipelines import HarvestSummary

runner = CliRunner()


class FakeRun:
    """Stand-in for run_harvest that records the settings it was given."""

    def __init__(self, summary=None, error=None):
        self.summary = summary
        self.error = error
        self.settings = None

    async def __call__(self, settings=None, **kwargs):
        self.settings = settings
        if self.error is not None:
            raise self.error
        return self.summary


def _summary(report_written=True, report_error=None):
    return HarvestSummary(
        sport_pages=["football", "tennis"],
        matches={"football": 4, "tennis": 2},
        report_path=Path("leon-report.txt"),
        report_written=report_written,
        report_error=report_error,
    )


@pytest.fixture
def fake_run(monkeypatch):
    def _install(**kwargs):
        fake = FakeRun(**kwargs)
        monkeypatch.setattr("odds_harvester.pipelines.harvest.run_harvest", fake)
        return fake
    return _install


def test_harvest_smoke(fake_run):
    fake = fake_run(summary=_summary())

    result = runner.invoke(app, ["harvest", "--sports", "football,tennis", "--workers", "2"])

    assert result.exit_code == 0, f"CLI failed with output: {result.output}"
    assert "Harvesting sports: football, tennis" in result.output
    assert "football: 4 matches" in result.output
    assert "Total matches: 6" in result.output
    assert "Report written to leon-report.txt" in result.output
    assert fake.settings.WORKERS == 2
    assert fake.settings.SPORT_PAGES == ["football", "tennis"]


def test_harvest_overrides_paths(fake_run, tmp_path):
    fake = fake_run(summary=_summary())

    result = runner.invoke(app, [
        "harvest",
        "--report-path", str(tmp_path / "out.txt"),
        "--seed-dir", str(tmp_path),
    ])

    assert result.exit_code == 0, result.output
    assert fake.settings.REPORT_PATH == tmp_path / "out.txt"
    assert fake.settings.SEED_DIR == tmp_path


def test_harvest_pipeline_failure_exit_code(fake_run):
    fake_run(error=RemoteCallError("Server error 503", status_code=503))

    result = runner.invoke(app, ["harvest"])

    assert result.exit_code == EXIT_PIPELINE_FAILED
    assert "Harvest failed: Server error 503" in result.output


def test_harvest_report_not_written_exit_code(fake_run):
    fake_run(summary=_summary(report_written=False, report_error="Cannot write report leon-report.txt"))

    result = runner.invoke(app, ["harvest"])

    assert result.exit_code == EXIT_REPORT_NOT_WRITTEN
    assert "Total matches: 6" in result.output
    assert "Report not written" in result.output


def test_harvest_rejects_zero_workers(fake_run):
    fake = fake_run(summary=_summary())

    result = runner.invoke(app, ["harvest", "--workers", "0"])

    assert result.exit_code != 0
    assert fake.settings is None


def test_leagues_lists_ids(write_seed_page, seed_dir):
    write_seed_page("football", ["/bets/soccer/100-premier-league", "/bets/soccer/200-laliga"])
    write_seed_page("tennis", [])

    result = runner.invoke(app, ["leagues", "--seed-dir", str(seed_dir), "--sports", "football,tennis"])

    assert result.exit_code == 0, result.output
    assert "football: 100, 200" in result.output
    assert "tennis: -" in result.output


def test_leagues_missing_seed_page(write_seed_page, seed_dir):
    write_seed_page("football", ["/bets/soccer/100-premier-league"])

    result = runner.invoke(app, ["leagues", "--seed-dir", str(seed_dir), "--sports", "football,esports"])

    assert result.exit_code == EXIT_PIPELINE_FAILED
    assert "football: 100" in result.output
    assert "esports" in result.output
