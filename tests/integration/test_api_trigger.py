"""Router tests for the harvest HTTP trigger."""

from pathlib import Path

from fastapi.testclient import TestClient

from odds_harvester.api import create_app
from odds_harvester.errors import RetryExhaustedError, TooManyRequestsError
from odds_harvester.pipelines import HarvestSummary


def _build_test_client(monkeypatch, summary=None, error=None) -> TestClient:
    calls = []

    async def _fake_run_harvest(settings=None, **kwargs):
        calls.append(settings)
        if error is not None:
            raise error
        return summary

    monkeypatch.setattr("odds_harvester.api.run_harvest", _fake_run_harvest)
    client = TestClient(create_app())
    client.calls = calls
    return client


def _summary(report_written=True):
    return HarvestSummary(
        sport_pages=["football"],
        matches={"football": 3},
        report_path=Path("leon-report.txt"),
        report_written=report_written,
        report_error=None if report_written else "Cannot write report leon-report.txt",
    )


def test_analyze_leon_runs_harvest(monkeypatch):
    client = _build_test_client(monkeypatch, summary=_summary())

    response = client.post("/api/analyze-leon")

    assert response.status_code == 200
    assert response.json() == {
        "message": "Data successfully processed",
        "matches": 3,
        "report_written": True,
        "report_path": "leon-report.txt",
    }
    assert len(client.calls) == 1


def test_analyze_leon_acknowledges_unwritten_report(monkeypatch):
    client = _build_test_client(monkeypatch, summary=_summary(report_written=False))

    response = client.post("/api/analyze-leon")

    assert response.status_code == 200
    assert response.json()["report_written"] is False


def test_analyze_leon_pipeline_failure_is_bad_gateway(monkeypatch):
    error = RetryExhaustedError(3, TooManyRequestsError())
    client = _build_test_client(monkeypatch, error=error)

    response = client.post("/api/analyze-leon")

    assert response.status_code == 502
    assert response.json() == {"detail": "Retry attempts exhausted"}


def test_analyze_leon_is_post_only(monkeypatch):
    client = _build_test_client(monkeypatch, summary=_summary())

    response = client.get("/api/analyze-leon")

    assert response.status_code == 405
    assert client.calls == []
