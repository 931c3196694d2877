"""Odds harvester CLI using Typer."""

import asyncio
from pathlib import Path
from typing import List, Optional

import typer
from typing_extensions import Annotated

app = typer.Typer(help="Leon odds harvesting CLI")

EXIT_PIPELINE_FAILED = 1
EXIT_REPORT_NOT_WRITTEN = 2


def _split_sports(sports: Optional[str]) -> Optional[List[str]]:
    if sports is None:
        return None
    pages = [s.strip() for s in sports.split(',') if s.strip()]
    if not pages:
        raise typer.BadParameter("at least one sport page is required", param_hint="--sports")
    return pages


def _settings_with(**overrides):
    from .config import get_settings

    update = {key: value for key, value in overrides.items() if value is not None}
    return get_settings().model_copy(update=update)


@app.command()
def harvest(
    report_path: Annotated[Optional[Path], typer.Option("--report-path", help="Report output file")] = None,
    workers: Annotated[Optional[int], typer.Option(min=1, help="Concurrent sport page workers")] = None,
    seed_dir: Annotated[Optional[Path], typer.Option("--seed-dir", help="Directory holding seed pages")] = None,
    sports: Annotated[Optional[str], typer.Option(help="Comma-separated sport pages (e.g. 'football,tennis')")] = None,
):
    """Harvest odds for all sport pages and write the report."""
    from .errors import HarvestError
    from .harvest_logging import configure_logging, get_logger
    from .pipelines.harvest import run_harvest

    settings = _settings_with(
        REPORT_PATH=report_path,
        WORKERS=workers,
        SEED_DIR=seed_dir,
        SPORT_PAGES=_split_sports(sports),
    )
    configure_logging(settings)
    logger = get_logger(__name__)

    typer.echo(f"🎯 Harvesting sports: {', '.join(settings.SPORT_PAGES)}")
    try:
        summary = asyncio.run(run_harvest(settings))
    except HarvestError as e:
        logger.error("Harvest failed", error=str(e), error_type=type(e).__name__)
        typer.echo(f"❌ Harvest failed: {e}", err=True)
        raise typer.Exit(EXIT_PIPELINE_FAILED)

    typer.echo("\n📊 Summary:")
    for page in summary.sport_pages:
        typer.echo(f"   {page}: {summary.matches.get(page, 0)} matches")
    typer.echo(f"   Total matches: {summary.match_count}")

    if not summary.report_written:
        typer.echo(f"\n⚠️  Report not written: {summary.report_error}", err=True)
        raise typer.Exit(EXIT_REPORT_NOT_WRITTEN)

    typer.echo(f"\n✅ Report written to {summary.report_path}")


@app.command()
def leagues(
    seed_dir: Annotated[Optional[Path], typer.Option("--seed-dir", help="Directory holding seed pages")] = None,
    sports: Annotated[Optional[str], typer.Option(help="Comma-separated sport pages (e.g. 'football,tennis')")] = None,
):
    """List league IDs found on the seed pages without calling the API."""
    from .errors import SeedReadError
    from .extractors.seed import extract_league_ids_from_file, seed_path

    settings = _settings_with(SEED_DIR=seed_dir, SPORT_PAGES=_split_sports(sports))

    failed = False
    for page in settings.SPORT_PAGES:
        path = seed_path(settings.SEED_DIR, page)
        try:
            league_ids = extract_league_ids_from_file(path)
        except SeedReadError as e:
            typer.echo(f"❌ {page}: {e}", err=True)
            failed = True
            continue
        typer.echo(f"{page}: {', '.join(league_ids) if league_ids else '-'}")

    if failed:
        raise typer.Exit(EXIT_PIPELINE_FAILED)


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    app()
