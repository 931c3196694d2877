"""Harvest pipeline: seed pages -> leagues -> matches -> report."""

import asyncio
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Sequence, Union

from ..config import AppSettings, get_settings
from ..errors import ReportWriteError
from ..extractors.seed import extract_league_ids_from_file, seed_path
from ..harvest_logging import clear_trace_id, get_logger, new_trace_id
from ..io_clients.leon import LeonClient
from ..models import Betline, Match
from ..report import ReportWriter

logger = get_logger(__name__)


class MatchSource(Protocol):
    """The two Leon calls the harvesters depend on."""

    async def fetch_league_events(self, league_id: str) -> Betline: ...

    async def fetch_event_detail(self, event_id: str) -> Match: ...


class LeagueHarvester:
    """Fetches the first few matches of one league in full detail."""

    def __init__(self, client: MatchSource, matches_per_league: int = 2) -> None:
        self.client = client
        self.matches_per_league = matches_per_league

    async def harvest(self, league_id: str) -> List[Match]:
        """
        Fetch a league's events, then the detail of the first events in order.

        Any failure aborts the whole league; nothing partial is returned.

        Args:
            league_id: Leon league ID

        Returns:
            list[Match]: At most ``matches_per_league`` matches, in event order
        """
        logger.info("Request to get all matches by league id", league_id=league_id)
        betline = await self.client.fetch_league_events(league_id)

        matches = []
        for event in betline.first(self.matches_per_league):
            logger.info("Request to get betting data for the match", event_id=event.id)
            matches.append(await self.client.fetch_event_detail(event.id))
        return matches


class PageHarvester:
    """Harvests every league listed on one sport seed page."""

    def __init__(self, league_harvester: LeagueHarvester, seed_dir: Union[str, Path]) -> None:
        self.league_harvester = league_harvester
        self.seed_dir = Path(seed_dir)

    def seed_path(self, sport_page: str) -> Path:
        return seed_path(self.seed_dir, sport_page)

    async def harvest(self, sport_page: str) -> List[Match]:
        """
        Extract league IDs from the sport page and harvest them one by one.

        Args:
            sport_page: Page name, e.g. "football"

        Returns:
            list[Match]: Matches in league order
        """
        path = self.seed_path(sport_page)
        logger.info("Request to parse matches data for sport", sport=sport_page, seed=str(path))
        # Blocking read and parse, off the event loop
        league_ids = await asyncio.to_thread(extract_league_ids_from_file, path)

        matches = []
        for league_id in league_ids:
            matches.extend(await self.league_harvester.harvest(league_id))

        logger.info(
            "Sport page harvested",
            sport=sport_page,
            leagues=len(league_ids),
            matches=len(matches),
        )
        return matches


@dataclass
class HarvestSummary:
    """Outcome of one pipeline run."""

    sport_pages: List[str]
    matches: Dict[str, int] = field(default_factory=dict)
    report_path: Optional[Path] = None
    report_written: bool = False
    report_error: Optional[str] = None
    duration_s: float = 0.0

    @property
    def match_count(self) -> int:
        return sum(self.matches.values())


class HarvestOrchestrator:
    """
    Runs one page harvester per sport page on a bounded pool and writes the report.

    Pages run concurrently, at most ``workers`` at a time. The report keeps
    the declared page order whatever order the pages finish in.
    """

    def __init__(
        self,
        page_harvester: PageHarvester,
        report_writer: ReportWriter,
        sport_pages: Sequence[str],
        *,
        workers: int = 3,
    ) -> None:
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self.page_harvester = page_harvester
        self.report_writer = report_writer
        self.sport_pages = list(sport_pages)
        self.workers = workers

    async def collect(self) -> List[List[Match]]:
        """
        Harvest all sport pages and wait for every one of them.

        No page is cancelled when a sibling fails. Once all have finished,
        each failure is logged and the first one in declared order is raised.

        Returns:
            list[list[Match]]: Matches per page, in declared page order
        """
        semaphore = asyncio.Semaphore(self.workers)

        async def harvest_with_semaphore(sport_page: str) -> List[Match]:
            async with semaphore:
                return await self.page_harvester.harvest(sport_page)

        tasks = [harvest_with_semaphore(page) for page in self.sport_pages]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        failures = [
            (page, result)
            for page, result in zip(self.sport_pages, results)
            if isinstance(result, BaseException)
        ]
        for page, error in failures:
            logger.error(
                "Sport page harvest failed",
                sport=page,
                error=str(error),
                error_type=type(error).__name__,
            )
        if failures:
            raise failures[0][1]

        return list(results)

    async def run(self) -> HarvestSummary:
        """
        Harvest all sport pages and write the combined report.

        A failed page fails the run before anything is written. A failed
        report write is logged and recorded on the summary instead of raised.

        Returns:
            HarvestSummary: Per-page counts and report outcome
        """
        started = time.monotonic()
        logger.info("Request to parse matches data for sports", sports=self.sport_pages)

        per_page = await self.collect()
        matches = [match for page_matches in per_page for match in page_matches]

        summary = HarvestSummary(
            sport_pages=list(self.sport_pages),
            matches={page: len(found) for page, found in zip(self.sport_pages, per_page)},
            report_path=self.report_writer.path,
        )

        try:
            self.report_writer.write(matches)
            summary.report_written = True
        except ReportWriteError as e:
            logger.error("Error writing report file", path=str(e.path), error=str(e))
            summary.report_error = str(e)

        summary.duration_s = round(time.monotonic() - started, 3)
        logger.info(
            "Harvest completed",
            matches=summary.match_count,
            report_written=summary.report_written,
            duration_s=summary.duration_s,
        )
        return summary


def build_orchestrator(client: MatchSource, settings: Optional[AppSettings] = None) -> HarvestOrchestrator:
    """Wire harvesters and report writer from settings around a client."""
    settings = settings or get_settings()
    league_harvester = LeagueHarvester(client, settings.MATCHES_PER_LEAGUE)
    page_harvester = PageHarvester(league_harvester, settings.SEED_DIR)
    return HarvestOrchestrator(
        page_harvester,
        ReportWriter(settings.REPORT_PATH),
        settings.SPORT_PAGES,
        workers=settings.WORKERS,
    )


async def run_harvest(
    settings: Optional[AppSettings] = None,
    *,
    client: Optional[MatchSource] = None,
) -> HarvestSummary:
    """
    Run one complete harvest.

    Binds a fresh trace ID to the log context for the duration of the run.
    A Leon client is created and closed here unless one is passed in.

    Args:
        settings: Settings to run with (defaults to cached settings)
        client: Optional pre-built client; the caller keeps ownership
    """
    settings = settings or get_settings()
    trace_id = new_trace_id()
    logger.info("Harvest run started", trace_id=trace_id)
    try:
        if client is not None:
            return await build_orchestrator(client, settings).run()
        async with LeonClient(settings) as leon_client:
            return await build_orchestrator(leon_client, settings).run()
    finally:
        clear_trace_id()
