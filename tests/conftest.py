"""Test configuration and fixtures for the odds harvester test suite."""

import os
import sys
import pathlib

# Quiet, deterministic defaults before any other imports
os.environ.setdefault('LOG_LEVEL', 'WARNING')
os.environ.setdefault('RETRY_BASE_DELAY', '0')

# Ensure tests can import from src/
ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import asyncio
from typing import Dict, List, Optional

import pytest

from odds_harvester.config import get_settings
from odds_harvester.errors import RemoteCallError
from odds_harvester.models import Betline, Match

TOP_LEAGUE_CLASS = "sports-sidebar-top-leagues__league_Rd8VZ"

# 2024-05-01T18:00:00Z
KICKOFF_MS = 1714586400000


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Drop cached settings so environment changes in one test stay there."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def match_payload(
    match_id: str,
    name: str = "Arsenal - Chelsea",
    sport: str = "Soccer",
    league: str = "England. Premier League",
    kickoff: int = KICKOFF_MS,
    markets: Optional[List[dict]] = None,
) -> dict:
    """Event detail payload shaped like the Leon API response."""
    if markets is None:
        markets = [
            {
                "id": 1,
                "name": "Match Result",
                "runners": [
                    {"id": 11, "name": "1", "priceStr": "1.85"},
                    {"id": 12, "name": "X", "priceStr": "3.40"},
                    {"id": 13, "name": "2", "priceStr": "4.20"},
                ],
            }
        ]
    return {
        "id": int(match_id) if match_id.isdigit() else match_id,
        "name": name,
        "kickoff": kickoff,
        "league": {"id": 7, "name": league, "sport": {"id": 1, "name": sport}},
        "markets": markets,
        "isLive": False,
    }


def betline_payload(event_ids: List[str]) -> dict:
    return {"enabled": True, "events": [{"id": event_id, "name": f"Event {event_id}"} for event_id in event_ids]}


def seed_page_html(hrefs: List[str], extra: str = "") -> str:
    anchors = "\n".join(f'<a class="{TOP_LEAGUE_CLASS}" href="{href}">League</a>' for href in hrefs)
    return f"""<html>
<body>
<div class="sports-sidebar-top-leagues">
{anchors}
</div>
{extra}
</body>
</html>
"""


class FakeLeonClient:
    """In-memory stand-in for LeonClient.

    Args:
        leagues: league ID -> event IDs, in listing order
        delays: league or event ID -> seconds to wait before answering
        failing: league or event IDs that raise RemoteCallError
    """

    def __init__(
        self,
        leagues: Dict[str, List[str]],
        delays: Optional[Dict[str, float]] = None,
        failing: Optional[set] = None,
        sport: str = "Soccer",
    ):
        self.leagues = leagues
        self.delays = delays or {}
        self.failing = failing or set()
        self.sport = sport
        self.calls: List[tuple] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def _answer(self, key: str):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(key, 0))
            if key in self.failing:
                raise RemoteCallError(f"boom {key}", status_code=500)
        finally:
            self.in_flight -= 1

    async def fetch_league_events(self, league_id: str) -> Betline:
        self.calls.append(("league", league_id))
        await self._answer(league_id)
        return Betline.model_validate(betline_payload(self.leagues.get(league_id, [])))

    async def fetch_event_detail(self, event_id: str) -> Match:
        self.calls.append(("event", event_id))
        await self._answer(event_id)
        return Match.model_validate(match_payload(event_id, name=f"Match {event_id}", sport=self.sport))


class SleepRecorder:
    """Async sleep replacement that records requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()


@pytest.fixture
def seed_dir(tmp_path):
    path = tmp_path / "sport-pages"
    path.mkdir()
    return path


@pytest.fixture
def write_seed_page(seed_dir):
    """Write ``<seed_dir>/<sport>.html`` with top-league anchors."""
    def _write(sport: str, hrefs: List[str], extra: str = "") -> pathlib.Path:
        path = seed_dir / f"{sport}.html"
        path.write_text(seed_page_html(hrefs, extra))
        return path
    return _write


@pytest.fixture
def make_match():
    def _make(match_id: str = "1001", **kwargs) -> Match:
        return Match.model_validate(match_payload(match_id, **kwargs))
    return _make
