"""League discovery from static sport seed pages."""

import re
from pathlib import Path
from typing import List, Optional, Union

from bs4 import BeautifulSoup

from ..errors import SeedReadError
from ..harvest_logging import get_logger

logger = get_logger(__name__)

TOP_LEAGUE_SELECTOR = "a.sports-sidebar-top-leagues__league_Rd8VZ"
LEAGUE_HREF_PATTERN = re.compile(r"(\d+)-[a-zA-Z0-9-]+")
SEED_SUFFIX = ".html"


def seed_path(seed_dir: Union[str, Path], sport_page: str) -> Path:
    """Location of the seed page for a sport, e.g. sport-pages/football.html."""
    return Path(seed_dir) / f"{sport_page}{SEED_SUFFIX}"


def read_seed_document(path: Union[str, Path]) -> str:
    """Read a seed page in full using the default text encoding.

    Raises:
        SeedReadError: If the file cannot be opened or decoded
    """
    path = Path(path)
    try:
        return path.read_text()
    except (OSError, UnicodeDecodeError) as e:
        raise SeedReadError(path, str(e)) from e


def league_id_from_href(href: str) -> Optional[str]:
    """Return the numeric league ID embedded in a top-league link, if any."""
    match = LEAGUE_HREF_PATTERN.search(href)
    return match.group(1) if match else None


def extract_league_ids(markup: str) -> List[str]:
    """Extract league IDs from top-league anchors.

    Args:
        markup: Seed page HTML

    Returns:
        League IDs in document order, duplicates kept
    """
    soup = BeautifulSoup(markup, "html.parser")

    league_ids = []
    for anchor in soup.select(TOP_LEAGUE_SELECTOR):
        href = anchor.get("href")
        if not href:
            continue
        league_id = league_id_from_href(href)
        if league_id is None:
            logger.debug("Skipping top-league link without league ID", href=href)
            continue
        league_ids.append(league_id)

    return league_ids


def extract_league_ids_from_file(path: Union[str, Path]) -> List[str]:
    """Read a seed page and extract its league IDs."""
    league_ids = extract_league_ids(read_seed_document(path))
    logger.debug("Extracted league IDs", seed=str(path), count=len(league_ids))
    return league_ids
