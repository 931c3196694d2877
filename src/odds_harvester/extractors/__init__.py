"""Extraction functions for seed documents."""

from .seed import (
    LEAGUE_HREF_PATTERN,
    TOP_LEAGUE_SELECTOR,
    extract_league_ids,
    extract_league_ids_from_file,
    league_id_from_href,
    read_seed_document,
    seed_path,
)

__all__ = [
    "LEAGUE_HREF_PATTERN",
    "TOP_LEAGUE_SELECTOR",
    "extract_league_ids",
    "extract_league_ids_from_file",
    "league_id_from_href",
    "read_seed_document",
    "seed_path",
]
