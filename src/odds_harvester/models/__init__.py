"""Pydantic data models for Leon API payloads."""

from .base import LeonModel
from .betline import Betline, Event
from .match import League, Market, Match, Runner, Sport, epoch_millis_to_utc, format_kickoff

__all__ = [
    "LeonModel",
    "Betline",
    "Event",
    "Sport",
    "League",
    "Runner",
    "Market",
    "Match",
    "epoch_millis_to_utc",
    "format_kickoff",
]
