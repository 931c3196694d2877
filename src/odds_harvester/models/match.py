"""Detailed match model with markets and runners."""

from datetime import datetime, timedelta
from typing import List

from pydantic import AliasChoices, Field, field_validator

from .base import LeonModel

EPOCH = datetime(1970, 1, 1)


def epoch_millis_to_utc(value: int) -> datetime:
    """Convert milliseconds since the epoch to naive UTC civil time."""
    return EPOCH + timedelta(milliseconds=value)


def format_kickoff(value: datetime) -> str:
    """
    ISO-8601 civil time at the shortest exact precision.

    Seconds are left out when they and the fraction are zero; a fraction
    with no sub-millisecond part is printed as milliseconds.

    Examples:
        2024-05-01T18:00, 2024-05-01T18:00:05, 2024-05-01T18:00:00.123
    """
    if value.microsecond:
        timespec = "milliseconds" if value.microsecond % 1000 == 0 else "microseconds"
    elif value.second:
        timespec = "seconds"
    else:
        timespec = "minutes"
    return value.isoformat(timespec=timespec)


class Sport(LeonModel):
    name: str


class League(LeonModel):
    name: str
    sport: Sport


class Runner(LeonModel):
    """Selectable outcome; the price keeps the formatting it was sent with."""

    id: str
    name: str
    value: str = Field(..., validation_alias=AliasChoices("priceStr", "value"))


class Market(LeonModel):
    id: str
    name: str
    runners: List[Runner] = Field(default_factory=list)


class Match(LeonModel):
    """Fully detailed contest as returned by the event endpoint."""

    id: str = Field(..., min_length=1, description="Leon event ID")
    name: str
    kickoff: datetime = Field(..., description="Kickoff in UTC, without tzinfo")
    league: League
    markets: List[Market] = Field(default_factory=list)

    @field_validator("kickoff", mode="before")
    @classmethod
    def kickoff_from_epoch_millis(cls, v):
        """Kickoff arrives as epoch milliseconds."""
        if isinstance(v, str) and v.lstrip("-").isdigit():
            v = int(v)
        if isinstance(v, int) and not isinstance(v, bool):
            try:
                return epoch_millis_to_utc(v)
            except OverflowError as e:
                raise ValueError(f"kickoff {v} ms is outside the supported date range") from e
        return v

    @property
    def sport(self) -> Sport:
        return self.league.sport

    @property
    def kickoff_text(self) -> str:
        return format_kickoff(self.kickoff)
