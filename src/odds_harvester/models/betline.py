"""League events listing returned by the betline events endpoint."""

from typing import List, Optional

from pydantic import Field

from .base import LeonModel


class Event(LeonModel):
    """Lightweight listing entry for a scheduled contest."""

    id: str = Field(..., min_length=1, description="Leon event ID")
    name: Optional[str] = Field(None, description="Display name, when listed")


class Betline(LeonModel):
    """Events of one league, in the order the API reports them."""

    events: List[Event] = Field(default_factory=list)

    def first(self, count: int) -> List[Event]:
        """Return the first ``count`` events, preserving order."""
        return list(self.events[:max(count, 0)])
