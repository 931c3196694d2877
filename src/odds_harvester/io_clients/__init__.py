"""Remote API clients."""

from .leon import ALL_EVENTS_FLAGS, EVENT_FLAGS, LeonClient

__all__ = [
    "ALL_EVENTS_FLAGS",
    "EVENT_FLAGS",
    "LeonClient",
]
