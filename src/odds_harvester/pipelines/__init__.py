"""Harvest pipelines."""

from .harvest import (
    HarvestOrchestrator,
    HarvestSummary,
    LeagueHarvester,
    PageHarvester,
    build_orchestrator,
    run_harvest,
)

__all__ = [
    "HarvestOrchestrator",
    "HarvestSummary",
    "LeagueHarvester",
    "PageHarvester",
    "build_orchestrator",
    "run_harvest",
]
