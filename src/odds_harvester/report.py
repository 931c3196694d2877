"""Flat text report of harvested matches.

Layout per match::

    <sport>, <league>
    <match>, <kickoff>, <match id>
    <market>
    <tab><runner>, <price>, <runner id>
    <blank line>

Fields are joined with ", " and are not escaped. A name that itself
contains ", " makes its line ambiguous to split.
"""

from pathlib import Path
from typing import Iterable, List, Union

from .errors import ReportWriteError
from .harvest_logging import get_logger
from .models import Match

logger = get_logger(__name__)

SEPARATOR = ", "
RUNNER_INDENT = "\t"


def format_match(match: Match) -> List[str]:
    """Render one match as report lines, trailing blank line included."""
    lines = [
        SEPARATOR.join([match.sport.name, match.league.name]),
        SEPARATOR.join([match.name, match.kickoff_text, match.id]),
    ]
    for market in match.markets:
        lines.append(market.name)
        for runner in market.runners:
            lines.append(RUNNER_INDENT + SEPARATOR.join([runner.name, runner.value, runner.id]))
    lines.append("")
    return lines


def render_report(matches: Iterable[Match]) -> str:
    lines = []
    for match in matches:
        lines.extend(format_match(match))
    return "".join(line + "\n" for line in lines)


class ReportWriter:
    """Writes the report to a single file, replacing previous content."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def write(self, matches: Iterable[Match]) -> Path:
        """Write the report.

        Output already flushed before a failure is left in place.

        Raises:
            ReportWriteError: If the file cannot be created or written
        """
        logger.debug("Request to generate report", path=str(self.path))
        count = 0
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8", newline="\n") as fh:
                for match in matches:
                    for line in format_match(match):
                        fh.write(line + "\n")
                    count += 1
        except OSError as e:
            raise ReportWriteError(self.path, str(e)) from e

        logger.info("Report written", path=str(self.path), matches=count)
        return self.path
