"""Data-quality diagnostics with process-lifetime deduplication."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

DIAGNOSTICS_LOGGER_NAME = 'leaguehistory.diagnostics'


class DiagnosticKind(str, Enum):
    """Non-fatal data-quality problems found while building statistics."""

    BLANK_TEAM_NAME = 'blank'
    AMBIGUOUS_TEAM_MAPPING = 'ambiguous'
    UNRESOLVED_OWNER = 'missing'
    WINS_MISMATCH = 'wins-mismatch'
    MISSING_SEASON_METADATA = 'missing-metadata'
    MISSING_WEEKLY_DATA = 'missing-weekly'


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    season_id: str
    week: Optional[int]
    name: str
    message: str


class DiagnosticLog:
    """
    Collects diagnostics and logs each distinct one once.

    Entries are keyed by (season, week, reason, name), so rebuilding a
    derived result from the same bad input does not repeat the warning.

    Example:
        log = DiagnosticLog()
        log.report(DiagnosticKind.UNRESOLVED_OWNER, '2006', 3, 'big dogs',
                   'No owner found for team "Big Dogs" in season 2006 week 3')
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(DIAGNOSTICS_LOGGER_NAME)
        self.entries: list[Diagnostic] = []
        self._seen: set[tuple[str, Optional[int], str, str]] = set()

    def report(
        self,
        kind: DiagnosticKind,
        season_id,
        week: Optional[int],
        name: str,
        message: str,
    ) -> bool:
        """
        Record a diagnostic and log it if it hasn't been seen before.

        Returns:
            True if this was a new diagnostic, False if it was a repeat
        """
        key = (str(season_id), week, kind.value, name)
        if key in self._seen:
            return False
        self._seen.add(key)

        self.entries.append(Diagnostic(kind, str(season_id), week, name, message))
        self.logger.warning(message)
        return True

    def by_kind(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [entry for entry in self.entries if entry.kind == kind]

    def summary(self) -> dict[str, int]:
        """Count of distinct diagnostics per kind."""
        counts: dict[str, int] = {}
        for entry in self.entries:
            counts[entry.kind.value] = counts.get(entry.kind.value, 0) + 1
        return counts

    def __len__(self) -> int:
        return len(self.entries)
