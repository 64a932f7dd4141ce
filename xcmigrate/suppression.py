"""Accepted-key filtering for xcmigrate."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from .models import Report, WarningEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SuppressionStore:
    """Keys a maintainer has reviewed and accepted as safe."""
    accepted: frozenset[str] = frozenset()

    @classmethod
    def from_text(cls, text: str) -> SuppressionStore:
        # One key per line, matched verbatim
        return cls(frozenset(text.split("\n")))

    def is_accepted(self, key: str) -> bool:
        return key in self.accepted

    def apply(self, reports: Iterable[Report]) -> None:
        """Mark each problem resolved iff its key was accepted."""
        for report in reports:
            for problem in report.problems:
                problem.resolved = self.is_accepted(problem.key)


def load_store(path: str | Path) -> tuple[SuppressionStore, list[WarningEntry]]:
    """
    Read the solved file.

    A missing file is not an error: every problem simply stays unresolved
    and a warning is returned for the caller to present.

    Args:
        path: Path to the solved file

    Returns:
        Tuple of (store, warnings)
    """
    path = Path(path)
    if not path.exists():
        logger.info("No solved file found: %s", path)
        warning = WarningEntry(
            code="SOLVED_FILE_MISSING",
            message=f"No solved file found: {path}",
            path=str(path),
        )
        return SuppressionStore(), [warning]

    with open(path, "r", encoding="utf-8", newline="") as f:
        store = SuppressionStore.from_text(f.read())
    logger.info("Loaded %d accepted key(s) from %s", len(store.accepted), path)
    return store, []


def filter_reports(reports: list[Report], accepted_keys: Iterable[str]) -> list[Report]:
    """Convenience function to set resolved flags from a set of keys."""
    SuppressionStore(frozenset(accepted_keys)).apply(reports)
    return reports
