"""Pipeline that checks a whole model bundle."""

from __future__ import annotations

import logging
from typing import Optional

from .chain import discover_versions
from .config import RunConfig
from .differ import Differ
from .exceptions import XcmigrateError
from .fingerprint import apply_fingerprints
from .loader import ModelLoader
from .models import ErrorResponse, RunResult, Version, WarningEntry
from .suppression import load_store

logger = logging.getLogger(__name__)


class MigrationEngine:
    """
    Orchestrates the migration check:

    1. Discovery: find the contiguous version directories
    2. Loading: parse every version, oldest first
    3. Diffing: compare each version with its predecessor
    4. Fingerprinting: give every problem its key
    5. Suppression: resolve problems whose key is in the solved file
    """

    def __init__(self, config: Optional[RunConfig] = None):
        self.config = config or RunConfig()

    def run(self) -> RunResult | ErrorResponse:
        """
        Check every migration step of the configured model.

        Returns:
            RunResult on success, ErrorResponse when the run cannot complete
        """
        try:
            versions, warnings = self.load_versions()
            return self.check(versions, warnings)
        except XcmigrateError as e:
            return self._create_error_response(e.code, str(e), _error_details(e))
        except Exception as e:
            logger.exception("Migration check failed")
            return self._create_error_response(
                "PROCESSING_ERROR",
                str(e),
                {"type": type(e).__name__}
            )

    def load_versions(self) -> tuple[list[Version], list[WarningEntry]]:
        """Discover and load all versions in ascending order."""
        loader = ModelLoader()
        versions = [
            loader.load(ref.number, ref.path)
            for ref in discover_versions(self.config)
        ]
        return versions, loader.warnings

    def check(
        self,
        versions: list[Version],
        warnings: Optional[list[WarningEntry]] = None
    ) -> RunResult:
        """Run the diff, fingerprint and suppression stages on loaded versions."""
        reports = Differ().diff(versions)
        apply_fingerprints(reports, self.config.fingerprint_scheme)

        store, store_warnings = load_store(self.config.solved_path)
        store.apply(reports)

        result = RunResult(
            reports=reports,
            warnings=list(warnings or []) + store_warnings,
            versions=[v.number for v in versions],
        )
        logger.info(
            "Checked %d migration(s), %d unresolved problem(s)",
            len(reports), result.unresolved_count
        )
        return result

    def _create_error_response(self, code: str, message: str, details: dict) -> ErrorResponse:
        return ErrorResponse(
            success=False,
            error={
                "code": code,
                "message": message,
                "details": details
            }
        )


def _error_details(error: XcmigrateError) -> dict:
    details = dict(getattr(error, "details", {}) or {})
    for attr in ("model_dir", "version", "path", "reason"):
        if hasattr(error, attr):
            details[attr] = getattr(error, attr)
    return details


def check_migrations(config: Optional[RunConfig] = None) -> RunResult | ErrorResponse:
    """Convenience function to run a full migration check."""
    return MigrationEngine(config).run()
