"""
xcmigrate - Migration safety checks for versioned Core Data models

Compares every version of a .xcdatamodeld bundle with its predecessor,
reports removed entities, removed fields and changed field attributes,
and lets maintainers accept reviewed problems through a solved file.
"""

from .config import RunConfig
from .differ import Differ, diff
from .engine import MigrationEngine, check_migrations
from .exceptions import (
    XcmigrateError,
    ConfigError,
    ModelLoadError,
    NoVersionsFoundError,
)
from .fingerprint import FingerprintScheme, fingerprint, apply_fingerprints
from .loader import ModelLoader
from .models import (
    Version,
    Entity,
    Field,
    Problem,
    ProblemKind,
    MissingEntity,
    MissingField,
    ChangedAttribute,
    Report,
    RunResult,
    WarningEntry,
    ErrorResponse,
)
from .suppression import SuppressionStore, load_store, filter_reports

__version__ = "1.0.0"
__all__ = [
    # Pipeline
    "MigrationEngine",
    "check_migrations",
    "RunConfig",
    # Core
    "Differ",
    "diff",
    "FingerprintScheme",
    "fingerprint",
    "apply_fingerprints",
    "SuppressionStore",
    "load_store",
    "filter_reports",
    "ModelLoader",
    # Models
    "Version",
    "Entity",
    "Field",
    "Problem",
    "ProblemKind",
    "MissingEntity",
    "MissingField",
    "ChangedAttribute",
    "Report",
    "RunResult",
    "WarningEntry",
    "ErrorResponse",
    # Errors
    "XcmigrateError",
    "ConfigError",
    "ModelLoadError",
    "NoVersionsFoundError",
]
