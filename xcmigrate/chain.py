"""Version discovery inside a .xcdatamodeld bundle."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .config import RunConfig
from .exceptions import NoVersionsFoundError

logger = logging.getLogger(__name__)


@dataclass
class VersionRef:
    """A discovered version directory, not yet loaded."""
    number: int
    path: Path


def model_dir(config: RunConfig) -> Path:
    return Path(config.directory) / f"{config.model}.xcdatamodeld"


def version_dir(config: RunConfig, number: int) -> Path:
    """
    Directory of one version.

    Version 1 is '<model>.xcdatamodel', later ones are
    '<model> <n>.xcdatamodel'.
    """
    suffix = f" {number}" if number > 1 else ""
    return model_dir(config) / f"{config.model}{suffix}.xcdatamodel"


def discover_versions(config: RunConfig) -> list[VersionRef]:
    """
    Find the contiguous run of versions starting at 1.

    Discovery stops at the first missing number.

    Raises:
        NoVersionsFoundError: If version 1 does not exist
    """
    refs: list[VersionRef] = []
    number = 1
    while version_dir(config, number).exists():
        refs.append(VersionRef(number=number, path=version_dir(config, number)))
        number += 1

    if not refs:
        raise NoVersionsFoundError(str(model_dir(config)))

    for ref in refs:
        logger.info("Found version %d: %s", ref.number, ref.path)
    return refs
