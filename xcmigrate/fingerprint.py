"""Stable identity keys for migration problems."""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from .models import ChangedAttribute, MissingEntity, MissingField, Problem, Report


class FingerprintScheme(Enum):
    """
    How keys for changed attributes are built.

    LEGACY leaves the attribute name out, so every attribute change on one
    field in one target version shares a key. This is what existing solved
    files contain. PER_ATTRIBUTE appends the attribute name and keeps the
    changes apart, at the price of invalidating accepted `.changed` keys.
    """
    LEGACY = "legacy"
    PER_ATTRIBUTE = "per-attribute"


def fingerprint(
    report: Report,
    problem: Problem,
    scheme: FingerprintScheme = FingerprintScheme.LEGACY
) -> str:
    """
    Build the key a maintainer adds to the solved file to accept a problem.

    Args:
        report: Report the problem belongs to
        problem: The problem to identify
        scheme: Key layout for changed attributes

    Returns:
        Key such as 'solved.3.field.User.age.missing'
    """
    key = f"solved.{report.to_version}"

    if isinstance(problem, MissingEntity):
        return f"{key}.entity.{problem.entity_name}.missing"

    if isinstance(problem, MissingField):
        return f"{key}.field.{problem.entity_name}.{problem.field_name}.missing"

    if isinstance(problem, ChangedAttribute):
        key += f".field.{problem.entity_name}.{problem.field_name}"
        if scheme == FingerprintScheme.PER_ATTRIBUTE:
            key += f".{problem.attribute}"
        return f"{key}.changed"

    raise TypeError(f"Unsupported problem type: {type(problem).__name__}")


def apply_fingerprints(
    reports: Iterable[Report],
    scheme: FingerprintScheme = FingerprintScheme.LEGACY
) -> None:
    """Set the key of every problem in every report."""
    for report in reports:
        for problem in report.problems:
            problem.key = fingerprint(report, problem, scheme)
