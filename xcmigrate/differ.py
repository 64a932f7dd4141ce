"""Version-chain diffing for xcmigrate."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence, TypeVar

from .models import (
    ChangedAttribute,
    Entity,
    Field,
    MissingEntity,
    MissingField,
    Problem,
    Report,
    Version,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", Entity, Field)


def index_by_name(items: Iterable[T]) -> dict[str, T]:
    """Map names to items, keeping the first item when a name repeats."""
    index: dict[str, T] = {}
    for item in items:
        index.setdefault(item.name, item)
    return index


class Differ:
    """
    Compares adjacent model versions and collects breaking changes.

    Only the old side drives the walk: entities, fields and attribute
    keys that appear solely in the newer version are never reported.
    Problems come out in the old version's stored order.
    """

    def diff(self, versions: Sequence[Version]) -> list[Report]:
        """
        Diff every adjacent pair of a version chain.

        Args:
            versions: Versions in ascending order

        Returns:
            One report per pair (v-1, v), in chain order
        """
        return [
            self.diff_versions(versions[i - 1], versions[i])
            for i in range(1, len(versions))
        ]

    def diff_versions(self, old: Version, new: Version) -> Report:
        """Diff a single pair of versions."""
        logger.debug("Analyzing migration %s -> %s", old.number, new.number)
        report = Report(from_version=old.number, to_version=new.number)
        new_entities = index_by_name(new.entities)

        for old_entity in old.entities:
            new_entity = new_entities.get(old_entity.name)
            if new_entity is None:
                self._add_problem(report, MissingEntity(entity_name=old_entity.name))
            else:
                self._diff_entity(report, old_entity, new_entity)

        return report

    def _diff_entity(self, report: Report, old: Entity, new: Entity):
        logger.debug("Analyzing entity %s", old.name)
        new_fields = index_by_name(new.fields)

        for old_field in old.fields:
            new_field = new_fields.get(old_field.name)
            if new_field is None:
                self._add_problem(report, MissingField(
                    entity_name=old.name,
                    field_name=old_field.name,
                ))
            else:
                self._diff_field(report, old, old_field, new_field)

    def _diff_field(self, report: Report, entity: Entity, old: Field, new: Field):
        logger.debug("Analyzing field %s.%s", entity.name, old.name)
        for key, old_value in old.attributes.items():
            # Absent on the new side compares as None, never as ""
            new_value = new.attributes.get(key)
            if old_value != new_value:
                self._add_problem(report, ChangedAttribute(
                    entity_name=entity.name,
                    field_name=old.name,
                    attribute=key,
                    old_value=old_value,
                    new_value=new_value,
                ))

    def _add_problem(self, report: Report, problem: Problem):
        logger.debug(
            "Version %s: %s on %s",
            report.to_version, problem.kind.value, _describe_target(problem),
        )
        report.problems.append(problem)


def _describe_target(problem: Problem) -> str:
    field_name = getattr(problem, "field_name", None)
    if field_name is None:
        return problem.entity_name
    return f"{problem.entity_name}.{field_name}"


def diff(versions: Sequence[Version]) -> list[Report]:
    """Convenience function to diff a version chain."""
    return Differ().diff(versions)
