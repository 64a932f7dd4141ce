"""Data models for xcmigrate."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Optional


class ProblemKind(Enum):
    MISSING_ENTITY = "MISSING_ENTITY"
    MISSING_FIELD = "MISSING_FIELD"
    CHANGED_ATTRIBUTE = "CHANGED_ATTRIBUTE"


@dataclass
class Field:
    """An attribute or relationship slot of an entity."""
    name: str
    attributes: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"name": self.name, "attributes": dict(self.attributes)}


@dataclass
class Entity:
    """A named record type owning an ordered list of fields."""
    name: str
    fields: list[Field] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"name": self.name, "fields": [f.to_dict() for f in self.fields]}


@dataclass
class Version:
    """One immutable snapshot of the model."""
    number: int
    entities: list[Entity] = field(default_factory=list)
    path: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "number": self.number,
            "path": self.path,
            "entities": [e.to_dict() for e in self.entities],
        }


@dataclass
class Problem:
    """
    A regression detected between two adjacent versions.

    `key` and `resolved` are filled in after creation by the
    fingerprinting and suppression stages.
    """
    kind: ClassVar[ProblemKind]

    entity_name: str
    key: str = field(default="", init=False)
    resolved: bool = field(default=False, init=False)

    def to_dict(self) -> dict:
        return {
            "type": self.kind.value,
            "entity": self.entity_name,
            "key": self.key,
            "resolved": self.resolved,
        }


@dataclass
class MissingEntity(Problem):
    kind: ClassVar[ProblemKind] = ProblemKind.MISSING_ENTITY


@dataclass
class MissingField(Problem):
    kind: ClassVar[ProblemKind] = ProblemKind.MISSING_FIELD

    field_name: str

    def to_dict(self) -> dict:
        result = super().to_dict()
        result["field"] = self.field_name
        return result


@dataclass
class ChangedAttribute(Problem):
    kind: ClassVar[ProblemKind] = ProblemKind.CHANGED_ATTRIBUTE

    field_name: str
    attribute: str
    old_value: Optional[str] = None
    # None when the attribute is absent from the new field
    new_value: Optional[str] = None

    def to_dict(self) -> dict:
        result = super().to_dict()
        result.update({
            "field": self.field_name,
            "attribute": self.attribute,
            "old_value": self.old_value,
            "new_value": self.new_value,
        })
        return result


@dataclass
class Report:
    """All problems found between one adjacent version pair."""
    from_version: int
    to_version: int
    problems: list[Problem] = field(default_factory=list)

    @property
    def unresolved(self) -> list[Problem]:
        return [p for p in self.problems if not p.resolved]

    @property
    def is_resolved(self) -> bool:
        return all(p.resolved for p in self.problems)

    def to_dict(self) -> dict:
        return {
            "from": self.from_version,
            "to": self.to_version,
            "problems": [p.to_dict() for p in self.problems],
        }


@dataclass
class WarningEntry:
    """A recoverable condition reported during a run."""
    code: str
    message: str
    path: Optional[str] = None

    def to_dict(self) -> dict:
        result = {"code": self.code, "message": self.message}
        if self.path:
            result["path"] = self.path
        return result


@dataclass
class RunResult:
    """Outcome of a complete migration check."""
    reports: list[Report] = field(default_factory=list)
    warnings: list[WarningEntry] = field(default_factory=list)
    versions: list[int] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return all(r.is_resolved for r in self.reports)

    @property
    def unresolved_count(self) -> int:
        return sum(len(r.unresolved) for r in self.reports)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "versions": list(self.versions),
            "unresolved": self.unresolved_count,
            "reports": [r.to_dict() for r in self.reports],
            "warnings": [w.to_dict() for w in self.warnings],
        }


@dataclass
class ErrorResponse:
    """Fatal error structure."""
    success: bool = False
    error: Optional[dict[str, Any]] = None

    @property
    def code(self) -> str:
        return (self.error or {}).get("code", "")

    def to_dict(self) -> dict:
        result = {"success": self.success}
        if self.error:
            result["error"] = self.error
        return result
