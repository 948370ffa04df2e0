"""Analysis models - ranges, gaps, conflicts and project records."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from bcrange.parsing.kinds import DeclarationKind
from bcrange.parsing.models import Declaration, EnumValue, TableField


@dataclass(frozen=True, slots=True)
class IdRange:
    """Inclusive identifier range."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"Range end {self.end} is before start {self.start}")

    def __contains__(self, item: object) -> bool:
        return isinstance(item, int) and self.start <= item <= self.end

    @property
    def size(self) -> int:
        return self.end - self.start + 1


@dataclass(frozen=True, slots=True)
class Gap:
    """Maximal run of unused identifiers inside one range."""

    start: int
    end: int

    @property
    def count(self) -> int:
        return self.end - self.start + 1

    def to_dict(self) -> dict[str, int]:
        return {"start": self.start, "end": self.end, "count": self.count}


@dataclass(frozen=True, slots=True)
class Project:
    """A project record assembled from a manifest and its scanned sources."""

    name: str
    id_ranges: tuple[IdRange, ...] = ()
    declarations: tuple[Declaration, ...] = ()
    root: Path | None = None

    @property
    def used_ids(self) -> set[int]:
        return {decl.id for decl in self.declarations}


@dataclass(frozen=True, slots=True)
class Conflict:
    """Same (kind, id) declared by two or more projects."""

    kind: DeclarationKind
    id: int
    declarations: tuple[Declaration, ...]
    project_names: tuple[str, ...]

    def to_dict(self) -> dict[str, object]:
        return {
            "kind": self.kind.value,
            "id": self.id,
            "projects": list(self.project_names),
            "declarations": [d.to_dict() for d in self.declarations],
        }


@dataclass(frozen=True, slots=True)
class ChildOccurrence:
    """A field or value together with the extension and project that own it."""

    child: TableField | EnumValue
    extension_id: int
    extension_name: str
    project_name: str


@dataclass(frozen=True, slots=True)
class ChildConflict:
    """Same field/value id used by extensions of one base object from 2+ projects."""

    base_name: str
    child_id: int
    occurrences: tuple[ChildOccurrence, ...]

    @property
    def project_names(self) -> tuple[str, ...]:
        return tuple(sorted({o.project_name for o in self.occurrences}))

    def to_dict(self) -> dict[str, object]:
        return {
            "base": self.base_name,
            "id": self.child_id,
            "projects": list(self.project_names),
            "occurrences": [
                {
                    "name": o.child.name,
                    "extension_id": o.extension_id,
                    "extension": o.extension_name,
                    "project": o.project_name,
                    "unit": o.child.location.unit_id,
                    "line": o.child.location.line,
                }
                for o in self.occurrences
            ],
        }


@dataclass
class WorkspaceAnalysis:
    """Result of one full analysis pass."""

    projects: list[Project]
    shared_mode: bool
    gaps_by_project: dict[str, list[Gap]] = field(default_factory=dict)
    shared_ranges: list[IdRange] = field(default_factory=list)
    shared_gaps_by_kind: dict[DeclarationKind, list[Gap]] = field(default_factory=dict)
    conflicts: list[Conflict] = field(default_factory=list)
    field_conflicts: list[ChildConflict] = field(default_factory=list)
    value_conflicts: list[ChildConflict] = field(default_factory=list)
    pass_id: str | None = None

    @property
    def total_conflicts(self) -> int:
        return len(self.conflicts) + len(self.field_conflicts) + len(self.value_conflicts)
