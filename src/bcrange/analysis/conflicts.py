"""Cross-project conflict detection.

Only collisions between different projects are reported. Inside one project
the author controls every declaration, and reusing an id there is a separate
failure mode this module does not look for.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence

from bcrange.analysis.models import ChildConflict, ChildOccurrence, Conflict
from bcrange.parsing.kinds import DeclarationKind
from bcrange.parsing.models import Declaration, EnumValue, TableField

ProjectDeclarations = Mapping[str, Sequence[Declaration]]


def find_conflicts(project_declarations: ProjectDeclarations) -> list[Conflict]:
    """Find (kind, id) pairs declared by two or more projects.

    Returns conflicts sorted by (kind keyword, id).
    """
    groups: dict[tuple[DeclarationKind, int], list[tuple[str, Declaration]]] = {}
    for project_name, declarations in project_declarations.items():
        for decl in declarations:
            groups.setdefault((decl.kind, decl.id), []).append((project_name, decl))

    conflicts: list[Conflict] = []
    for (kind, obj_id), entries in groups.items():
        projects = {name for name, _ in entries}
        if len(projects) < 2:
            continue
        conflicts.append(
            Conflict(
                kind=kind,
                id=obj_id,
                declarations=tuple(decl for _, decl in entries),
                project_names=tuple(sorted(projects)),
            )
        )
    conflicts.sort(key=lambda c: (c.kind.value, c.id))
    return conflicts


def _find_child_conflicts(
    project_declarations: ProjectDeclarations,
    kind: DeclarationKind,
    children_of: Callable[[Declaration], Sequence[TableField] | Sequence[EnumValue] | None],
) -> list[ChildConflict]:
    groups: dict[tuple[str, int], list[ChildOccurrence]] = {}
    for project_name, declarations in project_declarations.items():
        for decl in declarations:
            if decl.kind is not kind or not decl.extends_name:
                continue
            children = children_of(decl)
            if not children:
                continue
            for child in children:
                groups.setdefault((decl.extends_name, child.id), []).append(
                    ChildOccurrence(
                        child=child,
                        extension_id=decl.id,
                        extension_name=decl.name,
                        project_name=project_name,
                    )
                )

    conflicts = [
        ChildConflict(base_name=base, child_id=child_id, occurrences=tuple(occurrences))
        for (base, child_id), occurrences in groups.items()
        if len({o.project_name for o in occurrences}) >= 2
    ]
    conflicts.sort(key=lambda c: (c.base_name, c.child_id))
    return conflicts


def find_field_conflicts(project_declarations: ProjectDeclarations) -> list[ChildConflict]:
    """Find field ids reused by table extensions of the same base table.

    Only table extensions with an ``extends`` target and at least one field
    take part. Sorted by (base table, field id).
    """
    return _find_child_conflicts(
        project_declarations, DeclarationKind.TABLE_EXTENSION, lambda d: d.fields
    )


def find_value_conflicts(project_declarations: ProjectDeclarations) -> list[ChildConflict]:
    """Find enum value ids reused by enum extensions of the same base enum."""
    return _find_child_conflicts(
        project_declarations, DeclarationKind.ENUM_EXTENSION, lambda d: d.values
    )
