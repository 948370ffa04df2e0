"""Rich renderables for the report commands."""

from __future__ import annotations

from rich.text import Text
from rich.tree import Tree

from bcrange.analysis.models import ChildConflict, Conflict, Gap, Project, WorkspaceAnalysis
from bcrange.core.formatting import format_location, format_names, format_span, pluralize
from bcrange.parsing.kinds import ALL_KINDS
from bcrange.parsing.models import Declaration


def _conflict_label(conflict: Conflict) -> Text:
    label = Text()
    label.append(f"{conflict.kind.keyword} {conflict.id}", style="bold red")
    label.append(f"  ({format_names(list(conflict.project_names))})", style="dim")
    return label


def _child_conflict_label(conflict: ChildConflict, child_word: str) -> Text:
    label = Text()
    label.append(f"{conflict.base_name} {child_word} {conflict.child_id}", style="bold red")
    label.append(f"  ({format_names(list(conflict.project_names))})", style="dim")
    return label


def add_conflicts(tree: Tree, analysis: WorkspaceAnalysis) -> None:
    """Add one branch per non-empty conflict category."""
    if analysis.conflicts:
        branch = tree.add(
            Text(f"Object conflicts ({len(analysis.conflicts)})", style="bold red")
        )
        for conflict in analysis.conflicts:
            node = branch.add(_conflict_label(conflict))
            for decl in conflict.declarations:
                where = format_location(decl.location.unit_id, decl.location.line)
                node.add(Text(f"{decl.name}  {where}"))

    for title, child_word, conflicts in (
        ("Field conflicts", "field", analysis.field_conflicts),
        ("Enum value conflicts", "value", analysis.value_conflicts),
    ):
        if not conflicts:
            continue
        branch = tree.add(Text(f"{title} ({len(conflicts)})", style="bold red"))
        for child_conflict in conflicts:
            node = branch.add(_child_conflict_label(child_conflict, child_word))
            for occ in child_conflict.occurrences:
                node.add(
                    Text(
                        f"{occ.child.name} in {occ.extension_name} [{occ.project_name}]  "
                        f"{format_location(occ.child.location.unit_id, occ.child.location.line)}"
                    )
                )


def _declaration_label(decl: Declaration) -> str:
    label = f"{decl.id}  {decl.name}"
    if decl.extends_name:
        label += f" extends {decl.extends_name}"
    return label


def add_project_declarations(tree: Tree, project: Project) -> None:
    """project -> kind -> declaration (-> fields/values)."""
    branch = tree.add(
        Text.assemble(
            (project.name, "bold cyan"),
            (f"  {pluralize(len(project.declarations), 'object')}", "dim"),
        )
    )
    if not project.declarations:
        branch.add(Text("No objects", style="dim"))
        return
    for kind in ALL_KINDS:
        decls = [d for d in project.declarations if d.kind is kind]
        if not decls:
            continue
        kind_branch = branch.add(Text(f"{kind.keyword} ({len(decls)})"))
        for decl in decls:
            node = kind_branch.add(Text(_declaration_label(decl)))
            for child in decl.children:
                node.add(Text(f"{child.id}  {child.name}", style="dim"))


def _gap_label(gap: Gap) -> str:
    return f"{format_span(gap.start, gap.end)}  ({pluralize(gap.count, 'id')})"


def add_gaps(tree: Tree, title: str, gaps: list[Gap], *, empty: str) -> None:
    branch = tree.add(Text(title, style="bold cyan"))
    if not gaps:
        branch.add(Text(empty, style="dim"))
        return
    for gap in gaps:
        branch.add(Text(_gap_label(gap)))
