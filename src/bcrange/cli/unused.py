"""bcr unused command - list free id gaps."""

import json
from pathlib import Path

import click
from rich.text import Text
from rich.tree import Tree

from bcrange.cli.render import add_gaps
from bcrange.cli.utils import get_console, json_option, load_workspace, path_argument, shared_option
from bcrange.core.formatting import format_span, pluralize
from bcrange.parsing.kinds import ALL_KINDS


@click.command()
@path_argument
@shared_option
@json_option
def unused_command(path: Path, shared: bool | None, as_json: bool) -> None:
    """Show unused ids.

    Without shared range mode, gaps are listed per project. In shared range
    mode, gaps are listed per object kind over the merged ranges of all
    projects.
    """
    workspace = load_workspace(path)
    shared_mode = workspace.shared_mode(shared)
    analysis = workspace.analyze(shared_mode=shared_mode)

    if as_json:
        payload: dict[str, object] = {"shared": shared_mode}
        if shared_mode:
            payload["ranges"] = [
                {"start": r.start, "end": r.end, "count": r.size} for r in analysis.shared_ranges
            ]
            payload["gaps"] = {
                kind.value: [g.to_dict() for g in gaps]
                for kind, gaps in analysis.shared_gaps_by_kind.items()
            }
        else:
            payload["gaps"] = {
                name: [g.to_dict() for g in gaps]
                for name, gaps in analysis.gaps_by_project.items()
            }
        click.echo(json.dumps(payload))
        return

    console = get_console()
    if not analysis.projects:
        console.print("No projects found.")
        return

    if shared_mode:
        spans = ", ".join(format_span(r.start, r.end) for r in analysis.shared_ranges) or "none"
        total = pluralize(sum(r.size for r in analysis.shared_ranges), "id")
        tree = Tree(Text(f"Unused ids (shared range: {spans}, {total})"), guide_style="dim")
        for kind in ALL_KINDS:
            add_gaps(
                tree,
                kind.keyword,
                analysis.shared_gaps_by_kind.get(kind, []),
                empty="No free ids",
            )
    else:
        tree = Tree(Text(f"Unused ids ({workspace.root.name})"), guide_style="dim")
        for project in analysis.projects:
            empty = "No free ids" if project.id_ranges else "No id ranges defined"
            add_gaps(tree, project.name, analysis.gaps_by_project[project.name], empty=empty)
    console.print(tree)
