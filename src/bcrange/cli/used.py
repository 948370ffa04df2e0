"""bcr used command - list declared object ids per project."""

import json
from pathlib import Path

import click
from rich.text import Text
from rich.tree import Tree

from bcrange.cli.render import add_conflicts, add_project_declarations
from bcrange.cli.utils import get_console, json_option, load_workspace, path_argument, shared_option


@click.command()
@path_argument
@shared_option
@json_option
def used_command(path: Path, shared: bool | None, as_json: bool) -> None:
    """Show declared objects for every project in the workspace.

    In shared range mode, conflicts between projects are listed first.
    PATH is the workspace root (default: current directory).
    """
    workspace = load_workspace(path)
    shared_mode = workspace.shared_mode(shared)
    analysis = workspace.analyze(shared_mode=shared_mode)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "shared": shared_mode,
                    "projects": [
                        {
                            "name": p.name,
                            "ranges": [{"start": r.start, "end": r.end} for r in p.id_ranges],
                            "objects": [d.to_dict() for d in p.declarations],
                        }
                        for p in analysis.projects
                    ],
                    "conflicts": [c.to_dict() for c in analysis.conflicts],
                    "field_conflicts": [c.to_dict() for c in analysis.field_conflicts],
                    "value_conflicts": [c.to_dict() for c in analysis.value_conflicts],
                }
            )
        )
        return

    console = get_console()
    if not analysis.projects:
        console.print("No projects found.")
        return

    tree = Tree(Text(f"Used ids ({workspace.root.name})"), guide_style="dim")
    if shared_mode:
        add_conflicts(tree, analysis)
    for project in analysis.projects:
        add_project_declarations(tree, project)
    console.print(tree)
