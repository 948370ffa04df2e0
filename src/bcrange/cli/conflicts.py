"""bcr conflicts command - report ids claimed by more than one project."""

import json
import sys
from pathlib import Path

import click
from rich.tree import Tree

from bcrange.cli.render import add_conflicts
from bcrange.cli.utils import get_console, json_option, load_workspace, path_argument
from bcrange.core.formatting import pluralize


@click.command()
@path_argument
@json_option
def conflicts_command(path: Path, as_json: bool) -> None:
    """Report object, field and enum value conflicts between projects.

    Conflicts are checked whether or not shared range mode is configured.
    Exits with status 1 if any conflict is found.
    """
    workspace = load_workspace(path)
    analysis = workspace.analyze(shared_mode=True)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "total": analysis.total_conflicts,
                    "conflicts": [c.to_dict() for c in analysis.conflicts],
                    "field_conflicts": [c.to_dict() for c in analysis.field_conflicts],
                    "value_conflicts": [c.to_dict() for c in analysis.value_conflicts],
                }
            )
        )
    elif analysis.total_conflicts == 0:
        get_console().print(
            f"No conflicts across {pluralize(len(analysis.projects), 'project')}."
        )
    else:
        tree = Tree(
            f"{pluralize(analysis.total_conflicts, 'conflict')} "
            f"across {pluralize(len(analysis.projects), 'project')}",
            guide_style="dim",
        )
        add_conflicts(tree, analysis)
        get_console().print(tree)

    if analysis.total_conflicts:
        sys.exit(1)
