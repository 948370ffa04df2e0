"""bcr next-id command - suggest the next free id for a new object."""

import json
import sys
from pathlib import Path

import click

from bcrange.cli.utils import json_option, load_workspace, path_argument, shared_option
from bcrange.completion import suggest_next_id
from bcrange.parsing.kinds import ALL_KINDS, DeclarationKind


@click.command()
@click.argument(
    "kind",
    type=click.Choice([k.keyword for k in ALL_KINDS], case_sensitive=False),
)
@path_argument
@click.option(
    "--file",
    "file_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Source file the object will live in; selects the owning project",
)
@shared_option
@json_option
def next_id_command(
    kind: str, path: Path, file_path: Path | None, shared: bool | None, as_json: bool
) -> None:
    """Print the next available id for an object KIND.

    Without shared range mode the id comes from the project that owns
    --file (or PATH, when --file is not given). Exits with status 1 when
    no id is available.
    """
    workspace = load_workspace(path)
    decl_kind = DeclarationKind(kind.lower())
    target = (file_path or workspace.root).resolve()

    suggestion = suggest_next_id(
        workspace.projects,
        decl_kind,
        target,
        shared_mode=workspace.shared_mode(shared),
    )

    if as_json:
        click.echo(json.dumps(suggestion.to_dict()))
    elif suggestion.next_id is not None:
        click.echo(str(suggestion.next_id))
    else:
        click.echo(suggestion.message, err=True)

    if suggestion.next_id is None:
        sys.exit(1)
