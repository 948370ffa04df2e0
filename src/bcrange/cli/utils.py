"""CLI utilities shared by the report commands."""

from dataclasses import dataclass
from pathlib import Path

import click
from rich.console import Console

from bcrange.analysis.models import Project, WorkspaceAnalysis
from bcrange.analysis.ops import RangeAnalyzer
from bcrange.config.loader import load_config
from bcrange.config.models import BcRangeConfig
from bcrange.core.errors import BcRangeError
from bcrange.core.logging import configure_logging
from bcrange.workspace.discovery import WorkspaceScanner


@dataclass
class Workspace:
    """A loaded workspace: resolved config plus scanned projects."""

    root: Path
    config: BcRangeConfig
    projects: list[Project]

    def shared_mode(self, override: bool | None) -> bool:
        if override is not None:
            return override
        return self.config.analysis.shared_range_mode

    def analyze(self, *, shared_mode: bool) -> WorkspaceAnalysis:
        return RangeAnalyzer().analyze(self.projects, shared_mode=shared_mode)


def load_workspace(path: Path) -> Workspace:
    """Load config for the workspace at path and scan all of its projects.

    Logging is reconfigured from the loaded config unless -v was given.

    Raises:
        click.ClickException: On config or workspace errors.
    """
    root = path.resolve()
    ctx = click.get_current_context()
    verbose = bool((ctx.find_root().obj or {}).get("verbose"))
    try:
        config = load_config(root)
        if not verbose:
            configure_logging(config=config.logging)
        projects = WorkspaceScanner(root, config.scan).scan()
    except BcRangeError as e:
        raise click.ClickException(str(e)) from e
    return Workspace(root=root, config=config, projects=projects)


def get_console() -> Console:
    """Console bound to the current stdout."""
    return Console(highlight=False)


shared_option = click.option(
    "--shared/--no-shared",
    "shared",
    default=None,
    help="Treat all project ranges as one shared range (default: from config)",
)
json_option = click.option("--json", "as_json", is_flag=True, help="Output as JSON")
path_argument = click.argument(
    "path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path)
)
