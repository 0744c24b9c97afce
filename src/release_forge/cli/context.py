"""CLI context and dependency container."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import click
import typer
from dotenv import load_dotenv

from release_forge.cli.shared.console import CLIConsole, console
from release_forge.deployment.constants import ReleaseConstants, ReleasePaths
from release_forge.utils.paths import get_project_root


@dataclass(frozen=True)
class CLIContext:
    """Runtime dependencies for CLI commands."""

    console: CLIConsole
    project_root: Path
    constants: ReleaseConstants
    paths: ReleasePaths


def build_cli_context(resources_dir: Path | None = None) -> CLIContext:
    """Build a fresh CLIContext.

    Loads ``.env`` from the project root without overriding variables that
    are already set.
    """
    project_root = get_project_root()
    paths = ReleasePaths(project_root, resources_dir=resources_dir)
    load_dotenv(paths.env_file, override=False)

    return CLIContext(
        console=console,
        project_root=project_root,
        constants=ReleaseConstants(),
        paths=paths,
    )


def get_cli_context(ctx: typer.Context | None = None) -> CLIContext:
    """Return the CLIContext from Typer, falling back to a new instance."""
    context = ctx or click.get_current_context(silent=True)
    if context and isinstance(context.obj, CLIContext):
        return context.obj
    return build_cli_context()
