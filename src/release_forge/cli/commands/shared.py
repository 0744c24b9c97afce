"""Helpers shared by the build and release commands."""

from __future__ import annotations

from pathlib import Path

from release_forge.cli.shared.console import console, with_error_handling
from release_forge.deployment.errors import ConfigurationError
from release_forge.deployment.settings import github_repository_parts
from release_forge.deployment.shell_commands import ShellCommands

__all__ = [
    "console",
    "resolve_commit_sha",
    "resolve_repository_identity",
    "with_error_handling",
]


def resolve_commit_sha(commands: ShellCommands, commit_sha: str | None) -> str:
    """Use the given SHA, else HEAD of the checked-out repository.

    Raises:
        ConfigurationError: If neither is available
    """
    if commit_sha and commit_sha.strip():
        return commit_sha.strip()
    head = commands.git.head_sha()
    if head:
        return head
    raise ConfigurationError(
        "Commit SHA is required",
        details="Pass --commit-sha, set GITHUB_SHA, or run inside a git checkout.",
    )


def resolve_repository_identity(
    owner: str | None, image: str | None, project_root: Path
) -> tuple[str, str]:
    """Owner and image name, defaulting to the CI repository identity.

    The image name falls back to the project directory name when no CI
    repository is known.
    """
    ci_owner, ci_name = github_repository_parts()
    resolved_owner = owner or ci_owner
    if not resolved_owner:
        raise ConfigurationError(
            "Repository owner is required",
            details="Pass --owner or set GITHUB_REPOSITORY_OWNER.",
        )
    return resolved_owner, image or ci_name or project_root.name
