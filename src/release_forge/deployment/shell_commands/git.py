"""Git command abstractions.

Used to find the commit being built or released when the CI environment
does not provide it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .runner import CommandRunner


class GitCommands:
    """Git-related shell commands."""

    def __init__(self, runner: CommandRunner) -> None:
        """Initialize Git commands.

        Args:
            runner: Command runner for executing shell commands
        """
        self._runner = runner

    def head_sha(self) -> str | None:
        """Return the full SHA of HEAD, or None outside a repository."""
        result = self._runner.run(["git", "rev-parse", "HEAD"])
        sha = result.stdout.strip()
        return sha if result.success and sha else None
