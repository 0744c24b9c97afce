"""Shell command abstractions for build and release operations.

This package provides a thin interface over the command-line tools the
release pipeline drives:

- docker: image build and push
- gcloud: credentials and Cloud Run replace/execute/describe
- git: commit detection

Usage:
    from release_forge.deployment.shell_commands import ShellCommands

    commands = ShellCommands(project_root=Path("."), project_id="my-project")
    commands.docker.build(image_url, Path("."))
"""

from pathlib import Path

from .docker import DockerCommands
from .gcloud import GcloudCommands
from .git import GitCommands
from .runner import CommandRunner
from .types import CommandResult


class ShellCommands:
    """Unified interface for all shell command operations.

    Attributes:
        docker: Docker-related commands
        gcloud: gcloud-related commands
        git: Git repository commands
    """

    def __init__(self, project_root: Path, project_id: str | None = None) -> None:
        """Initialize the shell commands executor.

        Args:
            project_root: Path to the project root directory.
                         Commands will be executed from this directory by default.
            project_id: Optional cloud project passed to gcloud commands
        """
        self._project_root = Path(project_root)
        self._runner = CommandRunner(self._project_root)

        self.docker = DockerCommands(self._runner)
        self.gcloud = GcloudCommands(self._runner, project_id=project_id)
        self.git = GitCommands(self._runner)

    @property
    def project_root(self) -> Path:
        """Get the project root path."""
        return self._project_root


__all__ = [
    "ShellCommands",
    "CommandResult",
    "DockerCommands",
    "GcloudCommands",
    "GitCommands",
    "CommandRunner",
]
