"""Docker command abstractions.

This module provides commands for building and pushing the release image.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from .types import CommandResult

if TYPE_CHECKING:
    from .runner import CommandRunner


class DockerCommands:
    """Docker-related shell commands.

    Provides operations for:
    - Image builds from a build context
    - Pushing images to a remote registry
    """

    def __init__(self, runner: CommandRunner) -> None:
        """Initialize Docker commands.

        Args:
            runner: Command runner for executing shell commands
        """
        self._runner = runner

    def build(
        self,
        image_url: str,
        context: Path,
        *,
        dockerfile: Path | None = None,
        on_output: Callable[[str], None] | None = None,
    ) -> CommandResult:
        """Build an image and tag it with its full registry reference.

        Args:
            image_url: Full image reference used as the tag
            context: Build context directory
            dockerfile: Optional Dockerfile path (defaults to context/Dockerfile)
            on_output: Optional callback for real-time output streaming

        Returns:
            CommandResult with build status

        Example:
            >>> docker.build("europe-west1-docker.pkg.dev/p/repo/acme/app:v1", Path("."))
        """
        cmd = ["docker", "build", "-t", image_url]
        if dockerfile is not None:
            cmd.extend(["-f", str(dockerfile)])
        cmd.append(str(context))

        if on_output:
            return self._runner.run_streaming(cmd, on_output=on_output)
        return self._runner.run(cmd)

    def push_image(
        self,
        image_url: str,
        *,
        on_output: Callable[[str], None] | None = None,
    ) -> CommandResult:
        """Push a Docker image to a remote registry.

        Args:
            image_url: Full image reference including registry host
            on_output: Optional callback for real-time output streaming

        Returns:
            CommandResult with push status
        """
        cmd = ["docker", "push", image_url]
        if on_output:
            return self._runner.run_streaming(cmd, on_output=on_output)
        return self._runner.run(cmd)
