"""Unit tests for docker and git command wrappers."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

from release_forge.deployment.shell_commands.docker import DockerCommands
from release_forge.deployment.shell_commands.git import GitCommands
from release_forge.deployment.shell_commands.types import CommandResult

IMAGE = "europe-west1-docker.pkg.dev/p1/repo/acme/demo-app:v1"


class TestDockerCommands:
    def test_build_tags_with_full_reference(self) -> None:
        runner = MagicMock()
        runner.run.return_value = CommandResult(success=True)

        DockerCommands(runner).build(IMAGE, Path("."))

        assert runner.run.call_args[0][0] == ["docker", "build", "-t", IMAGE, "."]

    def test_build_with_dockerfile_streams(self) -> None:
        runner = MagicMock()
        runner.run_streaming.return_value = CommandResult(success=True)

        DockerCommands(runner).build(
            IMAGE, Path("app"), dockerfile=Path("app/Dockerfile.prod"), on_output=print
        )

        cmd = runner.run_streaming.call_args[0][0]
        assert cmd == ["docker", "build", "-t", IMAGE, "-f", "app/Dockerfile.prod", "app"]

    def test_push(self) -> None:
        runner = MagicMock()
        runner.run.return_value = CommandResult(success=True)

        result = DockerCommands(runner).push_image(IMAGE)

        assert result.success
        assert runner.run.call_args[0][0] == ["docker", "push", IMAGE]


class TestGitCommands:
    def test_head_sha(self) -> None:
        runner = MagicMock()
        runner.run.return_value = CommandResult(success=True, stdout="abc123\n")

        assert GitCommands(runner).head_sha() == "abc123"
        assert runner.run.call_args[0][0] == ["git", "rev-parse", "HEAD"]

    def test_head_sha_outside_repository(self) -> None:
        runner = MagicMock()
        runner.run.return_value = CommandResult(
            success=False, stderr="fatal: not a git repository", returncode=128
        )

        assert GitCommands(runner).head_sha() is None

