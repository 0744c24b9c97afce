"""Shared pytest fixtures."""

from __future__ import annotations

import shutil
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from release_forge.deployment.constants import ReleasePaths
from release_forge.deployment.shell_commands.types import CommandResult

RESOURCES_SOURCE = Path(__file__).parent / "resources"


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """A project checkout holding the sample release resources."""
    root = tmp_path / "demo-app"
    shutil.copytree(RESOURCES_SOURCE, root)
    return root


@pytest.fixture
def release_paths(project_root: Path) -> ReleasePaths:
    return ReleasePaths(project_root)


class FakeCloudRun:
    """In-memory deployment target.

    Stores the last manifest replaced per (kind, name) and records every
    call, so tests can count collaborator invocations.
    """

    def __init__(
        self,
        *,
        replace_ok: bool = True,
        execute_ok: bool = True,
        describe_url: str | None = "https://demo-app-abc123-ew.a.run.app",
    ) -> None:
        self.replace_ok = replace_ok
        self.execute_ok = execute_ok
        self.describe_url = describe_url
        self.resources: dict[tuple[str, str], str] = {}
        self.calls: list[tuple[str, str]] = []

    def replace(self, manifest) -> CommandResult:  # type: ignore[no-untyped-def]
        self.calls.append(("replace", manifest.kind))
        if not self.replace_ok:
            return CommandResult(
                success=False, stderr="PERMISSION_DENIED: caller lacks run.services.replace", returncode=1
            )
        self.resources[(manifest.kind, manifest.name)] = manifest.content
        return CommandResult(success=True)

    def execute(self, job_name: str) -> CommandResult:
        self.calls.append(("execute", job_name))
        if not self.execute_ok:
            return CommandResult(
                success=False, stderr=f"Execution {job_name}-x7k2p failed", returncode=1
            )
        return CommandResult(success=True)

    def describe(self, service_name: str) -> CommandResult:
        self.calls.append(("describe", service_name))
        if self.describe_url is None:
            return CommandResult(success=False, stderr="NOT_FOUND", returncode=1)
        return CommandResult(success=True, stdout=f"{self.describe_url}\n")

    def count(self, operation: str, kind: str | None = None) -> int:
        return sum(
            1 for op, arg in self.calls if op == operation and (kind is None or arg == kind)
        )


@pytest.fixture
def fake_target() -> FakeCloudRun:
    return FakeCloudRun()


@pytest.fixture
def mock_console() -> MagicMock:
    return MagicMock()
