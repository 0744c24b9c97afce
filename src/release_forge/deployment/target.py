"""Deployment target runtime.

The release stages only need three operations from the runtime: replace a
resource from a manifest, execute a job and wait for it, and describe a
service's URL. ``CloudRunTarget`` provides them through gcloud.
"""

from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from loguru import logger

from .constants import ReleaseConstants
from .shell_commands.types import CommandResult

if TYPE_CHECKING:
    from .renderer import RenderedManifest
    from .shell_commands import GcloudCommands


class DeploymentTarget(Protocol):
    def replace(self, manifest: RenderedManifest) -> CommandResult: ...

    def execute(self, job_name: str) -> CommandResult: ...

    def describe(self, service_name: str) -> CommandResult: ...


class CloudRunTarget:
    """Cloud Run jobs and services in one region."""

    def __init__(
        self,
        gcloud: GcloudCommands,
        region: str,
        on_output: Callable[[str], None] | None = None,
    ) -> None:
        """Initialize the target.

        Args:
            gcloud: gcloud command executor
            region: Cloud Run region
            on_output: Optional callback receiving job execution output lines
        """
        self.gcloud = gcloud
        self.region = region
        self.on_output = on_output
        self._constants = ReleaseConstants()

    def replace(self, manifest: RenderedManifest) -> CommandResult:
        group = "jobs" if manifest.kind == self._constants.JOB_KIND else "services"

        with tempfile.NamedTemporaryFile(
            "w", suffix=".yaml", prefix=f"release-{group}-", delete=False
        ) as f:
            f.write(manifest.content)
            manifest_file = Path(f.name)

        try:
            logger.info(f"Replacing Cloud Run {group} '{manifest.name}' in {self.region}")
            return self.gcloud.run_replace(group, manifest_file, self.region)
        finally:
            manifest_file.unlink(missing_ok=True)

    def execute(self, job_name: str) -> CommandResult:
        logger.info(f"Executing Cloud Run job '{job_name}' and waiting for completion")
        return self.gcloud.run_jobs_execute(
            job_name, self.region, wait=True, on_output=self.on_output
        )

    def describe(self, service_name: str) -> CommandResult:
        return self.gcloud.run_services_describe_url(service_name, self.region)
