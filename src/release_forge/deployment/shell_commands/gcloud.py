"""gcloud command abstractions.

This module wraps the Cloud Run and credential operations used by the
release pipeline. Every call is a single gcloud invocation; none of them
are retried here.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from .types import CommandResult

if TYPE_CHECKING:
    from .runner import CommandRunner

ResourceGroup = Literal["jobs", "services"]


class GcloudCommands:
    """gcloud-related shell commands.

    Provides operations for:
    - Credential activation and Docker registry auth
    - Cloud Run resource replacement (jobs and services)
    - Job execution with synchronous wait
    - Service description (status URL)
    """

    def __init__(self, runner: CommandRunner, project_id: str | None = None) -> None:
        """Initialize gcloud commands.

        Args:
            runner: Command runner for executing shell commands
            project_id: Optional project passed as --project on every call
        """
        self._runner = runner
        self._project_id = project_id

    def _project_args(self) -> list[str]:
        return ["--project", self._project_id] if self._project_id else []

    # =========================================================================
    # Credentials
    # =========================================================================

    def activate_credentials(self, credentials_file: Path) -> CommandResult:
        """Activate short-lived credentials from an external account file.

        The file is produced by the CI identity exchange (workload identity
        federation); this only hands it to gcloud.

        Args:
            credentials_file: Path to the credential configuration file

        Returns:
            CommandResult with activation status
        """
        return self._runner.run(
            ["gcloud", "auth", "login", f"--cred-file={credentials_file}", "--quiet"]
        )

    def configure_docker(self, registry_host: str) -> CommandResult:
        """Register gcloud as Docker credential helper for a registry host.

        Args:
            registry_host: Registry hostname (e.g., "europe-west1-docker.pkg.dev")

        Returns:
            CommandResult with configuration status
        """
        return self._runner.run(
            ["gcloud", "auth", "configure-docker", registry_host, "--quiet"]
        )

    # =========================================================================
    # Cloud Run
    # =========================================================================

    def run_replace(
        self,
        group: ResourceGroup,
        manifest_file: Path,
        region: str,
    ) -> CommandResult:
        """Replace a Cloud Run job or service from a YAML manifest.

        `gcloud run {jobs|services} replace` overwrites the whole declarative
        definition of the named resource, creating it if it does not exist.

        Args:
            group: "jobs" or "services"
            manifest_file: Path to the rendered manifest
            region: Cloud Run region

        Returns:
            CommandResult with replace status
        """
        cmd = [
            "gcloud",
            "run",
            group,
            "replace",
            str(manifest_file),
            f"--region={region}",
            *self._project_args(),
            "--quiet",
        ]
        return self._runner.run(cmd)

    def run_jobs_execute(
        self,
        job_name: str,
        region: str,
        *,
        wait: bool = True,
        on_output: Callable[[str], None] | None = None,
    ) -> CommandResult:
        """Execute a Cloud Run job.

        With ``wait=True`` the call blocks until the execution reaches a
        terminal state and exits non-zero if the execution failed.

        Args:
            job_name: Name of the job to execute
            region: Cloud Run region
            wait: Whether to block until the execution completes
            on_output: Optional callback for real-time output streaming

        Returns:
            CommandResult with execution status
        """
        cmd = [
            "gcloud",
            "run",
            "jobs",
            "execute",
            job_name,
            f"--region={region}",
            *self._project_args(),
        ]
        if wait:
            cmd.append("--wait")

        if on_output:
            return self._runner.run_streaming(cmd, on_output=on_output)
        return self._runner.run(cmd)

    def run_services_describe_url(self, service_name: str, region: str) -> CommandResult:
        """Describe a Cloud Run service and return its status URL on stdout.

        Args:
            service_name: Name of the service
            region: Cloud Run region

        Returns:
            CommandResult whose stdout is the service URL
        """
        return self._runner.run(
            [
                "gcloud",
                "run",
                "services",
                "describe",
                service_name,
                f"--region={region}",
                *self._project_args(),
                "--format=value(status.url)",
            ]
        )
