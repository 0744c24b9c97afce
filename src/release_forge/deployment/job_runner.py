"""Pre-deploy job runner.

Renders, replaces and executes a one-shot Cloud Run job (typically a
database migration) and blocks until it reaches a terminal state, so the
service is never updated against data a migration has not finished writing.

State machine::

    IDLE -> RENDERED -> SUBMITTED -> AWAITING -> SUCCEEDED | FAILED

``IDLE`` is also terminal when the job is not requested.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from ..utils.console_like import ConsoleLike, coalesce_console
from .config_merge import ResolvedConfiguration
from .constants import ReleaseConstants
from .errors import JobDeployError

if TYPE_CHECKING:
    from .renderer import ManifestRenderer
    from .target import DeploymentTarget


class JobState(Enum):
    """Lifecycle states of the pre-deploy job."""

    IDLE = "idle"
    RENDERED = "rendered"
    SUBMITTED = "submitted"
    AWAITING = "awaiting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class JobExecutionResult:
    """Outcome of the pre-deploy job.

    A job that was never submitted is vacuously successful.
    """

    submitted: bool
    completed: bool
    exit_status: int | None
    state: JobState
    job_name: str | None = None
    message: str = ""

    @property
    def succeeded(self) -> bool:
        return self.state in (JobState.IDLE, JobState.SUCCEEDED)

    @classmethod
    def skipped(cls) -> JobExecutionResult:
        return cls(submitted=False, completed=False, exit_status=None, state=JobState.IDLE)


class PreDeployJobRunner:
    """Runs the pre-deploy job to completion before the service update.

    Attributes:
        renderer: Manifest renderer
        target: Deployment target runtime
        template_path: Path to the job manifest template
        default_job_name: Job name used when the manifest has no metadata.name
        state: Current state of the last run
        transitions: States visited during the last run, in order
    """

    def __init__(
        self,
        renderer: ManifestRenderer,
        target: DeploymentTarget,
        template_path: Path,
        default_job_name: str,
        console: ConsoleLike | None = None,
    ) -> None:
        self.renderer = renderer
        self.target = target
        self.template_path = template_path
        self.default_job_name = default_job_name
        self.console = coalesce_console(console)
        self._constants = ReleaseConstants()
        self.state = JobState.IDLE
        self.transitions: list[JobState] = [JobState.IDLE]

    def _transition(self, state: JobState) -> None:
        logger.debug(f"Pre-deploy job: {self.state.value} -> {state.value}")
        self.state = state
        self.transitions.append(state)

    def run(self, resolved: ResolvedConfiguration, run_migration: bool) -> JobExecutionResult:
        """Render, replace and execute the job, blocking until it finishes.

        Args:
            resolved: Resolved configuration including the runtime values
                (image_url, commit_sha, service_account)
            run_migration: Whether the job should run at all

        Returns:
            JobExecutionResult; ``state`` is IDLE, SUCCEEDED or FAILED

        Raises:
            ManifestRenderError: If the job manifest cannot be rendered
            JobDeployError: If the runtime rejects the job replace
        """
        self.state = JobState.IDLE
        self.transitions = [JobState.IDLE]

        if not run_migration:
            logger.info("Pre-deploy job not requested, skipping")
            return JobExecutionResult.skipped()

        self.console.print("[bold cyan]🧩 Rendering pre-deploy job manifest...[/bold cyan]")
        manifest = self.renderer.render(
            self.template_path, resolved, expected_kind=self._constants.JOB_KIND
        )
        job_name = manifest.name or self.default_job_name
        self._transition(JobState.RENDERED)

        self.console.print(f"[bold cyan]🚀 Replacing job {job_name}...[/bold cyan]")
        result = self.target.replace(manifest)
        if not result.success:
            raise JobDeployError(
                f"Failed to replace pre-deploy job '{job_name}'",
                details=result.error_text or f"exit code {result.returncode}",
                stage="pre-deploy-job",
                resource=job_name,
            )
        self._transition(JobState.SUBMITTED)

        self._transition(JobState.AWAITING)
        self.console.print(
            f"[bold cyan]⏳ Executing {job_name} and waiting for completion...[/bold cyan]"
        )
        execution = self.target.execute(job_name)

        if execution.success:
            self._transition(JobState.SUCCEEDED)
            self.console.print(f"[green]✓ Pre-deploy job {job_name} succeeded[/green]")
            return JobExecutionResult(
                submitted=True,
                completed=True,
                exit_status=execution.returncode,
                state=JobState.SUCCEEDED,
                job_name=job_name,
            )

        self._transition(JobState.FAILED)
        self.console.print(f"[red]✗ Pre-deploy job {job_name} failed[/red]")
        logger.error(f"Pre-deploy job '{job_name}' exited with status {execution.returncode}")
        return JobExecutionResult(
            submitted=True,
            completed=True,
            exit_status=execution.returncode,
            state=JobState.FAILED,
            job_name=job_name,
            message=execution.error_text,
        )
