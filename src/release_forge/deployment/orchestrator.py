"""Release orchestration.

Sequences the release stage of a deployment:

1. Validate the request
2. Pre-flight: the environment values document must exist
3. Resolve the layered configuration
4. Optionally run the pre-deploy job to completion
5. Publish the service
6. Report the outcome

Every stage runs through ``_run_stage``; the first failure aborts the
sequence. Nothing is retried: re-running the whole release is safe because
every replace is idempotent, while re-running a completed migration is an
operator decision.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from loguru import logger
from rich.table import Table

from ..utils.console_like import ConsoleLike, coalesce_console
from .config_merge import ConfigurationMerger, ResolvedConfiguration, deep_merge
from .constants import ReleaseConstants, ReleasePaths
from .errors import (
    ConfigurationError,
    EndpointLookupWarning,
    JobExecutionFailure,
    ReleaseError,
)
from .job_runner import JobExecutionResult, PreDeployJobRunner
from .renderer import ManifestRenderer
from .service_publisher import PublishResult, ServicePublisher
from .target import CloudRunTarget

if TYPE_CHECKING:
    from .shell_commands import ShellCommands

T = TypeVar("T")


@dataclass(frozen=True)
class DeploymentRequest:
    """Everything one release invocation needs."""

    image_url: str
    environment: str
    commit_sha: str
    service_account: str
    target_region: str
    run_migration: bool = False
    runtime_overrides: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DeploymentOutcome:
    """Externally visible result of a successful release."""

    service_endpoint: str | None
    image_url: str
    commit_sha: str
    environment: str
    migration: JobExecutionResult
    warnings: list[EndpointLookupWarning] = field(default_factory=list)


@dataclass(frozen=True)
class StageResult(Generic[T]):
    """Tagged result of one stage: a value or the error that stopped it."""

    stage: str
    value: T | None = None
    error: ReleaseError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


class ReleaseOrchestrator:
    """Runs the release stage for one deployment request.

    Attributes:
        merger: Configuration merger
        job_runner: Pre-deploy job runner
        publisher: Service publisher
    """

    def __init__(
        self,
        merger: ConfigurationMerger,
        job_runner: PreDeployJobRunner,
        publisher: ServicePublisher,
        console: ConsoleLike | None = None,
    ) -> None:
        self.merger = merger
        self.job_runner = job_runner
        self.publisher = publisher
        self.console = coalesce_console(console)
        self._constants = ReleaseConstants()

    def _run_stage(self, stage: str, fn: Callable[[], T]) -> StageResult[T]:
        logger.info(f"Stage '{stage}' started")
        try:
            value = fn()
        except ReleaseError as e:
            if e.stage is None:
                e.stage = stage
            logger.error(f"Stage '{stage}' failed: {e.message}")
            return StageResult(stage=stage, error=e)
        logger.info(f"Stage '{stage}' completed")
        return StageResult(stage=stage, value=value)

    def release(self, request: DeploymentRequest) -> DeploymentOutcome:
        """Run the release sequence, stopping at the first fatal error.

        Raises:
            ReleaseError: The first fatal error, tagged with its stage
        """
        self._run_stage("validate", lambda: self._validate(request)).unwrap()
        self._run_stage(
            "preflight",
            lambda: self.merger.require_environment_document(request.environment),
        ).unwrap()

        resolved = self._run_stage(
            "resolve-config", lambda: self._resolve(request)
        ).unwrap()

        migration = self._run_stage(
            "pre-deploy-job",
            lambda: self._run_job(resolved, request.run_migration),
        ).unwrap()

        published = self._run_stage(
            "publish-service",
            lambda: self.publisher.publish(
                resolved,
                request.image_url,
                request.commit_sha,
                request.service_account,
                request.target_region,
            ),
        ).unwrap()

        outcome = self._outcome(request, migration, published)
        self._show_summary(outcome)
        return outcome

    # =========================================================================
    # Stages
    # =========================================================================

    def _validate(self, request: DeploymentRequest) -> None:
        required = {
            "image_url": request.image_url,
            "environment": request.environment,
            "commit_sha": request.commit_sha,
            "service_account": request.service_account,
            "target_region": request.target_region,
        }
        missing = [name for name, value in required.items() if not value or not value.strip()]
        if missing:
            raise ConfigurationError(
                f"Missing required release input: {', '.join(missing)}",
                details="Every listed value must be a non-empty string.",
            )

    def _resolve(self, request: DeploymentRequest) -> ResolvedConfiguration:
        runtime_values = deep_merge(
            request.runtime_overrides,
            {
                self._constants.IMAGE_URL_KEY: request.image_url,
                self._constants.COMMIT_SHA_KEY: request.commit_sha,
                self._constants.SERVICE_ACCOUNT_KEY: request.service_account,
            },
        )
        return self.merger.resolve(request.environment, runtime_values)

    def _run_job(self, resolved: ResolvedConfiguration, run_migration: bool) -> JobExecutionResult:
        result = self.job_runner.run(resolved, run_migration)
        if not result.succeeded:
            raise JobExecutionFailure(
                f"Pre-deploy job '{result.job_name}' failed with exit status "
                f"{result.exit_status}; the service was not updated",
                details=result.message or None,
                resource=result.job_name,
            )
        return result

    # =========================================================================
    # Reporting
    # =========================================================================

    def _outcome(
        self,
        request: DeploymentRequest,
        migration: JobExecutionResult,
        published: PublishResult,
    ) -> DeploymentOutcome:
        return DeploymentOutcome(
            service_endpoint=published.endpoint,
            image_url=request.image_url,
            commit_sha=request.commit_sha,
            environment=request.environment,
            migration=migration,
            warnings=list(published.warnings),
        )

    def _show_summary(self, outcome: DeploymentOutcome) -> None:
        table = Table(title="🚀 Deployment complete!", show_header=False)
        table.add_column("Field", style="bold")
        table.add_column("Value")
        table.add_row("Service URL", outcome.service_endpoint or "[yellow]unknown[/yellow]")
        table.add_row("Commit SHA", outcome.commit_sha)
        table.add_row("Image", outcome.image_url)
        table.add_row("Environment", outcome.environment)
        table.add_row("Pre-deploy job", outcome.migration.state.value)
        self.console.print(table)


def build_cloud_run_orchestrator(
    commands: ShellCommands,
    paths: ReleasePaths,
    region: str,
    service_name: str,
    job_name: str,
    console: ConsoleLike | None = None,
) -> ReleaseOrchestrator:
    """Wire a ReleaseOrchestrator against Cloud Run in one region."""
    console = coalesce_console(console)
    renderer = ManifestRenderer()
    target = CloudRunTarget(
        commands.gcloud,
        region,
        on_output=lambda line: console.print(f"  [dim]{line}[/dim]"),
    )
    return ReleaseOrchestrator(
        merger=ConfigurationMerger(paths),
        job_runner=PreDeployJobRunner(
            renderer, target, paths.job_template, job_name, console=console
        ),
        publisher=ServicePublisher(
            renderer, target, paths.service_template, service_name, console=console
        ),
        console=console,
    )
