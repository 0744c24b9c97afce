"""Service publisher.

Renders the service manifest, replaces the Cloud Run service with it and
reports the resulting URL.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from ..utils.console_like import ConsoleLike, coalesce_console
from .config_merge import ResolvedConfiguration, merge
from .constants import ReleaseConstants
from .errors import EndpointLookupWarning, ServiceDeployError

if TYPE_CHECKING:
    from .renderer import ManifestRenderer
    from .target import DeploymentTarget


@dataclass(frozen=True)
class PublishResult:
    """Result of a service publish."""

    service_name: str
    endpoint: str | None
    warnings: list[EndpointLookupWarning] = field(default_factory=list)


class ServicePublisher:
    """Replaces the service and reads back its endpoint.

    The replace overwrites the whole service definition, so publishing the
    same input twice leaves the described resource unchanged.
    """

    def __init__(
        self,
        renderer: ManifestRenderer,
        target: DeploymentTarget,
        template_path: Path,
        default_service_name: str,
        console: ConsoleLike | None = None,
    ) -> None:
        self.renderer = renderer
        self.target = target
        self.template_path = template_path
        self.default_service_name = default_service_name
        self.console = coalesce_console(console)
        self._constants = ReleaseConstants()

    def publish(
        self,
        resolved_config: ResolvedConfiguration,
        image_url: str,
        commit_sha: str,
        service_account: str,
        target_region: str,
    ) -> PublishResult:
        """Render and replace the service, then look up its URL.

        Args:
            resolved_config: Merged configuration for the environment
            image_url: Image to deploy
            commit_sha: Commit being released
            service_account: Runtime service account of the service
            target_region: Region the service runs in (reporting only; the
                target is already bound to a region)

        Returns:
            PublishResult with the endpoint, or None plus a warning when the
            lookup failed

        Raises:
            ManifestRenderError: If the service manifest cannot be rendered
            ServiceDeployError: If the runtime rejects the replace
        """
        runtime_values = {
            self._constants.IMAGE_URL_KEY: image_url,
            self._constants.COMMIT_SHA_KEY: commit_sha,
            self._constants.SERVICE_ACCOUNT_KEY: service_account,
        }
        resolved = merge(
            resolved_config.values, {}, runtime_values, environment=resolved_config.environment
        )

        self.console.print("[bold cyan]🧩 Rendering service manifest...[/bold cyan]")
        manifest = self.renderer.render(
            self.template_path, resolved, expected_kind=self._constants.SERVICE_KIND
        )
        service_name = manifest.name or self.default_service_name

        self.console.print(
            f"[bold cyan]🚀 Replacing service {service_name} in {target_region}...[/bold cyan]"
        )
        result = self.target.replace(manifest)
        if not result.success:
            raise ServiceDeployError(
                f"Failed to replace service '{service_name}'",
                details=result.error_text or f"exit code {result.returncode}",
                stage="publish-service",
                resource=service_name,
            )
        self.console.print(f"[green]✓ Service {service_name} replaced[/green]")

        endpoint, warnings = self._lookup_endpoint(service_name)
        return PublishResult(service_name=service_name, endpoint=endpoint, warnings=warnings)

    def _lookup_endpoint(self, service_name: str) -> tuple[str | None, list[EndpointLookupWarning]]:
        described = self.target.describe(service_name)
        url = described.stdout.strip() if described.success else ""
        if url:
            return url, []

        warning = EndpointLookupWarning(
            f"Could not read the URL of service '{service_name}'",
            details=described.error_text or "describe returned no URL",
            stage="publish-service",
            resource=service_name,
        )
        logger.warning(f"{warning.message}: {warning.details}")
        self.console.warn(f"{warning.message} (the deployment itself succeeded)")
        return None, [warning]
