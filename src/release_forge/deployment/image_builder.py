"""Container image build stage.

Resolves the artifact reference, builds the image with Docker and pushes it
to Artifact Registry. The build itself is delegated entirely to
``docker build``; this module only sequences the calls and reports the
resulting image URL.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from ..utils.console_like import ConsoleLike, coalesce_console
from .constants import ReleaseConstants
from .errors import AuthenticationError, ImageBuildError, ImagePushError
from .identity import ArtifactReference, registry_host_for_region, resolve_artifact
from .settings import BuildSettings

if TYPE_CHECKING:
    from .shell_commands import ShellCommands


def activate_credentials(commands: ShellCommands, credentials_file: Path | None) -> None:
    """Hand externally issued credentials to gcloud, if a file was given.

    Without a file, whatever credentials gcloud already has are used.

    Raises:
        AuthenticationError: If the file is missing or gcloud rejects it
    """
    if credentials_file is None:
        return
    if not credentials_file.is_file():
        raise AuthenticationError(
            f"Credentials file not found: {credentials_file}",
            stage="authenticate",
        )
    result = commands.gcloud.activate_credentials(credentials_file)
    if not result.success:
        raise AuthenticationError(
            "Failed to activate credentials",
            details=result.error_text,
            stage="authenticate",
        )


class ImageBuilder:
    """Builds and pushes the release image.

    Attributes:
        commands: Shell command executor
        console: Console for progress output
    """

    def __init__(self, commands: ShellCommands, console: ConsoleLike | None = None) -> None:
        self.commands = commands
        self.console = coalesce_console(console)
        self._constants = ReleaseConstants()

    def resolve(self, settings: BuildSettings) -> ArtifactReference:
        """Resolve the artifact reference without side effects."""
        return resolve_artifact(
            registry_host=registry_host_for_region(settings.region),
            project_id=settings.project_id,
            repository_name=settings.repository,
            owner_name=settings.owner,
            image_name=settings.image,
            explicit_tag=settings.tag,
            commit_sha=settings.commit_sha,
        )

    def build_and_push(self, settings: BuildSettings) -> ArtifactReference:
        """Authenticate, build, push and publish the image URL.

        Returns:
            The pushed artifact reference

        Raises:
            ConfigurationError: If the identity inputs are invalid
            AuthenticationError: If credentials or registry auth fail
            ImageBuildError: If docker build fails
            ImagePushError: If docker push fails
        """
        artifact = self.resolve(settings)
        self.console.print(f"[dim]Image URL: {artifact.url}[/dim]")

        activate_credentials(self.commands, settings.credentials_file)

        result = self.commands.gcloud.configure_docker(artifact.registry_host)
        if not result.success:
            raise AuthenticationError(
                f"Failed to configure Docker for {artifact.registry_host}",
                details=result.error_text,
                stage="authenticate",
                resource=artifact.registry_host,
            )

        self.console.print("[bold cyan]🔨 Building Docker image...[/bold cyan]")
        result = self.commands.docker.build(
            artifact.url,
            settings.context,
            dockerfile=settings.dockerfile,
            on_output=self._print_output,
        )
        if not result.success:
            raise ImageBuildError(
                "Docker build failed",
                details=result.error_text or f"exit code {result.returncode}",
                stage="build",
                resource=artifact.url,
            )
        self.console.print("[green]✓ Image built[/green]")

        self.console.print(f"[bold cyan]📦 Pushing {artifact.url}...[/bold cyan]")
        result = self.commands.docker.push_image(artifact.url, on_output=self._print_output)
        if not result.success:
            raise ImagePushError(
                "Docker push failed",
                details=result.error_text or f"exit code {result.returncode}",
                stage="push",
                resource=artifact.url,
            )
        self.console.print(f"[green]✓ Image pushed: {artifact.url}[/green]")

        self.write_output(artifact, settings.output_file)
        return artifact

    def write_output(self, artifact: ArtifactReference, output_file: Path | None) -> None:
        """Append ``image-url=<url>`` to the CI step output file, if any.

        Falls back to the ``GITHUB_OUTPUT`` environment variable.
        """
        target = output_file or (
            Path(os.environ["GITHUB_OUTPUT"]) if os.getenv("GITHUB_OUTPUT") else None
        )
        if target is None:
            return
        with open(target, "a", encoding="utf-8") as f:
            f.write(f"{self._constants.IMAGE_URL_OUTPUT}={artifact.url}\n")
        logger.debug(f"Wrote image URL to {target}")

    def _print_output(self, line: str) -> None:
        self.console.print(f"  [dim]{line}[/dim]")
