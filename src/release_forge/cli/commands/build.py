"""Build stage commands.

Resolve the image reference, build it and push it to Artifact Registry.
"""

from pathlib import Path
from typing import Annotated

import typer

from release_forge.cli.context import get_cli_context
from release_forge.deployment.image_builder import ImageBuilder
from release_forge.deployment.settings import BuildSettings, load_settings
from release_forge.deployment.shell_commands import ShellCommands

from .shared import (
    console,
    resolve_commit_sha,
    resolve_repository_identity,
    with_error_handling,
)

ProjectOption = Annotated[
    str,
    typer.Option("--project-id", envvar="RELEASE_FORGE_PROJECT_ID", help="Cloud project ID"),
]
RegionOption = Annotated[
    str,
    typer.Option("--region", envvar="RELEASE_FORGE_REGION", help="Cloud region (e.g. europe-west1)"),
]
TagOption = Annotated[
    str | None,
    typer.Option(
        "--tag",
        envvar="RELEASE_FORGE_TAG",
        help="Image tag; when empty the commit SHA is used",
    ),
]
RepositoryOption = Annotated[
    str,
    typer.Option(
        "--repository",
        envvar="RELEASE_FORGE_REPOSITORY",
        help="Artifact Registry repository name",
    ),
]
OwnerOption = Annotated[
    str | None,
    typer.Option("--owner", help="Repository owner (default: GITHUB_REPOSITORY_OWNER)"),
]
ImageOption = Annotated[
    str | None,
    typer.Option("--image", help="Image name (default: repository name)"),
]
CommitOption = Annotated[
    str | None,
    typer.Option("--commit-sha", envvar="GITHUB_SHA", help="Commit SHA (default: git HEAD)"),
]


def _build_settings(
    project_root: Path,
    project_id: str,
    region: str,
    tag: str | None,
    repository: str,
    owner: str | None,
    image: str | None,
    commit_sha: str | None,
    commands: ShellCommands,
    **extra: object,
) -> BuildSettings:
    resolved_owner, resolved_image = resolve_repository_identity(owner, image, project_root)
    return load_settings(
        BuildSettings,
        project_id=project_id,
        region=region,
        tag=tag,
        repository=repository,
        owner=resolved_owner,
        image=resolved_image,
        commit_sha=resolve_commit_sha(commands, commit_sha),
        **extra,
    )


@with_error_handling
def build(
    ctx: typer.Context,
    project_id: ProjectOption,
    region: RegionOption,
    tag: TagOption = None,
    repository: RepositoryOption = "cloud-run-source-deploy",
    owner: OwnerOption = None,
    image: ImageOption = None,
    commit_sha: CommitOption = None,
    context: Annotated[
        Path, typer.Option("--context", help="Docker build context")
    ] = Path("."),
    dockerfile: Annotated[
        Path | None, typer.Option("--dockerfile", help="Dockerfile path")
    ] = None,
    credentials_file: Annotated[
        Path | None,
        typer.Option(
            "--credentials-file",
            envvar="GOOGLE_GHA_CREDS_PATH",
            help="Credential file from the CI identity exchange",
        ),
    ] = None,
    output_file: Annotated[
        Path | None,
        typer.Option(
            "--output-file",
            help="Append image-url=<url> here (default: $GITHUB_OUTPUT)",
        ),
    ] = None,
) -> None:
    """Build and push the container image.

    Examples:
        release-forge build --project-id my-proj --region europe-west1
        release-forge build --project-id my-proj --region europe-west1 --tag v1.2.3
    """
    cli_ctx = get_cli_context(ctx)
    console.print_header("Building and pushing image")

    commands = ShellCommands(cli_ctx.project_root, project_id=project_id)
    settings = _build_settings(
        cli_ctx.project_root,
        project_id,
        region,
        tag,
        repository,
        owner,
        image,
        commit_sha,
        commands,
        context=context,
        dockerfile=dockerfile,
        credentials_file=credentials_file,
        output_file=output_file,
    )

    artifact = ImageBuilder(commands, console=console).build_and_push(settings)
    console.ok(f"Image pushed: {artifact.url}")


@with_error_handling
def image_url(
    ctx: typer.Context,
    project_id: ProjectOption,
    region: RegionOption,
    tag: TagOption = None,
    repository: RepositoryOption = "cloud-run-source-deploy",
    owner: OwnerOption = None,
    image: ImageOption = None,
    commit_sha: CommitOption = None,
) -> None:
    """Print the image URL a build would produce, without building."""
    cli_ctx = get_cli_context(ctx)
    commands = ShellCommands(cli_ctx.project_root, project_id=project_id)
    settings = _build_settings(
        cli_ctx.project_root,
        project_id,
        region,
        tag,
        repository,
        owner,
        image,
        commit_sha,
        commands,
    )
    typer.echo(ImageBuilder(commands, console=console).resolve(settings).url)

