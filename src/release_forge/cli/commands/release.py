"""Release stage commands.

Deploy a built image to one environment: optional pre-deploy job, then the
service replace.
"""

from pathlib import Path
from typing import Annotated

import typer

from release_forge.cli.context import get_cli_context
from release_forge.deployment.config_merge import ConfigurationMerger, parse_overrides
from release_forge.deployment.image_builder import activate_credentials
from release_forge.deployment.orchestrator import (
    DeploymentRequest,
    build_cloud_run_orchestrator,
)
from release_forge.deployment.settings import (
    ReleaseSettings,
    github_repository_parts,
    load_settings,
)
from release_forge.deployment.shell_commands import ShellCommands

from .shared import console, resolve_commit_sha, with_error_handling

EnvironmentOption = Annotated[
    str,
    typer.Option(
        "--environment",
        "-e",
        envvar="RELEASE_FORGE_ENVIRONMENT",
        help="Deployment environment (e.g. test, production)",
    ),
]
SetOption = Annotated[
    list[str] | None,
    typer.Option(
        "--set",
        help="Runtime override key=value (dotted keys nest); repeatable",
    ),
]


@with_error_handling
def release(
    ctx: typer.Context,
    image_url: Annotated[
        str,
        typer.Option("--image-url", envvar="RELEASE_FORGE_IMAGE_URL", help="Image to deploy"),
    ],
    environment: EnvironmentOption,
    project_id: Annotated[
        str,
        typer.Option("--project-id", envvar="RELEASE_FORGE_PROJECT_ID", help="Cloud project ID"),
    ],
    region: Annotated[
        str,
        typer.Option("--region", envvar="RELEASE_FORGE_REGION", help="Cloud Run region"),
    ],
    service_account: Annotated[
        str,
        typer.Option(
            "--service-account",
            envvar="RELEASE_FORGE_SERVICE_ACCOUNT",
            help="Service account the service and job run as",
        ),
    ],
    migrate: Annotated[
        bool,
        typer.Option("--migrate/--no-migrate", help="Run the pre-deploy job first"),
    ] = False,
    commit_sha: Annotated[
        str | None,
        typer.Option("--commit-sha", envvar="GITHUB_SHA", help="Commit SHA (default: git HEAD)"),
    ] = None,
    service_name: Annotated[
        str | None,
        typer.Option(
            "--service-name",
            help="Service name when the manifest has none (default: repository name)",
        ),
    ] = None,
    job_name: Annotated[
        str | None,
        typer.Option(
            "--job-name",
            help="Job name when the manifest has none (default: <service>-migration)",
        ),
    ] = None,
    overrides: SetOption = None,
    credentials_file: Annotated[
        Path | None,
        typer.Option(
            "--credentials-file",
            envvar="GOOGLE_GHA_CREDS_PATH",
            help="Credential file from the CI identity exchange",
        ),
    ] = None,
) -> None:
    """Release an image to an environment.

    This command:
    - Checks the environment values file exists (before anything else)
    - Resolves base + environment + runtime configuration
    - With --migrate: replaces and executes the pre-deploy job, waiting for it
    - Replaces the service and prints its URL

    Examples:
        release-forge release --image-url IMAGE -e test --project-id p --region europe-west1 \\
            --service-account sa@p.iam.gserviceaccount.com
        release-forge release ... -e production --migrate --set max_instances=20
    """
    cli_ctx = get_cli_context(ctx)
    console.print_header(f"Releasing to {environment}")

    commands = ShellCommands(cli_ctx.project_root, project_id=project_id)
    settings = load_settings(
        ReleaseSettings,
        project_id=project_id,
        region=region,
        credentials_file=credentials_file,
        image_url=image_url,
        environment=environment,
        service_account=service_account,
        commit_sha=resolve_commit_sha(commands, commit_sha),
        service_name=service_name or github_repository_parts()[1] or cli_ctx.project_root.name,
        job_name=job_name,
        run_migration=migrate,
        overrides=overrides or [],
    )
    runtime_overrides = parse_overrides(settings.overrides)

    # Fail before touching credentials or the runtime
    ConfigurationMerger(cli_ctx.paths).require_environment_document(settings.environment)

    activate_credentials(commands, settings.credentials_file)

    orchestrator = build_cloud_run_orchestrator(
        commands,
        cli_ctx.paths,
        region=settings.region,
        service_name=settings.service_name,
        job_name=settings.resolved_job_name,
        console=console,
    )
    outcome = orchestrator.release(
        DeploymentRequest(
            image_url=settings.image_url,
            environment=settings.environment,
            commit_sha=settings.commit_sha,
            service_account=settings.service_account,
            target_region=settings.region,
            run_migration=settings.run_migration,
            runtime_overrides=runtime_overrides,
        )
    )

    if outcome.warnings:
        console.warn(f"Released with {len(outcome.warnings)} warning(s)")
    else:
        console.ok(f"Released {settings.image_url} to {settings.environment}")


@with_error_handling
def show_config(
    ctx: typer.Context,
    environment: EnvironmentOption,
    overrides: SetOption = None,
) -> None:
    """Print the resolved configuration of an environment as YAML.

    Runs the same pre-flight check as release; nothing is deployed.
    """
    cli_ctx = get_cli_context(ctx)
    resolved = ConfigurationMerger(cli_ctx.paths).resolve(
        environment, parse_overrides(overrides or [])
    )
    typer.echo(resolved.to_yaml(), nl=False)
