"""Release constants and resource paths.

This module centralizes the magic strings and file locations used by the
build and release stages.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ReleaseConstants:
    """Constants for building and releasing to Cloud Run.

    All attributes are class-level and immutable.
    """

    # Artifact Registry
    DEFAULT_REPOSITORY: str = "cloud-run-source-deploy"
    REGISTRY_HOST_SUFFIX: str = "-docker.pkg.dev"
    CONTENT_DIGEST_PREFIX: str = "sha"

    # Manifest kinds
    JOB_KIND: str = "Job"
    SERVICE_KIND: str = "Service"
    JOB_NAME_SUFFIX: str = "-migration"

    # Runtime data values injected into every manifest
    IMAGE_URL_KEY: str = "image_url"
    COMMIT_SHA_KEY: str = "commit_sha"
    SERVICE_ACCOUNT_KEY: str = "service_account"

    # Relative path fragments for the release resources
    RESOURCES_DIR: str = ".github/resources"
    ENV_DIR: str = "env"
    BASE_VALUES_FILE: str = "values.yaml"
    ENV_VALUES_SUFFIX: str = ".values.yaml"
    SERVICE_TEMPLATE: str = "service.yaml"
    JOB_TEMPLATE: str = "migration.job.yaml"

    # GitHub Actions output file entry for the build stage
    IMAGE_URL_OUTPUT: str = "image-url"

    ENVIRONMENT_PATTERN: re.Pattern[str] = re.compile(r"^[a-z0-9][a-z0-9_-]*$")
    REGION_PATTERN: re.Pattern[str] = re.compile(r"^[a-z]+-[a-z]+[0-9]+$")


class ReleasePaths:
    """Path resolver for the release resource files.

    Layout (relative to the project root)::

        .github/resources/values.yaml
        .github/resources/env/<environment>.values.yaml
        .github/resources/service.yaml
        .github/resources/migration.job.yaml
    """

    def __init__(self, project_root: Path, resources_dir: Path | None = None) -> None:
        """Initialize release paths.

        Args:
            project_root: Path to the project root directory
            resources_dir: Optional override of the resources directory
        """
        self.project_root = project_root
        self._constants = ReleaseConstants()

        self.resources = resources_dir or project_root / self._constants.RESOURCES_DIR
        self.env_dir = self.resources / self._constants.ENV_DIR

    @property
    def base_values(self) -> Path:
        """Get path to the base values document."""
        return self.resources / self._constants.BASE_VALUES_FILE

    def environment_values(self, environment: str) -> Path:
        """Get path to the values document of one environment."""
        return self.env_dir / f"{environment}{self._constants.ENV_VALUES_SUFFIX}"

    @property
    def service_template(self) -> Path:
        """Get path to the service manifest template."""
        return self.resources / self._constants.SERVICE_TEMPLATE

    @property
    def job_template(self) -> Path:
        """Get path to the pre-deploy job manifest template."""
        return self.resources / self._constants.JOB_TEMPLATE

    @property
    def env_file(self) -> Path:
        """Get path to .env file."""
        return self.project_root / ".env"
