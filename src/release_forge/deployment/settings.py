"""Invocation parameters for the build and release stages.

Values come from CLI options, which fall back to environment variables;
pydantic validates them before any command runs.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import ReleaseConstants
from .errors import ConfigurationError

_CONSTANTS = ReleaseConstants()

SettingsT = TypeVar("SettingsT", bound=BaseModel)


class CloudSettings(BaseModel):
    """Project and region shared by both stages."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    project_id: str = Field(min_length=1)
    region: str = Field(min_length=1)
    credentials_file: Path | None = None

    @field_validator("region")
    @classmethod
    def _check_region(cls, value: str) -> str:
        if not _CONSTANTS.REGION_PATTERN.match(value):
            raise ValueError(f"'{value}' does not look like a region (e.g. europe-west1)")
        return value


class BuildSettings(CloudSettings):
    """Parameters of the build stage."""

    repository: str = Field(default=_CONSTANTS.DEFAULT_REPOSITORY, min_length=1)
    owner: str = Field(min_length=1)
    image: str = Field(min_length=1)
    commit_sha: str = Field(min_length=1)
    tag: str | None = None
    context: Path = Path(".")
    dockerfile: Path | None = None
    output_file: Path | None = None

    @field_validator("repository", mode="before")
    @classmethod
    def _default_blank_repository(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and not value.strip()):
            return _CONSTANTS.DEFAULT_REPOSITORY
        return value


class ReleaseSettings(CloudSettings):
    """Parameters of the release stage."""

    image_url: str = Field(min_length=1)
    environment: str = Field(min_length=1)
    service_account: str = Field(min_length=1)
    commit_sha: str = Field(min_length=1)
    service_name: str = Field(min_length=1)
    job_name: str | None = None
    run_migration: bool = False
    overrides: list[str] = Field(default_factory=list)

    @property
    def resolved_job_name(self) -> str:
        return self.job_name or f"{self.service_name}{_CONSTANTS.JOB_NAME_SUFFIX}"


def load_settings(model: type[SettingsT], **values: object) -> SettingsT:
    """Validate settings, converting pydantic errors into ConfigurationError."""
    try:
        return model(**values)
    except ValidationError as e:
        problems = "\n".join(
            f"  • {'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigurationError(
            "Invalid or missing release parameters",
            details=problems,
            stage="settings",
        ) from e


def github_repository_parts() -> tuple[str | None, str | None]:
    """Owner and repository name from the GitHub Actions environment."""
    owner = os.getenv("GITHUB_REPOSITORY_OWNER")
    repository = os.getenv("GITHUB_REPOSITORY", "")
    name = repository.split("/", 1)[1] if "/" in repository else None
    if owner is None and "/" in repository:
        owner = repository.split("/", 1)[0]
    return owner, name
