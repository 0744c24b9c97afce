"""Artifact identity resolution.

Derives the canonical registry reference of the image a build produces.
Pure string composition: no registry or network access.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .constants import ReleaseConstants
from .errors import ConfigurationError


class SelectorKind(Enum):
    """How the image is selected within its repository."""

    TAG = "tag"
    CONTENT_DIGEST_FALLBACK = "contentDigestFallback"


@dataclass(frozen=True)
class ArtifactSelector:
    """Either an explicit tag or the commit SHA fallback."""

    kind: SelectorKind
    value: str


@dataclass(frozen=True)
class ArtifactReference:
    """Fully qualified reference to one built image.

    Attributes:
        registry_host: Registry hostname (e.g., "europe-west1-docker.pkg.dev")
        project_id: Cloud project holding the registry
        repository_name: Artifact Registry repository
        owner_name: Repository owner (organisation or user)
        image_name: Image name, usually the source repository name
        selector: Tag or commit-SHA selector
    """

    registry_host: str
    project_id: str
    repository_name: str
    owner_name: str
    image_name: str
    selector: ArtifactSelector

    @property
    def repository_path(self) -> str:
        """Reference without the tag/SHA selector."""
        return "/".join(
            (
                self.registry_host,
                self.project_id,
                self.repository_name,
                self.owner_name,
                self.image_name,
            )
        )

    @property
    def url(self) -> str:
        """Full reference path, pushable and deployable as-is."""
        if self.selector.kind is SelectorKind.TAG:
            return f"{self.repository_path}:{self.selector.value}"
        prefix = ReleaseConstants.CONTENT_DIGEST_PREFIX
        return f"{self.repository_path}/{prefix}:{self.selector.value}"

    def __str__(self) -> str:
        return self.url


def registry_host_for_region(region: str) -> str:
    """Artifact Registry Docker host for a region."""
    if not region or not region.strip():
        raise ConfigurationError("Region is required to derive the registry host")
    return f"{region.strip()}{ReleaseConstants.REGISTRY_HOST_SUFFIX}"


def _require(field_name: str, value: str | None) -> str:
    if value is None or not value.strip():
        raise ConfigurationError(
            f"Missing required artifact field: {field_name}",
            details=f"'{field_name}' must be a non-empty string.",
            stage="resolve-identity",
        )
    return value.strip()


def resolve_artifact(
    registry_host: str,
    project_id: str,
    repository_name: str,
    owner_name: str,
    image_name: str,
    explicit_tag: str | None,
    commit_sha: str,
) -> ArtifactReference:
    """Resolve the artifact reference for a build.

    A non-empty ``explicit_tag`` selects ``...:{tag}``; otherwise the commit
    SHA fallback selects ``.../sha:{commit_sha}``.

    Raises:
        ConfigurationError: If a required field is empty
    """
    fields = {
        "registry_host": _require("registry_host", registry_host),
        "project_id": _require("project_id", project_id),
        "repository_name": _require("repository_name", repository_name),
        "owner_name": _require("owner_name", owner_name),
        "image_name": _require("image_name", image_name),
    }

    if explicit_tag and explicit_tag.strip():
        selector = ArtifactSelector(SelectorKind.TAG, explicit_tag.strip())
    else:
        selector = ArtifactSelector(
            SelectorKind.CONTENT_DIGEST_FALLBACK, _require("commit_sha", commit_sha)
        )

    return ArtifactReference(selector=selector, **fields)
