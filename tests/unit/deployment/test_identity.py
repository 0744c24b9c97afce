"""Unit tests for artifact identity resolution."""

from __future__ import annotations

import pytest

from release_forge.deployment.errors import ConfigurationError
from release_forge.deployment.identity import (
    ArtifactReference,
    SelectorKind,
    registry_host_for_region,
    resolve_artifact,
)

BASE_INPUTS = {
    "registry_host": "reg.example.com",
    "project_id": "p1",
    "repository_name": "cloud-run-source-deploy",
    "owner_name": "acme",
    "image_name": "app",
    "commit_sha": "abc123",
}


class TestResolveArtifact:
    """Tests for resolve_artifact."""

    def test_explicit_tag(self) -> None:
        """A non-empty tag selects the tag form."""
        artifact = resolve_artifact(explicit_tag="v1.2.3", **BASE_INPUTS)

        assert artifact.url == "reg.example.com/p1/cloud-run-source-deploy/acme/app:v1.2.3"
        assert artifact.selector.kind is SelectorKind.TAG
        assert artifact.selector.value == "v1.2.3"

    def test_empty_tag_falls_back_to_commit_sha(self) -> None:
        """An empty tag selects the commit SHA form."""
        artifact = resolve_artifact(explicit_tag="", **BASE_INPUTS)

        assert artifact.url == "reg.example.com/p1/cloud-run-source-deploy/acme/app/sha:abc123"
        assert artifact.selector.kind is SelectorKind.CONTENT_DIGEST_FALLBACK
        assert artifact.selector.value == "abc123"

    @pytest.mark.parametrize("tag", [None, "", "   "])
    def test_missing_tag_never_produces_tag_form(self, tag: str | None) -> None:
        """Without a usable tag the URL ends in /sha:<commit> and has no tag suffix."""
        url = resolve_artifact(explicit_tag=tag, **BASE_INPUTS).url

        assert url.endswith("/sha:abc123")
        assert not url.endswith(":v1.2.3")

    @pytest.mark.parametrize("tag", ["v1.2.3", "latest", "2024-06-01"])
    def test_tag_form_never_contains_sha_selector(self, tag: str) -> None:
        url = resolve_artifact(explicit_tag=tag, **BASE_INPUTS).url

        assert url.endswith(f":{tag}")
        assert "/sha:" not in url

    @pytest.mark.parametrize(
        "field",
        ["registry_host", "project_id", "repository_name", "owner_name", "image_name"],
    )
    def test_empty_required_field_raises(self, field: str) -> None:
        """Every structural field must be non-empty."""
        inputs = {**BASE_INPUTS, field: "  "}

        with pytest.raises(ConfigurationError) as exc_info:
            resolve_artifact(explicit_tag="v1", **inputs)

        assert field in exc_info.value.message

    def test_missing_commit_sha_without_tag_raises(self) -> None:
        inputs = {**BASE_INPUTS, "commit_sha": ""}

        with pytest.raises(ConfigurationError):
            resolve_artifact(explicit_tag=None, **inputs)

    def test_commit_sha_not_needed_with_tag(self) -> None:
        inputs = {**BASE_INPUTS, "commit_sha": ""}

        artifact = resolve_artifact(explicit_tag="v1", **inputs)

        assert artifact.url.endswith(":v1")

    def test_reference_is_immutable(self) -> None:
        artifact = resolve_artifact(explicit_tag="v1", **BASE_INPUTS)

        with pytest.raises(AttributeError):
            artifact.image_name = "other"  # type: ignore[misc]

    def test_str_is_url(self) -> None:
        artifact = resolve_artifact(explicit_tag="v1", **BASE_INPUTS)

        assert str(artifact) == artifact.url
        assert isinstance(artifact, ArtifactReference)


class TestRegistryHost:
    def test_region_host(self) -> None:
        assert registry_host_for_region("europe-west1") == "europe-west1-docker.pkg.dev"

    def test_empty_region_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            registry_host_for_region("")
