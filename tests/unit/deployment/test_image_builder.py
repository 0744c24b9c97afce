"""Unit tests for the image build stage."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from release_forge.deployment.errors import (
    AuthenticationError,
    ConfigurationError,
    ImageBuildError,
    ImagePushError,
)
from release_forge.deployment.image_builder import ImageBuilder, activate_credentials
from release_forge.deployment.settings import BuildSettings
from release_forge.deployment.shell_commands.types import CommandResult

TAGGED_URL = "europe-west1-docker.pkg.dev/p1/cloud-run-source-deploy/acme/demo-app:v1.2.3"


def make_settings(**overrides: object) -> BuildSettings:
    values: dict = {
        "project_id": "p1",
        "region": "europe-west1",
        "owner": "acme",
        "image": "demo-app",
        "commit_sha": "abc123",
        "tag": "v1.2.3",
    }
    values.update(overrides)
    return BuildSettings(**values)


class TestImageBuilder:
    """Tests for the ImageBuilder class."""

    @pytest.fixture
    def mock_commands(self) -> MagicMock:
        """Create a mock shell commands instance where every call succeeds."""
        commands = MagicMock()
        commands.gcloud.configure_docker.return_value = CommandResult(success=True)
        commands.gcloud.activate_credentials.return_value = CommandResult(success=True)
        commands.docker.build.return_value = CommandResult(success=True)
        commands.docker.push_image.return_value = CommandResult(success=True)
        return commands

    @pytest.fixture
    def image_builder(self, mock_commands: MagicMock, mock_console: MagicMock) -> ImageBuilder:
        return ImageBuilder(mock_commands, console=mock_console)

    def test_resolve_uses_tag(self, image_builder: ImageBuilder) -> None:
        assert image_builder.resolve(make_settings()).url == TAGGED_URL

    def test_resolve_falls_back_to_commit_sha(self, image_builder: ImageBuilder) -> None:
        artifact = image_builder.resolve(make_settings(tag=None))

        assert artifact.url == (
            "europe-west1-docker.pkg.dev/p1/cloud-run-source-deploy/acme/demo-app/sha:abc123"
        )

    def test_build_and_push_sequence(
        self, image_builder: ImageBuilder, mock_commands: MagicMock
    ) -> None:
        artifact = image_builder.build_and_push(make_settings())

        assert artifact.url == TAGGED_URL
        mock_commands.gcloud.configure_docker.assert_called_once_with(
            "europe-west1-docker.pkg.dev"
        )
        build_args = mock_commands.docker.build.call_args
        assert build_args[0][0] == TAGGED_URL
        assert build_args[0][1] == Path(".")
        mock_commands.docker.push_image.assert_called_once()
        assert mock_commands.docker.push_image.call_args[0][0] == TAGGED_URL
        mock_commands.gcloud.activate_credentials.assert_not_called()

    def test_configure_docker_failure(
        self, image_builder: ImageBuilder, mock_commands: MagicMock
    ) -> None:
        mock_commands.gcloud.configure_docker.return_value = CommandResult(
            success=False, stderr="not logged in", returncode=1
        )

        with pytest.raises(AuthenticationError) as exc_info:
            image_builder.build_and_push(make_settings())

        assert exc_info.value.details == "not logged in"
        mock_commands.docker.build.assert_not_called()

    def test_build_failure_skips_push(
        self, image_builder: ImageBuilder, mock_commands: MagicMock
    ) -> None:
        mock_commands.docker.build.return_value = CommandResult(
            success=False, stderr="failed to solve", returncode=1
        )

        with pytest.raises(ImageBuildError) as exc_info:
            image_builder.build_and_push(make_settings())

        assert exc_info.value.stage == "build"
        assert exc_info.value.resource == TAGGED_URL
        mock_commands.docker.push_image.assert_not_called()

    def test_push_failure(self, image_builder: ImageBuilder, mock_commands: MagicMock) -> None:
        mock_commands.docker.push_image.return_value = CommandResult(
            success=False, stdout="denied: permission", returncode=1
        )

        with pytest.raises(ImagePushError) as exc_info:
            image_builder.build_and_push(make_settings())

        assert exc_info.value.details == "denied: permission"

    def test_invalid_identity_has_no_side_effects(
        self, image_builder: ImageBuilder, mock_commands: MagicMock
    ) -> None:
        settings = make_settings(tag=None).model_copy(update={"commit_sha": " "})

        with pytest.raises(ConfigurationError):
            image_builder.build_and_push(settings)

        mock_commands.gcloud.configure_docker.assert_not_called()
        mock_commands.docker.build.assert_not_called()

    def test_writes_output_file(self, image_builder: ImageBuilder, tmp_path: Path) -> None:
        output = tmp_path / "out"
        output.write_text("previous=1\n")

        image_builder.build_and_push(make_settings(output_file=output))

        assert output.read_text() == f"previous=1\nimage-url={TAGGED_URL}\n"

    def test_writes_github_output_from_environment(
        self, image_builder: ImageBuilder, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        output = tmp_path / "github_output"
        monkeypatch.setenv("GITHUB_OUTPUT", str(output))

        image_builder.build_and_push(make_settings())

        assert output.read_text() == f"image-url={TAGGED_URL}\n"

    def test_no_output_target_writes_nothing(
        self, image_builder: ImageBuilder, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)

        image_builder.build_and_push(make_settings())

        assert list(tmp_path.iterdir()) == []


class TestActivateCredentials:
    def test_no_file_is_a_noop(self) -> None:
        commands = MagicMock()

        activate_credentials(commands, None)

        commands.gcloud.activate_credentials.assert_not_called()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(AuthenticationError, match="not found"):
            activate_credentials(MagicMock(), tmp_path / "creds.json")

    def test_rejected_credentials(self, tmp_path: Path) -> None:
        creds = tmp_path / "creds.json"
        creds.write_text("{}")
        commands = MagicMock()
        commands.gcloud.activate_credentials.return_value = CommandResult(
            success=False, stderr="invalid_grant", returncode=1
        )

        with pytest.raises(AuthenticationError) as exc_info:
            activate_credentials(commands, creds)

        assert exc_info.value.stage == "authenticate"
        assert exc_info.value.details == "invalid_grant"

    def test_accepted_credentials(self, tmp_path: Path) -> None:
        creds = tmp_path / "creds.json"
        creds.write_text("{}")
        commands = MagicMock()
        commands.gcloud.activate_credentials.return_value = CommandResult(success=True)

        activate_credentials(commands, creds)

        commands.gcloud.activate_credentials.assert_called_once_with(creds)
