import pytest
import typer

from release_forge.cli.shared.console import with_error_handling
from release_forge.deployment.errors import JobExecutionFailure, ReleaseError


def test_with_error_handling_handles_release_error():
    @with_error_handling
    def _command() -> None:
        raise ReleaseError("Boom", details="extra")

    with pytest.raises(typer.Exit) as excinfo:
        _command()

    assert excinfo.value.exit_code == 1


def test_with_error_handling_reports_stage_and_resource(capsys):
    @with_error_handling
    def _command() -> None:
        raise JobExecutionFailure(
            "Pre-deploy job failed",
            details="Execution demo-app-migration-x7k2p failed",
            stage="pre-deploy-job",
            resource="demo-app-migration",
        )

    with pytest.raises(typer.Exit) as excinfo:
        _command()

    output = capsys.readouterr().out
    assert excinfo.value.exit_code == 1
    assert "pre-deploy-job" in output
    assert "demo-app-migration" in output


def test_with_error_handling_handles_keyboard_interrupt():
    @with_error_handling
    def _command() -> None:
        raise KeyboardInterrupt

    with pytest.raises(typer.Exit) as excinfo:
        _command()

    assert excinfo.value.exit_code == 130


def test_with_error_handling_passes_through_success():
    calls = []

    @with_error_handling
    def _command(value: int) -> None:
        calls.append(value)

    _command(7)

    assert calls == [7]


def test_failure_details_are_printed_verbatim(capsys):
    @with_error_handling
    def _command() -> None:
        raise ReleaseError(
            "Failed to replace service 'demo-app'",
            details="ERROR: [run.services.replace] denied",
            stage="publish-service",
        )

    with pytest.raises(typer.Exit):
        _command()

    output = capsys.readouterr().out
    assert "[publish-service] Failed to replace service 'demo-app'" in output
    assert "[run.services.replace] denied" in output
