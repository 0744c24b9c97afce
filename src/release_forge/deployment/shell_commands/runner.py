"""Command runner for executing shell commands.

This module provides the base command execution functionality used by
the docker, gcloud and git command modules.
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path

from loguru import logger

from .types import CommandResult


class CommandRunner:
    """Low-level command executor with consistent result handling.

    All specialized command modules (Docker, gcloud, git) use this runner
    for actual command execution, which keeps them testable with a mock
    runner.
    """

    def __init__(self, project_root: Path) -> None:
        """Initialize the command runner.

        Args:
            project_root: Path to the project root directory.
                         Commands will be executed from this directory by default.
        """
        self.project_root = project_root

    def run(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path | None = None,
        capture_output: bool = True,
        env: dict[str, str] | None = None,
    ) -> CommandResult:
        """Execute a shell command and return structured result.

        A missing executable is reported as a failed result (return code 127)
        rather than an exception, so callers handle every failure the same way.

        Args:
            cmd: Command and arguments as a sequence
            cwd: Working directory (defaults to project_root)
            capture_output: Whether to capture stdout/stderr
            env: Extra environment variables for the child process

        Returns:
            CommandResult with success status, output, and return code
        """
        logger.debug(f"Running command: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                list(cmd),
                cwd=cwd or self.project_root,
                capture_output=capture_output,
                text=True,
                check=False,
                env=self._child_env(env),
            )
        except FileNotFoundError as e:
            return CommandResult(
                success=False, stderr=f"Command not found: {e.filename}", returncode=127
            )
        return CommandResult(
            success=result.returncode == 0,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            returncode=result.returncode,
        )

    def run_streaming(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path | None = None,
        on_output: Callable[[str], None] | None = None,
    ) -> CommandResult:
        """Execute a shell command with real-time output streaming.

        Blocks until the process exits. There is no timeout: long-running
        commands such as ``gcloud run jobs execute --wait`` are bounded only
        by whatever supervises this process.

        Args:
            cmd: Command and arguments as a sequence
            cwd: Working directory (defaults to project_root)
            on_output: Callback function called with each line of output.
                      If None, output is collected but not streamed.

        Returns:
            CommandResult with success status, collected output, and return code
        """
        logger.debug(f"Running command (streaming): {' '.join(cmd)}")
        try:
            process = subprocess.Popen(
                list(cmd),
                cwd=cwd or self.project_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,  # Merge stderr into stdout
                text=True,
                bufsize=1,
                env=self._child_env({"PYTHONUNBUFFERED": "1"}),
            )
        except FileNotFoundError as e:
            return CommandResult(
                success=False, stderr=f"Command not found: {e.filename}", returncode=127
            )

        output_lines: list[str] = []

        if process.stdout:
            for line in iter(process.stdout.readline, ""):
                line = line.rstrip("\n")
                if line:
                    output_lines.append(line)
                    if on_output:
                        on_output(line)

        process.wait()

        output = "\n".join(output_lines)
        success = process.returncode == 0
        return CommandResult(
            success=success,
            stdout=output,
            # stderr is merged into stdout; surface it as error text on failure
            stderr="" if success else output,
            returncode=process.returncode or 0,
        )

    @staticmethod
    def _child_env(extra: dict[str, str] | None) -> dict[str, str] | None:
        if not extra:
            return None
        env = os.environ.copy()
        env.update(extra)
        return env
