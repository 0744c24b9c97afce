"""Output seam between the release components and whatever shows progress."""

from __future__ import annotations

from typing import Protocol

from rich.console import Console, ConsoleRenderable


class ConsoleLike(Protocol):
    """What the release stages need from a console: progress lines and warnings."""

    def print(self, msg: ConsoleRenderable | str | None = None) -> None: ...

    def warn(self, msg: str) -> None: ...


class StdoutConsole:
    """Rich stdout console for release components driven outside the CLI."""

    def __init__(self) -> None:
        self._console = Console()

    def print(self, msg: ConsoleRenderable | str | None = None) -> None:
        self._console.print(msg if msg is not None else "")

    def warn(self, msg: str) -> None:
        self._console.print(f"[yellow]WARNING:[/yellow] {msg}")


def coalesce_console(console: ConsoleLike | None) -> ConsoleLike:
    """Return ``console``, or a stdout console when the caller passed none."""
    return console if console is not None else StdoutConsole()
