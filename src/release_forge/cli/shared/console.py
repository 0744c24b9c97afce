"""Console output for the build and release commands."""

from collections.abc import Callable
from functools import wraps

import typer
from rich.console import Console, ConsoleRenderable
from rich.markup import escape
from rich.panel import Panel

from release_forge.deployment.errors import ReleaseError


class CLIConsole:
    """Rich console shared by every release-forge command.

    Implements ``ConsoleLike`` so the deployment components can report
    progress through it.
    """

    def __init__(self) -> None:
        self.console = Console()

    def print(self, msg: ConsoleRenderable | str | None = None) -> None:
        self.console.print(msg)

    def ok(self, msg: str) -> None:
        self.console.print(f"[green]✅[/green] {msg}")

    def warn(self, msg: str) -> None:
        self.console.print(f"[yellow]⚠️[/yellow]  {msg}")

    def print_header(self, title: str) -> None:
        """Print the banner that opens a build or release run."""
        self.console.print(
            Panel.fit(f"[bold blue]{escape(title)}[/bold blue]", border_style="blue")
        )

    def report_failure(self, error: ReleaseError) -> None:
        """Print a failed stage with its resource and the external error text.

        Stage and message go on one line. The resource and the raw output of
        the failing command go into a details panel, printed without markup
        so gcloud and docker output shows up as it was emitted.
        """
        self.console.print(f"[red]❌[/red] [bold red]{escape(str(error))}[/bold red]")

        lines = []
        if error.resource:
            lines.append(f"Resource: {error.resource}")
        if error.details:
            lines.append(error.details)
        if lines:
            self.console.print(
                Panel(escape("\n".join(lines)), title="Details", border_style="red")
            )


def with_error_handling(func: Callable[..., None]) -> Callable[..., None]:
    """Run a command, turning release failures into exit codes.

    A ReleaseError exits 1 after its stage, resource and details are
    printed. Ctrl-C exits 130.
    """

    @wraps(func)
    def wrapper(*args: object, **kwargs: object) -> None:
        try:
            func(*args, **kwargs)
        except ReleaseError as e:
            console.report_failure(e)
            raise typer.Exit(1) from None
        except KeyboardInterrupt:
            console.print(
                "\n[dim]Cancelled. Resources replaced before the interrupt stay live.[/dim]"
            )
            raise typer.Exit(130) from None

    return wrapper


# Shared console instance for consistent output
console = CLIConsole()
