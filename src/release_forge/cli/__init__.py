"""Main CLI application module.

Commands:
- build: build and push the container image
- image-url: print the image URL a build would produce
- release: deploy an image to an environment
- config: print the resolved configuration of an environment
"""

from pathlib import Path
from typing import Annotated

import typer

from .commands import build, image_url, release, show_config
from .context import build_cli_context

app = typer.Typer(
    help="🚢 release-forge - build images and release them to Cloud Run",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.callback()
def _init_context(
    ctx: typer.Context,
    resources_dir: Annotated[
        Path | None,
        typer.Option(
            "--resources-dir",
            envvar="RELEASE_FORGE_RESOURCES_DIR",
            help="Directory holding values.yaml, env/ and manifest templates "
            "(default: .github/resources)",
        ),
    ] = None,
) -> None:
    ctx.obj = build_cli_context(resources_dir)


app.command("build")(build)
app.command("image-url")(image_url)
app.command("release")(release)
app.command("config")(show_config)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
