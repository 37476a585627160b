"""Typer application for release-npm.

Usage:
    release-npm check
    release-npm publish
    release-npm publish --otp
"""

from __future__ import annotations

from typing import Annotated, Optional

import typer
from rich.console import Console

from release_npm import __version__
from release_npm.logging import configure_logging

app = typer.Typer(
    name="release-npm",
    help="Safe, interactive npm package releases.",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)

PathArgument = Annotated[
    Optional[str],
    typer.Argument(help="Package directory (defaults to the current directory)"),
]


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"release-npm {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show external commands and debug output")
    ] = False,
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show version"),
    ] = None,
) -> None:
    """Safe, interactive npm package releases."""
    configure_logging(verbose, console=err_console)


@app.command()
def publish(
    path: PathArgument = None,
    otp: Annotated[
        bool,
        typer.Option("--otp", help="Skip the automation token and prompt for a one-time code"),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Do not ask for final confirmation before publishing"),
    ] = False,
) -> None:
    """Test, build, version, publish, tag and verify the package."""
    from release_npm.cli.commands.publish import run_publish

    run_publish(path=path, otp=otp, yes=yes, console=console, err_console=err_console)


@app.command()
def check(path: PathArgument = None) -> None:
    """Preview versions and history without changing anything."""
    from release_npm.cli.commands.check import run_check

    run_check(path=path, console=console, err_console=err_console)


def main() -> None:
    """Console script entry point."""
    app()
