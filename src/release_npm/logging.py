"""Logging setup for release-npm.

Operator-facing progress is printed on a rich Console by the CLI commands.
The ``logging`` tree under ``release_npm`` carries diagnostics: the
external commands being run, and warnings for non-fatal stage results.
It is rendered through rich so both streams look alike in a terminal.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "release_npm"


def configure_logging(verbose: bool = False, console: Console | None = None) -> None:
    """Attach a RichHandler to the release_npm logger.

    Calling this again replaces the previous handler, so repeated CLI
    invocations in one process (tests) do not duplicate output.

    Args:
        verbose: Log at DEBUG instead of WARNING
        console: Console to render to (defaults to stderr)
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=verbose,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return a logger below the release_npm namespace."""
    if name == LOGGER_NAME or name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
