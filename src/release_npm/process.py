"""Thin wrapper around subprocess for external tools (git, npm, pnpm...)."""

from __future__ import annotations

import subprocess
from typing import TYPE_CHECKING

from release_npm.exceptions import CommandError
from release_npm.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

logger = get_logger(__name__)


def run_command(
    args: Sequence[str],
    cwd: Path,
    *,
    error_class: type[CommandError] = CommandError,
    capture: bool = True,
) -> str:
    """Run a command synchronously and return its stdout.

    Args:
        args: Command and arguments
        cwd: Working directory
        error_class: CommandError subclass raised on failure
        capture: Capture output; when False the command inherits the
            terminal (interactive logins, live test output)

    Returns:
        Captured stdout, or an empty string when not capturing

    Raises:
        CommandError: (or ``error_class``) on non-zero exit or a missing executable
    """
    logger.debug("Running: %s (cwd=%s)", " ".join(args), cwd)

    try:
        result = subprocess.run(
            list(args),
            cwd=cwd,
            capture_output=capture,
            text=True,
            check=True,
        )
    except FileNotFoundError as e:
        raise error_class(args, 127, stderr=f"{args[0]}: command not found") from e
    except subprocess.CalledProcessError as e:
        raise error_class(
            args,
            e.returncode,
            stdout=e.stdout or "",
            stderr=e.stderr or "",
        ) from e

    return result.stdout if capture and result.stdout else ""
