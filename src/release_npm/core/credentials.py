"""Registry credential resolution.

Publishing authenticates either with an automation token kept in the
project's ``.env`` file, or with a one-time code typed by the operator.
Credentials live only in memory for the duration of one run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from dotenv import dotenv_values

from release_npm.exceptions import InvalidCredential

if TYPE_CHECKING:
    from pathlib import Path

    from release_npm.prompts import Prompter

MIN_OTP_LENGTH = 6


@dataclass(frozen=True)
class AutomationToken:
    """npm automation token (publishes without 2FA)."""

    token: str = field(repr=False)


@dataclass(frozen=True)
class InteractiveOneTimeCode:
    """npm two-factor one-time code."""

    code: str = field(repr=False)

    def __post_init__(self) -> None:
        if len(self.code) < MIN_OTP_LENGTH:
            raise InvalidCredential(
                "Invalid OTP code. Please try again.",
                hint=f"One-time codes have at least {MIN_OTP_LENGTH} characters.",
            )


Credential = AutomationToken | InteractiveOneTimeCode


def load_automation_token(env_file: Path, variable: str = "NPM_PUBLISH_TOKEN") -> str | None:
    """Read an automation token from a dotenv file.

    Args:
        env_file: Path to the ``.env`` file
        variable: Name of the token variable

    Returns:
        The token, or None if the file or variable is missing or empty
    """
    if not env_file.is_file():
        return None
    value = (dotenv_values(env_file).get(variable) or "").strip()
    return value or None


def resolve_credential(
    token: str | None,
    *,
    force_interactive: bool,
    prompter: Prompter,
) -> Credential:
    """Choose how to authenticate the publish.

    Args:
        token: Automation token from local configuration, if any
        force_interactive: Ignore the token and ask for a one-time code
        prompter: Used to ask for the one-time code

    Returns:
        The credential to publish with

    Raises:
        InvalidCredential: If the one-time code is shorter than 6 characters
    """
    if token and not force_interactive:
        return AutomationToken(token)

    code = prompter.ask_secret("Enter your npm OTP code").strip()
    return InteractiveOneTimeCode(code)
