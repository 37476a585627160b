"""Exception hierarchy for release-npm.

Every error raised by the orchestrator derives from ReleaseNpmError and
carries an optional ``hint`` with remediation text for the operator.

Fatal errors abort the remaining workflow stages. TagAlreadyExists and
VerificationMismatch are non-fatal: callers downgrade them to warnings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from release_npm.core.version import SemanticVersion


class ReleaseNpmError(Exception):
    """Base exception for release-npm."""

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(ReleaseNpmError):
    """Configuration could not be loaded."""


class ConfigNotFoundError(ConfigError):
    """package.json was not found."""


class ConfigValidationError(ConfigError):
    """Configuration is present but invalid."""


# =============================================================================
# Versions and project manifest
# =============================================================================


class ParseError(ReleaseNpmError):
    """A value could not be parsed."""


class InvalidVersionFormat(ParseError):
    """Version string is not three dot-separated non-negative integers."""

    def __init__(self, text: str) -> None:
        super().__init__(
            f"Invalid version format: {text!r}",
            hint="Expected MAJOR.MINOR.PATCH, e.g. 1.4.2",
        )
        self.text = text


class ProjectError(ReleaseNpmError):
    """The package manifest could not be read or updated."""


class VersionNotFoundError(ProjectError):
    """The manifest has no version field."""


# =============================================================================
# External commands
# =============================================================================


class CommandError(ReleaseNpmError):
    """An external command exited unsuccessfully."""

    def __init__(
        self,
        cmd: Sequence[str],
        returncode: int,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        super().__init__(f"Command failed with exit code {returncode}: {' '.join(cmd)}")
        self.cmd = list(cmd)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class GitError(CommandError):
    """A git command failed."""


class RegistryError(CommandError):
    """An npm registry command failed."""


# =============================================================================
# Workflow stages
# =============================================================================


class LoginFailed(ReleaseNpmError):
    """Could not establish an npm session."""


class PreflightFailed(ReleaseNpmError):
    """Tests or build failed before any registry mutation."""

    def __init__(self, stage: str, detail: str | None = None) -> None:
        super().__init__(
            f"{stage.capitalize()} failed. Please fix the issues before publishing.",
            hint=detail,
        )
        self.stage = stage


class NoEligibleVersion(ReleaseNpmError):
    """No candidate version is strictly greater than the published one."""

    def __init__(
        self,
        published: SemanticVersion,
        working: SemanticVersion,
        tried: Sequence[SemanticVersion] = (),
    ) -> None:
        if tried:
            options = ", ".join(str(v) for v in tried)
            message = (
                f"Cannot publish: all version options ({options}) are <= "
                f"published version {published}"
            )
        else:
            message = (
                f"Cannot publish version {working}: must be higher than "
                f"published version {published}"
            )
        super().__init__(
            message,
            hint=(
                "Manually update the version in package.json to a version "
                f"higher than {published}"
            ),
        )
        self.published = published
        self.working = working
        self.tried = list(tried)


class InvalidCredential(ReleaseNpmError):
    """The one-time code is missing or too short."""


class PublishFailed(ReleaseNpmError):
    """npm publish failed; the auth file has already been restored."""


class TagAlreadyExists(ReleaseNpmError):
    """A release tag with this name already exists."""

    def __init__(self, tag: str) -> None:
        super().__init__(f"Git tag {tag} already exists.")
        self.tag = tag


class VerificationMismatch(ReleaseNpmError):
    """The registry does not (yet) report the published version."""

    def __init__(self, expected: str, actual: str | None) -> None:
        super().__init__(
            f"Registry reports {actual or 'no version'}, expected {expected}. "
            "It may take a few minutes to propagate."
        )
        self.expected = expected
        self.actual = actual
