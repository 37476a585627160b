"""Preflight gating and npm publishing.

Nothing reaches the registry unless the test and build scripts pass. A
token-authenticated publish writes the token to the package's ``.npmrc``
for exactly the duration of ``npm publish``. The file is always put back
the way it was, whatever happens during the publish.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from release_npm.core.credentials import AutomationToken, InteractiveOneTimeCode
from release_npm.exceptions import LoginFailed, PreflightFailed, PublishFailed, RegistryError
from release_npm.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from release_npm.config.models import ReleaseNpmConfig
    from release_npm.core.credentials import Credential
    from release_npm.prompts import Prompter
    from release_npm.registry.npm import NpmRegistry

logger = get_logger(__name__)

OTP_RETRY_HINT = "If using a publish token, try running with the --otp flag instead."


def ensure_logged_in(registry: NpmRegistry, prompter: Prompter) -> str:
    """Make sure there is an npm session, logging in if needed.

    Returns:
        The npm username

    Raises:
        LoginFailed: If the operator declines, login fails, or the session
            cannot be verified afterwards
    """
    try:
        return registry.whoami()
    except RegistryError:
        logger.warning("Not logged in to npm.")

    if not prompter.confirm("You need to log in to npm to publish. Run npm login now?", True):
        raise LoginFailed("Not logged in to npm.", hint="Run: npm login")

    try:
        registry.login()
        return registry.whoami()
    except RegistryError as e:
        raise LoginFailed("npm login failed. Please try again.", hint=e.stderr or None) from e


def run_preflight(registry: NpmRegistry, config: ReleaseNpmConfig) -> list[str]:
    """Run the test and build scripts.

    Returns:
        Names of the stages that ran

    Raises:
        PreflightFailed: On the first failing stage
    """
    stages: list[tuple[str, str]] = []
    if config.preflight.run_tests:
        stages.append(("tests", config.preflight.test_script))
    if config.preflight.run_build:
        stages.append(("build", config.preflight.build_script))

    for stage, script in stages:
        try:
            registry.run_script(script)
        except RegistryError as e:
            raise PreflightFailed(stage, detail=e.stderr.strip() or None) from e
    return [stage for stage, _ in stages]


def check_package_contents(registry: NpmRegistry) -> str | None:
    """Show what would be uploaded (advisory only)."""
    try:
        return registry.pack_dry_run()
    except RegistryError as e:
        logger.warning("Could not verify package contents: %s", e.stderr.strip() or e)
        return None


def auth_line(registry_url: str, token: str) -> str:
    """Format an ``.npmrc`` auth line for ``registry_url``."""
    parts = urlsplit(registry_url)
    path = parts.path if parts.path.endswith("/") else f"{parts.path}/"
    return f"//{parts.netloc}{path}:_authToken={token}\n"


@contextmanager
def scoped_auth_file(npmrc: Path, token: str, registry_url: str) -> Iterator[Path]:
    """Temporarily replace ``npmrc`` with one holding ``token``.

    On exit the file is restored byte-for-byte, or removed if it did not
    exist before. This runs on success, on error and on interrupt.
    """
    original = npmrc.read_bytes() if npmrc.exists() else None
    try:
        npmrc.write_text(auth_line(registry_url, token), encoding="utf-8")
        yield npmrc
    finally:
        if original is not None:
            npmrc.write_bytes(original)
        else:
            npmrc.unlink(missing_ok=True)


def publish(registry: NpmRegistry, credential: Credential, config: ReleaseNpmConfig) -> None:
    """Publish the package with the given credential.

    There is no retry; a failed publish ends the run.

    Raises:
        PublishFailed: If npm publish fails
    """
    access = config.publish.access

    if isinstance(credential, AutomationToken):
        npmrc = registry.path / ".npmrc"
        try:
            with scoped_auth_file(npmrc, credential.token, config.publish.registry_url):
                registry.publish(access=access)
        except RegistryError as e:
            raise PublishFailed("Failed to publish to npm.", hint=OTP_RETRY_HINT) from e
        return

    if isinstance(credential, InteractiveOneTimeCode):
        try:
            registry.publish(access=access, otp=credential.code)
        except RegistryError as e:
            raise PublishFailed(
                "Failed to publish to npm.",
                hint=e.stderr.strip() or "Check the one-time code and try again.",
            ) from e
        return

    raise TypeError(f"Unsupported credential: {type(credential).__name__}")
