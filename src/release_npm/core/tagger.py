"""Release tagging and publication verification.

Both stages run after the package is already on the registry, so neither
can fail the release: an existing tag or a registry that lags behind is
reported as a warning.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from release_npm.exceptions import (
    GitError,
    RegistryError,
    TagAlreadyExists,
    VerificationMismatch,
)
from release_npm.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from release_npm.core.version import SemanticVersion
    from release_npm.registry.npm import NpmRegistry
    from release_npm.vcs.git import GitRepository

logger = get_logger(__name__)


@dataclass(frozen=True)
class TagResult:
    """Outcome of tagging a release.

    Attributes:
        tag: Tag name
        created: False when the tag already existed or creation failed
        push_command: Command the operator should run to publish the tag
        warning: Why the tag was not created
    """

    tag: str
    created: bool
    push_command: str | None = None
    warning: str | None = None


def tag_name(version: SemanticVersion, prefix: str = "v") -> str:
    """Derive the release tag for ``version``."""
    return f"{prefix}{version}"


def create_release_tag(
    repo: GitRepository,
    version: SemanticVersion,
    *,
    prefix: str = "v",
    remote: str = "origin",
) -> TagResult:
    """Create an annotated release tag, once.

    The tag is never pushed; the returned ``push_command`` tells the
    operator how to do it.
    """
    tag = tag_name(version, prefix)

    try:
        if repo.tag_exists(tag):
            raise TagAlreadyExists(tag)
        repo.create_tag(tag, f"Release {tag}")
    except TagAlreadyExists as e:
        logger.warning(e.message)
        return TagResult(tag=tag, created=False, warning=e.message)
    except GitError as e:
        warning = f"Could not create git tag {tag}: {e.stderr.strip() or e.message}"
        logger.warning(warning)
        return TagResult(tag=tag, created=False, warning=warning)

    return TagResult(tag=tag, created=True, push_command=f"git push {remote} {tag}")


def verify_publication(
    registry: NpmRegistry,
    name: str,
    version: SemanticVersion,
    *,
    delay: float = 2.0,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Check that the registry serves the version just published.

    Waits ``delay`` seconds first. A mismatch is advisory only.

    Returns:
        True if the registry reports ``version``
    """
    sleep(delay)

    try:
        actual = registry.get_published_version(name)
    except RegistryError as e:
        logger.warning("Could not verify publication: %s", e.stderr.strip() or e)
        return False

    if actual == str(version):
        return True

    logger.warning(VerificationMismatch(str(version), actual).message)
    return False
