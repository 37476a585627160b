"""Next-version selection.

Computes which versions may legally be published: every candidate must be
strictly greater than what the registry already serves. The operator picks
one of them through a Prompter, and the pick is checked against the
published version a second time before it is returned.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from release_npm.core.version import BumpKind, SemanticVersion
from release_npm.exceptions import NoEligibleVersion
from release_npm.prompts import Choice

if TYPE_CHECKING:
    from collections.abc import Callable

    from release_npm.prompts import Prompter

_DESCRIPTIONS = {
    BumpKind.PATCH: "Bug fixes",
    BumpKind.MINOR: "New features",
    BumpKind.MAJOR: "Breaking changes",
}


@dataclass(frozen=True)
class PublishCandidate:
    """A version the operator may choose.

    Attributes:
        bump_kind: The bump producing this version; None for "keep current"
        version: Resulting version
        is_recommended: Matches the history analysis suggestion
    """

    bump_kind: BumpKind | None
    version: SemanticVersion
    is_recommended: bool = False

    @property
    def is_keep_current(self) -> bool:
        return self.bump_kind is None

    @property
    def label(self) -> str:
        if self.bump_kind is None:
            text = f"Keep current ({self.version})"
        else:
            name = self.bump_kind.value.capitalize()
            text = f"{name} ({self.version}) - {_DESCRIPTIONS[self.bump_kind]}"
        return f"{text} (Recommended)" if self.is_recommended else text


def _is_eligible(version: SemanticVersion, published: SemanticVersion | None) -> bool:
    return published is None or version > published


def build_candidates(
    working: SemanticVersion,
    suggestion: BumpKind | None,
    published: SemanticVersion | None,
) -> list[PublishCandidate]:
    """Compute the legal choice set.

    Candidates are patch, minor, major and "keep current", in that order,
    restricted to versions strictly above ``published``. The recommended
    candidate is moved to the front.

    Args:
        working: Version currently in package.json
        suggestion: Bump suggested by history analysis
        published: Version the registry serves; None if never published

    Returns:
        Non-empty, deduplicated candidate list

    Raises:
        NoEligibleVersion: If every option is <= ``published``
    """
    options: list[PublishCandidate] = [
        PublishCandidate(kind, working.bump(kind), is_recommended=kind == suggestion)
        for kind in (BumpKind.PATCH, BumpKind.MINOR, BumpKind.MAJOR)
    ]
    options.append(PublishCandidate(None, working))

    seen: set[SemanticVersion] = set()
    candidates: list[PublishCandidate] = []
    for option in options:
        if option.version in seen or not _is_eligible(option.version, published):
            continue
        seen.add(option.version)
        candidates.append(option)

    if not candidates:
        assert published is not None
        raise NoEligibleVersion(
            published,
            working,
            tried=[working, *(o.version for o in options if not o.is_keep_current)],
        )

    # sorted() is stable, so the original order holds among the rest.
    return sorted(candidates, key=lambda c: not c.is_recommended)


def validate_selection(
    version: SemanticVersion,
    published: SemanticVersion | None,
) -> SemanticVersion:
    """Re-check a chosen version against the published one.

    Raises:
        NoEligibleVersion: If ``version`` is not strictly greater
    """
    if not _is_eligible(version, published):
        assert published is not None
        raise NoEligibleVersion(published, version)
    return version


def select_version(
    working: SemanticVersion,
    suggestion: BumpKind | None,
    published: SemanticVersion | None,
    prompter: Prompter,
    refresh_published: Callable[[], SemanticVersion | None] | None = None,
) -> SemanticVersion:
    """Ask the operator for the next version.

    Args:
        working: Version currently in package.json
        suggestion: Bump suggested by history analysis
        published: Version the registry served when the run started
        prompter: Operator interaction
        refresh_published: Re-reads the registry after the operator answers,
            so a release made by someone else in the meantime is caught

    Returns:
        The chosen version, validated against the published version

    Raises:
        NoEligibleVersion: If nothing can be offered, or the pick is stale
    """
    candidates = build_candidates(working, suggestion, published)
    choice = prompter.choose(
        "Select version update:",
        [Choice(c.label, c) for c in candidates],
    )
    if refresh_published is not None:
        published = refresh_published()
    return validate_selection(choice.version, published)
