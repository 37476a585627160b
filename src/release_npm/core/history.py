"""Commit history analysis.

Suggests a version bump from the commit summaries since the last release
tag. The classification is a keyword heuristic over the lowercased
summaries, not a conventional-commit parser: any summary containing
``breaking`` suggests a major release, any containing ``add`` a minor one.
Routine commits such as "add dependency" can therefore over-suggest; the
operator always confirms the final choice.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from release_npm.config.models import CommitsConfig
from release_npm.core.version import BumpKind
from release_npm.exceptions import GitError
from release_npm.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from release_npm.config.models import ReleaseNpmConfig
    from release_npm.vcs.git import GitRepository

logger = get_logger(__name__)


@dataclass(frozen=True)
class HistoryAnalysis:
    """Outcome of inspecting history since the last release.

    Attributes:
        is_first_release: No release tag exists yet
        commit_count: Commits since the last tag (0 for a first release)
        suggestion: Suggested bump, or None when nothing changed
        last_tag: The most recent release tag, if any
        commits: Commit summaries since the last tag, newest first
    """

    is_first_release: bool
    commit_count: int
    suggestion: BumpKind | None
    last_tag: str | None = None
    commits: list[str] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return self.suggestion is not None


def classify_changes(
    summaries: Sequence[str],
    config: CommitsConfig | None = None,
) -> BumpKind | None:
    """Classify a change set by keyword markers.

    Breaking markers win over feature markers, which win over the patch
    default. An empty change set yields no suggestion.

    Args:
        summaries: Commit summary lines
        config: Marker configuration (defaults apply when None)

    Returns:
        Suggested bump kind, or None for an empty change set
    """
    if not summaries:
        return None

    config = config or CommitsConfig()
    text = "\n".join(summaries).lower()

    if any(marker.lower() in text for marker in config.breaking_markers):
        return BumpKind.MAJOR
    if any(marker.lower() in text for marker in config.feature_markers):
        return BumpKind.MINOR
    return BumpKind.PATCH


def analyze_summaries(
    last_tag: str | None,
    summaries: Sequence[str],
    config: CommitsConfig | None = None,
) -> HistoryAnalysis:
    """Build a HistoryAnalysis from already-collected history.

    Args:
        last_tag: Most recent release tag, or None if never released
        summaries: Commit summaries since ``last_tag``
        config: Marker configuration

    Returns:
        The analysis
    """
    if last_tag is None:
        # History before the first tag is not attributed to any release.
        return HistoryAnalysis(
            is_first_release=True,
            commit_count=0,
            suggestion=BumpKind.MINOR,
        )

    commits = list(summaries)
    return HistoryAnalysis(
        is_first_release=False,
        commit_count=len(commits),
        suggestion=classify_changes(commits, config),
        last_tag=last_tag,
        commits=commits,
    )


def analyze_history(repo: GitRepository, config: ReleaseNpmConfig) -> HistoryAnalysis:
    """Analyze git history since the last release tag.

    Unreadable history does not abort the release: the analysis degrades
    to a patch suggestion and the operator picks the version manually.
    """
    try:
        last_tag = repo.get_latest_tag(config.tag_pattern)
        summaries = repo.get_commit_summaries(last_tag) if last_tag else []
    except GitError as e:
        logger.warning("Could not analyze git history: %s", e.stderr.strip() or e)
        return HistoryAnalysis(
            is_first_release=False,
            commit_count=0,
            suggestion=BumpKind.PATCH,
        )

    return analyze_summaries(last_tag, summaries, config.commits)
