"""Core business logic for release-npm.

This module contains the fundamental building blocks:
- Semantic version parsing and bump arithmetic
- Commit history analysis
- Next-version selection against the published version
- Credential resolution and publishing
- Release tagging and publication verification
"""

from __future__ import annotations

from release_npm.core.credentials import (
    AutomationToken,
    Credential,
    InteractiveOneTimeCode,
    load_automation_token,
    resolve_credential,
)
from release_npm.core.history import (
    HistoryAnalysis,
    analyze_history,
    analyze_summaries,
    classify_changes,
)
from release_npm.core.publisher import (
    check_package_contents,
    ensure_logged_in,
    publish,
    run_preflight,
    scoped_auth_file,
)
from release_npm.core.selector import (
    PublishCandidate,
    build_candidates,
    select_version,
    validate_selection,
)
from release_npm.core.tagger import TagResult, create_release_tag, tag_name, verify_publication
from release_npm.core.version import (
    BumpKind,
    Ordering,
    SemanticVersion,
    bump,
    compare,
    parse_version,
)

__all__ = [
    # Credentials
    "AutomationToken",
    # Version
    "BumpKind",
    "Credential",
    # History
    "HistoryAnalysis",
    "InteractiveOneTimeCode",
    "Ordering",
    # Selection
    "PublishCandidate",
    "SemanticVersion",
    # Tagging
    "TagResult",
    "analyze_history",
    "analyze_summaries",
    "build_candidates",
    "bump",
    # Publishing
    "check_package_contents",
    "classify_changes",
    "compare",
    "create_release_tag",
    "ensure_logged_in",
    "load_automation_token",
    "parse_version",
    "publish",
    "resolve_credential",
    "run_preflight",
    "scoped_auth_file",
    "select_version",
    "tag_name",
    "validate_selection",
    "verify_publication",
]
