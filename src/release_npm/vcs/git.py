"""Git operations via the git CLI.

Only the handful of read operations the release workflow needs, plus
annotated tag creation. Nothing here pushes to a remote.
"""

from __future__ import annotations

from pathlib import Path

from release_npm.exceptions import GitError
from release_npm.process import run_command


class GitRepository:
    """A git working tree rooted at ``path``."""

    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path) if path is not None else Path.cwd()

    def _git(self, *args: str) -> str:
        return run_command(["git", *args], self.path, error_class=GitError)

    def list_tags(self, pattern: str | None = None) -> list[str]:
        """List tags, highest version first.

        Args:
            pattern: Optional glob, e.g. ``v*``

        Returns:
            Tag names sorted by descending version
        """
        args = ["tag", "--sort=-v:refname", "--list"]
        if pattern:
            args.append(pattern)
        return [line.strip() for line in self._git(*args).splitlines() if line.strip()]

    def get_latest_tag(self, pattern: str | None = None) -> str | None:
        """Return the highest-versioned tag matching ``pattern``, if any."""
        tags = self.list_tags(pattern)
        return tags[0] if tags else None

    def tag_exists(self, tag: str) -> bool:
        """Check whether a tag with exactly this name exists."""
        return tag in self.list_tags(tag)

    def get_commit_summaries(self, since_tag: str | None = None) -> list[str]:
        """Return commit subject lines, newest first.

        Args:
            since_tag: Exclusive lower bound; all of HEAD's history when None
        """
        revision = f"{since_tag}..HEAD" if since_tag else "HEAD"
        output = self._git("log", revision, "--format=%s")
        return [line for line in output.splitlines() if line.strip()]

    def create_tag(self, tag: str, message: str) -> None:
        """Create an annotated tag at HEAD."""
        self._git("tag", "-a", tag, "-m", message)
