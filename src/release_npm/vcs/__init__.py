"""Version control adapters."""

from __future__ import annotations

from release_npm.vcs.git import GitRepository

__all__ = ["GitRepository"]
