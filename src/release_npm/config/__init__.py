"""Configuration management for release-npm."""

from __future__ import annotations

from release_npm.config.loader import load_config
from release_npm.config.models import (
    CommitsConfig,
    PreflightConfig,
    PublishConfig,
    ReleaseNpmConfig,
)

__all__ = [
    "CommitsConfig",
    "PreflightConfig",
    "PublishConfig",
    "ReleaseNpmConfig",
    "load_config",
]
