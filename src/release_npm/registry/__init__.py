"""Package registry adapters."""

from __future__ import annotations

from release_npm.registry.npm import NpmRegistry, detect_package_manager

__all__ = ["NpmRegistry", "detect_package_manager"]
