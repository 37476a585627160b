"""Project manifest handling."""

from __future__ import annotations

from release_npm.project.package_json import (
    get_package_json_version,
    update_package_json_version,
)

__all__ = ["get_package_json_version", "update_package_json_version"]
