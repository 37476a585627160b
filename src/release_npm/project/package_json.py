"""package.json version manipulation.

This module reads and updates the top-level ``"version"`` field of
package.json.

It preserves formatting (indentation, key order, trailing newline) by
using a targeted regex replacement rather than re-serializing the JSON.
"""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING

from release_npm.config.loader import find_package_json
from release_npm.exceptions import ProjectError, VersionNotFoundError

if TYPE_CHECKING:
    from pathlib import Path


def _resolve(path: Path | None) -> Path:
    if path is None:
        return find_package_json()
    if path.is_dir():
        return find_package_json(path)
    return path


def _load(package_path: Path) -> tuple[str, dict]:
    if not package_path.is_file():
        raise ProjectError(f"package.json not found: {package_path}")

    content = package_path.read_text(encoding="utf-8")
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ProjectError(f"Invalid JSON in {package_path}: {e}") from e

    if not isinstance(data, dict):
        raise ProjectError(f"Expected a JSON object in {package_path}")
    return content, data


def get_package_json_version(path: Path | None = None) -> str:
    """Get the version from package.json.

    Args:
        path: Path to package.json or directory to search from

    Returns:
        Version string

    Raises:
        VersionNotFoundError: If there is no top-level version
    """
    package_path = _resolve(path)
    _, data = _load(package_path)

    version = data.get("version")
    if not isinstance(version, str):
        raise VersionNotFoundError(f'Could not find "version" in {package_path}.')
    return version


def update_package_json_version(path: Path | None, new_version: str) -> Path:
    """Update the version in package.json.

    Args:
        path: Path to package.json or directory containing it
        new_version: New version string to set

    Returns:
        Path to the updated package.json

    Raises:
        VersionNotFoundError: If there is no top-level version
        ProjectError: If the file could not be updated
    """
    package_path = _resolve(path)
    content, data = _load(package_path)

    current = data.get("version")
    if not isinstance(current, str):
        raise VersionNotFoundError(f'Could not find "version" to update in {package_path}.')

    if current == new_version:
        raise ProjectError(
            f"Version in {package_path} was not updated. It is already {new_version}."
        )

    # The first "version" key holding the current value is the top-level one
    # for any conventionally ordered package.json; nested keys come later.
    pattern = r'("version"\s*:\s*)"' + re.escape(current) + '"'
    new_content, count = re.subn(
        pattern,
        lambda m: f'{m.group(1)}"{new_version}"',
        content,
        count=1,
    )

    if count == 0 or json.loads(new_content).get("version") != new_version:
        # Fall back to a full rewrite in npm's own style.
        data["version"] = new_version
        new_content = json.dumps(data, indent=2, ensure_ascii=False) + "\n"

    package_path.write_text(new_content, encoding="utf-8")
    return package_path
