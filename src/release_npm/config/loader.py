"""Configuration loading from package.json."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from release_npm.config.models import ReleaseNpmConfig
from release_npm.exceptions import ConfigNotFoundError, ConfigValidationError

CONFIG_KEY = "release-npm"


def find_package_json(start: Path | None = None) -> Path:
    """Find package.json by walking up from ``start``.

    Args:
        start: Directory to start searching from (defaults to cwd)

    Returns:
        Path to package.json

    Raises:
        ConfigNotFoundError: If no package.json is found
    """
    current = (start or Path.cwd()).resolve()

    for directory in (current, *current.parents):
        candidate = directory / "package.json"
        if candidate.is_file():
            return candidate

    raise ConfigNotFoundError(
        f"Could not find package.json in {current} or any parent directory",
        hint="Run release-npm from inside an npm package.",
    )


def load_package_json(path: Path) -> dict[str, Any]:
    """Load and parse a package.json file.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigValidationError: If the file is not a JSON object
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"File not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigValidationError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigValidationError(f"Expected a JSON object in {path}")
    return data


def extract_release_npm_config(package: dict[str, Any]) -> dict[str, Any]:
    """Return the ``"release-npm"`` section, or an empty dict if absent."""
    section = package.get(CONFIG_KEY, {})
    if not isinstance(section, dict):
        raise ConfigValidationError(f'"{CONFIG_KEY}" in package.json must be an object')
    return section


def _resolve(path: Path | None) -> Path:
    if path is None:
        return find_package_json()
    if path.is_dir():
        return find_package_json(path)
    return path


def load_config(path: Path | None = None) -> ReleaseNpmConfig:
    """Load release-npm configuration.

    Args:
        path: package.json, or a directory to search from

    Returns:
        Validated configuration

    Raises:
        ConfigNotFoundError: If package.json cannot be found
        ConfigValidationError: If the configuration is invalid
    """
    package = load_package_json(_resolve(path))
    raw = extract_release_npm_config(package)

    try:
        return ReleaseNpmConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid release-npm configuration:\n{e}") from e


def get_package_name(path: Path | None = None) -> str:
    """Get the package name from package.json.

    Raises:
        ConfigValidationError: If the name is missing
    """
    package_path = _resolve(path)
    name = load_package_json(package_path).get("name")
    if not isinstance(name, str) or not name:
        raise ConfigValidationError(f'Missing "name" in {package_path}')
    return name


def get_package_version(path: Path | None = None) -> str:
    """Get the raw version string from package.json.

    Raises:
        ConfigValidationError: If the version is missing
    """
    package_path = _resolve(path)
    version = load_package_json(package_path).get("version")
    if not isinstance(version, str) or not version:
        raise ConfigValidationError(f'Missing "version" in {package_path}')
    return version
