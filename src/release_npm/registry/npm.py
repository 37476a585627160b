"""npm registry access through the npm CLI.

The registry is only ever asked four things: who am I, what version is
published, what does the package look like, and publish this. Scripts
(tests, build) run through whichever package manager the project uses.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from release_npm.exceptions import RegistryError
from release_npm.process import run_command

# Checked in order; the first lock file found wins.
LOCK_FILES: tuple[tuple[str, str], ...] = (
    ("pnpm-lock.yaml", "pnpm"),
    ("yarn.lock", "yarn"),
    ("bun.lockb", "bun"),
    ("package-lock.json", "npm"),
)


def detect_package_manager(path: Path) -> str:
    """Detect the package manager from lock files in ``path``."""
    for lock_file, manager in LOCK_FILES:
        if (path / lock_file).exists():
            return manager
    return "npm"


class NpmRegistry:
    """npm CLI adapter bound to one package directory."""

    def __init__(self, path: Path | str, package_manager: str | None = None) -> None:
        self.path = Path(path)
        self.package_manager = package_manager or detect_package_manager(self.path)

    def _npm(self, *args: str, capture: bool = True) -> str:
        return run_command(["npm", *args], self.path, error_class=RegistryError, capture=capture)

    def whoami(self) -> str:
        """Return the logged-in npm username.

        Raises:
            RegistryError: If not logged in
        """
        return self._npm("whoami").strip()

    def login(self) -> None:
        """Run ``npm login`` attached to the terminal."""
        self._npm("login", capture=False)

    def get_published_version(self, name: str) -> str | None:
        """Return the version npm currently serves for ``name``.

        A package that has never been published (E404) yields None.
        """
        try:
            output = self._npm("view", name, "version").strip()
        except RegistryError as e:
            if "404" in e.stderr:
                return None
            raise
        return output or None

    def view_info(self, name: str) -> dict[str, Any]:
        """Return ``npm view --json`` metadata for ``name``."""
        output = self._npm("view", name, "--json")
        try:
            data = json.loads(output) if output.strip() else {}
        except json.JSONDecodeError as e:
            raise RegistryError(
                ["npm", "view", name, "--json"], 0, stdout=output, stderr=str(e)
            ) from e
        return data if isinstance(data, dict) else {}

    def pack_dry_run(self) -> str:
        """List the files ``npm publish`` would upload."""
        return self._npm("pack", "--dry-run")

    def publish(self, *, access: str = "public", otp: str | None = None) -> None:
        """Publish the package in ``self.path``."""
        args = ["publish", "--access", access]
        if otp:
            args.append(f"--otp={otp}")
        self._npm(*args, capture=False)

    def run_script(self, script: str) -> None:
        """Run a package.json script with the detected package manager.

        Output goes straight to the terminal.
        """
        run_command(
            [self.package_manager, "run", script],
            self.path,
            error_class=RegistryError,
            capture=False,
        )
