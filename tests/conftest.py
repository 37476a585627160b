"""Shared fixtures for release-npm tests."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from release_npm.prompts import Choice
from release_npm.registry.npm import NpmRegistry
from release_npm.vcs.git import GitRepository


class ScriptedPrompter:
    """Prompter that replays canned answers.

    ``choices`` are 1-based menu positions, as an operator would type them.
    """

    def __init__(
        self,
        choices: Sequence[int] = (),
        confirms: Sequence[bool] = (),
        secrets: Sequence[str] = (),
    ) -> None:
        self.choices = list(choices)
        self.confirms = list(confirms)
        self.secrets = list(secrets)
        self.menus: list[tuple[str, list[Choice[Any]]]] = []
        self.questions: list[str] = []

    def choose(self, question: str, options: Sequence[Choice[Any]]) -> Any:
        self.menus.append((question, list(options)))
        return options[self.choices.pop(0) - 1].value

    def confirm(self, question: str, default: bool = False) -> bool:
        self.questions.append(question)
        return self.confirms.pop(0) if self.confirms else default

    def ask_secret(self, question: str) -> str:
        self.questions.append(question)
        return self.secrets.pop(0)


def write_package_json(path: Path, **fields: Any) -> Path:
    data = {"name": "demo-cli", "version": "1.0.0", **fields}
    package_json = path / "package.json"
    package_json.write_text(json.dumps(data, indent=2) + "\n")
    return package_json


@pytest.fixture
def package_dir(tmp_path: Path) -> Path:
    """A directory holding a minimal package.json (demo-cli@1.0.0)."""
    write_package_json(tmp_path)
    return tmp_path


@pytest.fixture
def mock_registry(tmp_path: Path) -> MagicMock:
    """Create a mock NpmRegistry bound to tmp_path."""
    registry = MagicMock(spec=NpmRegistry)
    registry.path = tmp_path
    registry.package_manager = "npm"
    registry.whoami.return_value = "octocat"
    return registry


@pytest.fixture
def mock_repo(tmp_path: Path) -> MagicMock:
    """Create a mock GitRepository."""
    repo = MagicMock(spec=GitRepository)
    repo.path = tmp_path
    return repo
