"""End-to-end tests for the release-npm CLI with mocked git and npm."""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from release_npm import __version__
from release_npm.cli.app import app
from release_npm.exceptions import RegistryError
from tests.conftest import ScriptedPrompter, write_package_json

runner = CliRunner()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A package at 1.0.0 that verifies immediately after publishing."""
    write_package_json(tmp_path, **{"release-npm": {"publish": {"verify_delay": 0}}})
    return tmp_path


@pytest.fixture
def registry(project: Path) -> Iterator[MagicMock]:
    """Patch NpmRegistry; the registry starts out serving 1.0.0."""
    with patch("release_npm.cli.commands.publish.NpmRegistry") as cls:
        instance = cls.return_value
        instance.path = project
        instance.package_manager = "npm"
        instance.whoami.return_value = "octocat"
        instance.pack_dry_run.return_value = "npm notice package.json"
        instance.get_published_version.side_effect = ["1.0.0", "1.0.0", "1.0.1"]
        yield instance


@pytest.fixture
def repo() -> Iterator[MagicMock]:
    """Patch GitRepository with one fix since v1.0.0."""
    with patch("release_npm.cli.commands.publish.GitRepository") as cls:
        instance = cls.return_value
        instance.get_latest_tag.return_value = "v1.0.0"
        instance.get_commit_summaries.return_value = ["fix: handle [brackets] in names"]
        instance.tag_exists.return_value = False
        yield instance


def _with_prompter(prompter: ScriptedPrompter):
    return patch("release_npm.cli.commands.publish.RichPrompter", return_value=prompter)


def _version_of(project: Path) -> str:
    return json.loads((project / "package.json").read_text())["version"]


class TestGlobalOptions:
    """Tests for app-level options."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])

        assert "publish" in result.output
        assert "check" in result.output


class TestPublishCommand:
    """Tests for 'release-npm publish'."""

    def test_happy_path_with_token(self, project: Path, registry: MagicMock, repo: MagicMock):
        """Token publish bumps, tags, verifies and leaves no .npmrc."""
        (project / ".env").write_text("NPM_PUBLISH_TOKEN=npm_secret\n")
        seen_npmrc: list[str] = []
        registry.publish.side_effect = lambda **_: seen_npmrc.append(
            (project / ".npmrc").read_text()
        )
        prompter = ScriptedPrompter(choices=[1])

        with _with_prompter(prompter):
            result = runner.invoke(app, ["publish", str(project), "--yes"])

        assert result.exit_code == 0, result.output
        assert _version_of(project) == "1.0.1"
        assert "npm_secret" in seen_npmrc[0]
        assert not (project / ".npmrc").exists()
        repo.create_tag.assert_called_once_with("v1.0.1", "Release v1.0.1")
        assert "git push origin v1.0.1" in result.output
        assert "Publication Complete" in result.output
        assert "npm_secret" not in result.output

    def test_recommended_patch_is_first(
        self, project: Path, registry: MagicMock, repo: MagicMock
    ):
        """The menu leads with the suggested bump."""
        prompter = ScriptedPrompter(choices=[1], secrets=["123456"])

        with _with_prompter(prompter):
            runner.invoke(app, ["publish", str(project), "--yes"])

        question, options = prompter.menus[0]
        assert question == "Select version update:"
        assert options[0].label == "Patch (1.0.1) - Bug fixes (Recommended)"
        assert len(options) == 3

    def test_otp_publish(self, project: Path, registry: MagicMock, repo: MagicMock):
        """--otp prompts for a code even with a token available."""
        (project / ".env").write_text("NPM_PUBLISH_TOKEN=npm_secret\n")
        prompter = ScriptedPrompter(choices=[1], secrets=["123456"])

        with _with_prompter(prompter):
            result = runner.invoke(app, ["publish", str(project), "--otp", "--yes"])

        assert result.exit_code == 0, result.output
        registry.publish.assert_called_once_with(access="public", otp="123456")
        assert "Enter your npm OTP code" in prompter.questions

    def test_preflight_failure_publishes_nothing(
        self, project: Path, registry: MagicMock, repo: MagicMock
    ):
        """Failing tests stop the run before any version or registry change."""
        registry.run_script.side_effect = RegistryError(["npm", "run", "test:unit"], 1)

        with _with_prompter(ScriptedPrompter()):
            result = runner.invoke(app, ["publish", str(project), "--yes"])

        assert result.exit_code == 1
        assert "Tests failed" in result.output
        registry.publish.assert_not_called()
        repo.create_tag.assert_not_called()
        assert _version_of(project) == "1.0.0"

    def test_no_eligible_version(self, project: Path, registry: MagicMock, repo: MagicMock):
        """A registry far ahead of package.json fails with a remediation hint."""
        registry.get_published_version.side_effect = None
        registry.get_published_version.return_value = "5.0.0"

        with _with_prompter(ScriptedPrompter()):
            result = runner.invoke(app, ["publish", str(project), "--yes"])

        assert result.exit_code == 1
        assert "5.0.0" in result.output
        assert "Manually update the version" in result.output
        registry.publish.assert_not_called()

    def test_publish_failure_restores_npmrc(
        self, project: Path, registry: MagicMock, repo: MagicMock
    ):
        """A rejected token publish exits 1, suggests --otp and restores .npmrc."""
        (project / ".env").write_text("NPM_PUBLISH_TOKEN=npm_secret\n")
        (project / ".npmrc").write_text("save-exact=true\n")
        registry.publish.side_effect = RegistryError(["npm", "publish"], 1, stderr="E403")

        with _with_prompter(ScriptedPrompter(choices=[1])):
            result = runner.invoke(app, ["publish", str(project), "--yes"])

        assert result.exit_code == 1
        assert "--otp" in result.output
        assert (project / ".npmrc").read_text() == "save-exact=true\n"
        repo.create_tag.assert_not_called()

    def test_existing_tag_is_warning(self, project: Path, registry: MagicMock, repo: MagicMock):
        """An existing tag after publishing does not fail the run."""
        repo.tag_exists.return_value = True

        with _with_prompter(ScriptedPrompter(choices=[1], secrets=["123456"])):
            result = runner.invoke(app, ["publish", str(project), "--yes"])

        assert result.exit_code == 0, result.output
        assert "already exists" in result.output
        repo.create_tag.assert_not_called()

    def test_no_changes_declined(self, project: Path, registry: MagicMock, repo: MagicMock):
        """Declining to publish without changes stops cleanly."""
        repo.get_commit_summaries.return_value = []

        with _with_prompter(ScriptedPrompter(confirms=[False])):
            result = runner.invoke(app, ["publish", str(project)])

        assert result.exit_code == 0
        assert "Publish cancelled" in result.output
        registry.publish.assert_not_called()

    def test_final_confirmation_declined(
        self, project: Path, registry: MagicMock, repo: MagicMock
    ):
        """Without --yes the operator can still back out before publishing."""
        with _with_prompter(ScriptedPrompter(choices=[1], confirms=[False])):
            result = runner.invoke(app, ["publish", str(project)])

        assert result.exit_code == 0
        assert "Publish cancelled" in result.output
        registry.publish.assert_not_called()

    def test_missing_package_json(self, tmp_path: Path):
        """Running outside a package fails cleanly."""
        with patch("release_npm.config.loader.Path.is_file", return_value=False):
            result = runner.invoke(app, ["publish", str(tmp_path)])

        assert result.exit_code == 1
        assert "package.json" in result.output


class TestCheckCommand:
    """Tests for 'release-npm check'."""

    def test_lists_eligible_versions(self, project: Path, registry: MagicMock, repo: MagicMock):
        result = runner.invoke(app, ["check", str(project)])

        assert result.exit_code == 0, result.output
        assert "Eligible versions" in result.output
        assert "Patch (1.0.1)" in result.output
        registry.publish.assert_not_called()
        registry.run_script.assert_not_called()
        assert _version_of(project) == "1.0.0"

    def test_no_eligible_version(self, project: Path, registry: MagicMock, repo: MagicMock):
        registry.get_published_version.side_effect = None
        registry.get_published_version.return_value = "9.0.0"

        result = runner.invoke(app, ["check", str(project)])

        assert result.exit_code == 1
        assert "9.0.0" in result.output
