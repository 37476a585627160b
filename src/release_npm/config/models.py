"""Configuration models for release-npm.

Configuration is read from the ``"release-npm"`` key of package.json::

    {
      "name": "my-cli",
      "version": "1.2.0",
      "release-npm": {
        "tag_prefix": "v",
        "preflight": {"test_script": "test"},
        "publish": {"access": "restricted"}
      }
    }

Every field has a default, so an absent key yields a working setup.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_BREAKING_MARKERS = ["breaking", "!:", "major"]
DEFAULT_FEATURE_MARKERS = ["feat", "feature", "add", "new"]


class _StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class CommitsConfig(_StrictModel):
    """Keyword markers used to classify commit summaries.

    Matching is substring-based over the lowercased summaries. Breaking
    markers are checked before feature markers.
    """

    breaking_markers: list[str] = Field(default_factory=lambda: list(DEFAULT_BREAKING_MARKERS))
    feature_markers: list[str] = Field(default_factory=lambda: list(DEFAULT_FEATURE_MARKERS))


class PreflightConfig(_StrictModel):
    """Gates that must pass before anything is published."""

    test_script: str = "test:unit"
    build_script: str = "build"
    run_tests: bool = True
    run_build: bool = True


class PublishConfig(_StrictModel):
    """npm publish settings."""

    access: str = Field(default="public", pattern=r"^(public|restricted)$")
    registry_url: str = "https://registry.npmjs.org/"
    verify_delay: float = Field(default=2.0, ge=0)
    check_contents: bool = True


class ReleaseNpmConfig(_StrictModel):
    """Root configuration."""

    tag_prefix: str = "v"
    remote: str = "origin"
    env_file: str = ".env"
    token_variable: str = "NPM_PUBLISH_TOKEN"

    commits: CommitsConfig = Field(default_factory=CommitsConfig)
    preflight: PreflightConfig = Field(default_factory=PreflightConfig)
    publish: PublishConfig = Field(default_factory=PublishConfig)

    @property
    def tag_pattern(self) -> str:
        """Glob matching release tags, e.g. ``v*``."""
        return f"{self.tag_prefix}*"
