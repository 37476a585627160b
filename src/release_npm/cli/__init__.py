"""Command-line interface for release-npm."""

from __future__ import annotations

from release_npm.cli.app import app, main

__all__ = ["app", "main"]
