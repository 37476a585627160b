"""Implementation of the 'publish' command.

The publish command runs the whole release: login check, preflight,
version selection, publish, tag and verification. Any fatal stage ends
the run with exit code 1; nothing is retried.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from rich.markup import escape
from rich.panel import Panel

from release_npm.config.loader import find_package_json, get_package_name, load_config
from release_npm.core.credentials import load_automation_token, resolve_credential
from release_npm.core.history import analyze_history
from release_npm.core.publisher import (
    check_package_contents,
    ensure_logged_in,
    publish,
    run_preflight,
)
from release_npm.core.selector import select_version
from release_npm.core.tagger import create_release_tag, verify_publication
from release_npm.core.version import SemanticVersion
from release_npm.exceptions import RegistryError, ReleaseNpmError
from release_npm.project.package_json import get_package_json_version, update_package_json_version
from release_npm.prompts import RichPrompter
from release_npm.registry.npm import NpmRegistry
from release_npm.vcs.git import GitRepository

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.console import Console

    from release_npm.config.models import ReleaseNpmConfig
    from release_npm.core.history import HistoryAnalysis
    from release_npm.prompts import Prompter

MAX_LISTED_COMMITS = 10


@dataclass
class ReleaseContext:
    """Everything one publish run works with, built once per invocation."""

    project_path: Path
    config: ReleaseNpmConfig
    package_name: str
    registry: NpmRegistry
    repo: GitRepository
    console: Console
    prompter: Prompter

    @classmethod
    def create(cls, path: str | None, console: Console, prompter: Prompter) -> ReleaseContext:
        start = Path(path) if path else Path.cwd()
        project_path = find_package_json(start).parent
        return cls(
            project_path=project_path,
            config=load_config(project_path),
            package_name=get_package_name(project_path),
            registry=NpmRegistry(project_path),
            repo=GitRepository(project_path),
            console=console,
            prompter=prompter,
        )

    def step(self, number: int, message: str) -> None:
        self.console.print(f"\n[bold cyan][{number}/6] {message}[/]")

    def ok(self, message: str) -> None:
        self.console.print(f"  [green]✓[/] {escape(message)}")

    def warn(self, message: str) -> None:
        self.console.print(f"  [yellow]⚠[/] {escape(message)}")


def fetch_published_version(registry: NpmRegistry, name: str) -> SemanticVersion | None:
    """Return the parsed version the registry serves, or None if unpublished."""
    raw = registry.get_published_version(name)
    return SemanticVersion.parse(raw) if raw else None


def run_publish(
    path: str | None,
    otp: bool,
    yes: bool,
    console: Console,
    err_console: Console,
    prompter: Prompter | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Run the publish command.

    Args:
        path: Optional path to the package directory
        otp: Force one-time-code authentication
        yes: Skip the final "ready to publish" confirmation
        console: Console for standard output
        err_console: Console for error output
        prompter: Operator interaction (defaults to a RichPrompter on console)
        sleep: Used for the propagation delay before verification
    """
    prompter = prompter or RichPrompter(console)

    try:
        ctx = ReleaseContext.create(path, console, prompter)
        _run(ctx, otp=otp, yes=yes, sleep=sleep)
    except RegistryError as e:
        err_console.print(f"[red]✗ Error:[/] {escape(e.message)}")
        if e.stderr.strip():
            err_console.print(f"[dim]{escape(e.stderr.strip())}[/]")
        raise SystemExit(1) from e
    except ReleaseNpmError as e:
        err_console.print(f"[red]✗ Error:[/] {escape(e.message)}")
        if e.hint:
            err_console.print(f"[yellow]{escape(e.hint)}[/]")
        raise SystemExit(1) from e


def _run(
    ctx: ReleaseContext,
    *,
    otp: bool,
    yes: bool,
    sleep: Callable[[float], None],
) -> None:
    console = ctx.console
    console.print(
        Panel(
            f"[bold]{ctx.package_name}[/] - npm publish\n"
            f"[dim]Package manager: {ctx.registry.package_manager}[/]",
            border_style="cyan",
        )
    )

    ctx.step(1, "Checking npm login status...")
    username = ensure_logged_in(ctx.registry, ctx.prompter)
    ctx.ok(f"Logged in as: {username}")

    ctx.step(2, f"Running preflight checks ({ctx.registry.package_manager})...")
    for stage in run_preflight(ctx.registry, ctx.config):
        ctx.ok(f"{stage.capitalize()} passed.")

    ctx.step(3, "Analyzing git changes...")
    analysis = analyze_history(ctx.repo, ctx.config)
    _print_analysis(ctx, analysis)

    if not analysis.has_changes:
        if not ctx.prompter.confirm("No changes detected. Publish anyway?", default=False):
            console.print("\nPublish cancelled.")
            return

    ctx.step(4, "Selecting version...")
    working = SemanticVersion.parse(get_package_json_version(ctx.project_path))
    published = fetch_published_version(ctx.registry, ctx.package_name)
    _print_version_status(ctx, working, published)

    if analysis.suggestion is not None:
        console.print(f"\nSuggested version bump: [bold]{analysis.suggestion}[/]")

    new_version = select_version(
        working,
        analysis.suggestion,
        published,
        ctx.prompter,
        refresh_published=lambda: fetch_published_version(ctx.registry, ctx.package_name),
    )

    ctx.step(5, "Updating package version...")
    if new_version == working:
        ctx.ok(f"Keeping version at {working}")
    else:
        update_package_json_version(ctx.project_path, str(new_version))
        ctx.ok(f"Updated version: {working} → {new_version}")

    if ctx.config.publish.check_contents:
        contents = check_package_contents(ctx.registry)
        if contents is not None:
            console.print(f"[dim]{escape(contents.strip())}[/]")
            ctx.ok("Package contents verified.")

    ctx.step(6, "Publishing to npm...")
    if not yes and not ctx.prompter.confirm("Ready to publish to npm. Continue?", default=False):
        console.print("\nPublish cancelled.")
        return

    token = None
    if not otp:
        token = load_automation_token(
            ctx.project_path / ctx.config.env_file, ctx.config.token_variable
        )
    if token:
        console.print(f"\nUsing {ctx.config.token_variable} from {ctx.config.env_file}...")
    else:
        console.print("\n[yellow]Two-factor authentication is required to publish.[/]")

    credential = resolve_credential(token, force_interactive=otp, prompter=ctx.prompter)
    publish(ctx.registry, credential, ctx.config)
    ctx.ok("Successfully published to npm!")

    tag = create_release_tag(
        ctx.repo,
        new_version,
        prefix=ctx.config.tag_prefix,
        remote=ctx.config.remote,
    )
    if tag.created:
        ctx.ok(f"Created git tag: {tag.tag}")
        console.print(f"\nTo push the tag to remote, run:\n  [cyan]{tag.push_command}[/]")
    else:
        ctx.warn(tag.warning or f"Git tag {tag.tag} was not created.")

    console.print("\nVerifying publication...")
    if verify_publication(
        ctx.registry,
        ctx.package_name,
        new_version,
        delay=ctx.config.publish.verify_delay,
        sleep=sleep,
    ):
        ctx.ok(f"Verified: {ctx.package_name}@{new_version} is live on npm!")
    else:
        ctx.warn("Could not verify publication. It may take a few minutes to appear.")

    console.print(
        Panel(
            f"[green]Published {ctx.package_name}@{new_version}![/]\n\n"
            "Users can now install with:\n"
            f"  [cyan]npm install -g {ctx.package_name}[/]\n\n"
            "Or update an existing installation:\n"
            f"  [cyan]npm update -g {ctx.package_name}[/]",
            title="[green]Publication Complete[/]",
            border_style="green",
        )
    )


def _print_analysis(ctx: ReleaseContext, analysis: HistoryAnalysis) -> None:
    if analysis.is_first_release:
        ctx.warn("No previous version tags found. This appears to be the first publish.")
        return

    if analysis.last_tag is None:
        return

    ctx.console.print(f"Last release tag: [cyan]{analysis.last_tag}[/]")
    if not analysis.commits:
        ctx.warn("No new commits since last publish.")
        return

    ctx.console.print(
        f"\nChanges since {analysis.last_tag} ({analysis.commit_count} commits):"
    )
    for summary in analysis.commits[:MAX_LISTED_COMMITS]:
        ctx.console.print(f"  • [cyan]{escape(summary)}[/]", highlight=False)
    if analysis.commit_count > MAX_LISTED_COMMITS:
        ctx.console.print(f"  ... and {analysis.commit_count - MAX_LISTED_COMMITS} more commits")


def _print_version_status(
    ctx: ReleaseContext,
    working: SemanticVersion,
    published: SemanticVersion | None,
) -> None:
    if published is None:
        ctx.console.print("[yellow]Package not yet published to npm (first publish).[/]")
        return

    ctx.console.print(f"Published version: [cyan]{published}[/]")
    ctx.console.print(f"Local version: [cyan]{working}[/]")
    if working == published:
        ctx.warn(f"Local version {working} is the same as the published version.")
    elif working < published:
        ctx.warn(f"Local version {working} is lower than published version {published}.")
    else:
        ctx.ok(f"Local version {working} is higher than published version {published}.")
