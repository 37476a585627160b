"""Implementation of the 'check' command.

A read-only preview of what 'publish' would offer. Nothing is modified.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table

from release_npm.cli.commands.publish import ReleaseContext, fetch_published_version
from release_npm.core.history import analyze_history
from release_npm.core.selector import build_candidates
from release_npm.core.version import SemanticVersion
from release_npm.exceptions import NoEligibleVersion, ReleaseNpmError
from release_npm.project.package_json import get_package_json_version
from release_npm.prompts import RichPrompter

if TYPE_CHECKING:
    from rich.console import Console


def run_check(path: str | None, console: Console, err_console: Console) -> None:
    """Run the check command.

    Args:
        path: Optional path to the package directory
        console: Console for standard output
        err_console: Console for error output
    """
    try:
        ctx = ReleaseContext.create(path, console, RichPrompter(console))
        working = SemanticVersion.parse(get_package_json_version(ctx.project_path))
        published = fetch_published_version(ctx.registry, ctx.package_name)
    except ReleaseNpmError as e:
        err_console.print(f"[red]Error:[/] {escape(e.message)}")
        raise SystemExit(1) from e

    analysis = analyze_history(ctx.repo, ctx.config)

    table = Table(title=f"[bold]{escape(ctx.package_name)}[/]", show_header=False)
    table.add_column("Field", style="dim")
    table.add_column("Value")
    table.add_row("Package manager", ctx.registry.package_manager)
    table.add_row("Local version", str(working))
    table.add_row("Published version", str(published) if published else "[yellow]not published[/]")
    table.add_row("Last release tag", escape(analysis.last_tag or "none"))
    table.add_row("Commits since tag", str(analysis.commit_count))
    table.add_row(
        "Suggested bump",
        str(analysis.suggestion) if analysis.suggestion else "[yellow]none (no changes)[/]",
    )
    console.print(table)

    try:
        candidates = build_candidates(working, analysis.suggestion, published)
    except NoEligibleVersion as e:
        err_console.print(f"[red]Error:[/] {escape(e.message)}")
        if e.hint:
            err_console.print(f"[yellow]{escape(e.hint)}[/]")
        raise SystemExit(1) from e

    console.print("\n[bold]Eligible versions:[/]")
    for candidate in candidates:
        console.print(f"  • {escape(candidate.label)}")
