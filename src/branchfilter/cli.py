"""Command line surface for the inactive branch filter."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from branchfilter import __version__
from branchfilter.activity import source_resolver
from branchfilter.config import FilterConfigError, config_path_for_repo, load_config, write_default_config
from branchfilter.engine import InactiveBranchFilter
from branchfilter.git import GitSource, discover_branches, find_repo_root
from branchfilter.patterns import parse_pattern_list

app = typer.Typer(
    name="branchfilter",
    help="Decide which branches to keep based on allow/deny lists and inactivity",
    no_args_is_help=True,
)
console = Console()


def _version_option_callback(value: bool) -> None:
    """Handle eager --version option."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def _cli_callback(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show branchfilter version and exit.",
        is_eager=True,
        callback=_version_option_callback,
    ),
) -> None:
    _ = version


@app.command("evaluate")
def evaluate_cmd(
    repo: Path | None = typer.Option(
        None,
        "--repo",
        help="Repository path (defaults to current working directory).",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Config file (defaults to .branchfilter.yaml at the repo root).",
    ),
    inactivity_days: int | None = typer.Option(
        None,
        "--inactivity-days",
        help="Exclude branches without activity for this many days (0 disables).",
    ),
    allow: str | None = typer.Option(
        None,
        "--allow",
        help="Allow list patterns, comma or newline separated.",
    ),
    deny: str | None = typer.Option(
        None,
        "--deny",
        help="Deny list patterns, comma or newline separated.",
    ),
    tags: bool = typer.Option(
        True,
        "--tags/--no-tags",
        help="Include tags in discovery.",
    ),
    now_ms: int | None = typer.Option(
        None,
        "--now-ms",
        help="Evaluate as of this epoch-millisecond instant instead of the wall clock.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Emit one JSON object per branch.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Print one diagnostic line per decision to stderr.",
    ),
) -> None:
    """Evaluate every branch of a local repository."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    try:
        repo_root = find_repo_root(repo)
        filter_config = load_config(
            config or config_path_for_repo(repo_root),
            required=config is not None,
            inactivity_days=inactivity_days,
            allow_list=allow,
            deny_list=deny,
        )
        branches = discover_branches(repo_root, include_tags=tags)
    except (FilterConfigError, RuntimeError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc

    branch_filter = InactiveBranchFilter(filter_config)
    for invalid in (*branch_filter.allow.invalid, *branch_filter.deny.invalid):
        console.print(
            f"[yellow]Warning: skipped invalid pattern {escape(repr(invalid.text))}: "
            f"{escape(invalid.error)}[/yellow]"
        )

    resolver = source_resolver(GitSource(repo_root))
    sink = (lambda line: typer.echo(line, err=True)) if verbose else None

    table = Table("branch", "kind", "decision", "reason")
    for branch in branches:
        decision = branch_filter.decide(branch, resolver, now_ms=now_ms, sink=sink)
        if as_json:
            payload = {"branch": branch.name, "kind": branch.kind.value, **decision.to_dict()}
            typer.echo(json.dumps(payload, sort_keys=True))
            continue
        style = "red" if decision.excluded else "green"
        table.add_row(
            escape(branch.name),
            branch.kind.value,
            f"[{style}]{decision.verdict}[/{style}]",
            escape(decision.describe()),
        )

    if not as_json:
        console.print(table)


@app.command("patterns")
def patterns_cmd(
    text: str = typer.Argument(..., help="Pattern list text, comma or newline separated."),
) -> None:
    """Show how a pattern list is parsed."""
    pattern_set = parse_pattern_list(text)
    for source in pattern_set.sources:
        typer.echo(f"pattern={source}")
    for invalid in pattern_set.invalid:
        typer.echo(f"invalid={invalid.text} error={invalid.error}", err=True)
    if pattern_set.invalid:
        raise typer.Exit(1)


@app.command("init")
def init_cmd(
    repo: Path = typer.Option(
        Path("."),
        "--repo",
        help="Repository root path",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        help="Overwrite an existing config file",
    ),
) -> None:
    """Write the default filter config."""
    try:
        created = write_default_config(repo, force=force)
    except FileExistsError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        console.print("[yellow]Use --force to overwrite.[/yellow]")
        raise typer.Exit(1) from exc

    console.print("[green]✓ Branch filter config initialized[/green]")
    console.print(f"[cyan]Path:[/cyan] {created}")
