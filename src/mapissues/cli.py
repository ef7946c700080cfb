"""mapissues CLI - typer application entry point."""

from __future__ import annotations

import atexit
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from mapissues.config import ConfigError, load_config
from mapissues.context import EditContext
from mapissues.graph.graph import Graph
from mapissues.graph.history import History
from mapissues.graph.loader import GraphLoadError, load_graph
from mapissues.observability import close_file_logging, configure_logging, get_logger
from mapissues.preferences import YamlPreferenceStore
from mapissues.validation.checks import default_registry
from mapissues.validation.manager import (
    FEATURE_APPLICABILITY_OPTIONS,
    IssueManager,
)

if TYPE_CHECKING:
    from mapissues.validation.issue import Issue

load_dotenv()

app = typer.Typer(
    name="mi",
    help="mapissues: validate edits to map entity graphs.",
    no_args_is_help=True,
)
prefs_app = typer.Typer(help="Show or change stored preferences.", no_args_is_help=True)
app.add_typer(prefs_app, name="prefs")

console = Console()
log = get_logger(__name__)

SEVERITY_STYLES = {
    "error": "[red]error[/red]",
    "warning": "[yellow]warning[/yellow]",
}


@app.callback()
def main(
    verbose: Annotated[
        int,
        typer.Option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity: -v for INFO, -vv for DEBUG.",
        ),
    ] = 0,
    log_dir: Annotated[
        Path | None,
        typer.Option(
            "--log-dir",
            help="Also write every log event as JSONL to this directory.",
            envvar="MAPISSUES_LOG_DIR",
        ),
    ] = None,
) -> None:
    """mapissues: validate edits to map entity graphs."""
    configure_logging(verbosity=verbose, log_to_file=log_dir is not None, log_dir=log_dir)
    if log_dir is not None:
        atexit.register(close_file_logging)


@app.command()
def version() -> None:
    """Show version information."""
    from mapissues import __version__

    console.print(f"mapissues v{__version__}")


def _load_or_exit(path: Path) -> Graph:
    try:
        return load_graph(path)
    except GraphLoadError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e


def _issue_table(issues: list[Issue], title: str) -> Table:
    table = Table(title=title)
    table.add_column("Severity", style="bold")
    table.add_column("Kind", style="cyan")
    table.add_column("Entities", style="dim")
    table.add_column("Message")
    for issue in issues:
        table.add_row(
            SEVERITY_STYLES.get(issue.severity, issue.severity),
            issue.kind,
            ", ".join(issue.entity_ids) or "-",
            issue.message,
        )
    return table


@app.command()
def check(
    file: Annotated[Path, typer.Argument(help="JSON entity file to validate.")],
    base: Annotated[
        Path | None,
        typer.Option(
            "--base",
            "-b",
            help="Entity file before the edits. Without it, every entity counts as created.",
        ),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="YAML validation config file."),
    ] = None,
    features: Annotated[
        str | None,
        typer.Option(
            "--features",
            "-f",
            help="Show issues for 'edited' or 'all' features (default: stored preference).",
        ),
    ] = None,
    severity: Annotated[
        str | None,
        typer.Option("--severity", "-s", help="Only show 'warning' or 'error' issues."),
    ] = None,
) -> None:
    """Validate an entity file and print the issues found."""
    if severity is not None and severity not in ("warning", "error"):
        console.print(
            f"[red]Error:[/red] --severity must be 'warning' or 'error', not {severity!r}"
        )
        raise typer.Exit(2)
    if features is not None and features not in FEATURE_APPLICABILITY_OPTIONS:
        console.print(f"[red]Error:[/red] --features must be 'edited' or 'all', not {features!r}")
        raise typer.Exit(2)

    try:
        validation_config = load_config(config)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    head = _load_or_exit(file)
    base_graph = _load_or_exit(base) if base is not None else Graph.empty()

    try:
        context = EditContext(
            base_graph,
            preferences=YamlPreferenceStore(),
            config=validation_config,
        )
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    context.perform(lambda _graph: head, annotation=f"Load {file.name}")
    manager = context.manager

    scope = features or manager.get_feature_applicability()
    issues = manager.get_displayed_issues(scope)  # type: ignore[arg-type]

    if severity is not None:
        issues = [i for i in issues if i.severity == severity]

    log.info("check_complete", file=str(file), shown=len(issues), scope=scope)

    if not issues:
        console.print(f"[green]No issues[/green] ({scope} features)")
        return

    console.print(_issue_table(issues, f"Issues in {file.name} ({scope} features)"))
    warnings = sum(1 for i in issues if i.severity == "warning")
    errors = len(issues) - warnings
    console.print(f"{errors} error(s), {warnings} warning(s)")
    if errors:
        raise typer.Exit(1)


@app.command("checks")
def list_checks() -> None:
    """List the built-in checks."""
    table = Table(title="Checks")
    table.add_column("Name", style="cyan")
    table.add_column("Scope")
    table.add_column("Description", style="dim")
    registry = default_registry()
    for name in registry.check_names:
        meta = registry.get_meta(name)
        if meta is not None:
            table.add_row(meta.name, meta.scope, meta.description)
    console.print(table)


@prefs_app.command("show")
def prefs_show() -> None:
    """Show stored preferences."""
    store = YamlPreferenceStore()
    manager = IssueManager(History(), preferences=store)
    console.print(f"Preferences file: [dim]{store.path}[/dim]")
    console.print(f"Issue features: [bold]{manager.get_feature_applicability()}[/bold]")


@prefs_app.command("set-applicability")
def prefs_set_applicability(
    value: Annotated[str, typer.Argument(help="'edited' or 'all'.")],
) -> None:
    """Choose whether issues are shown for edited features or all features."""
    if value not in FEATURE_APPLICABILITY_OPTIONS:
        console.print(
            f"[red]Error:[/red] expected one of {', '.join(FEATURE_APPLICABILITY_OPTIONS)}, "
            f"got {value!r}"
        )
        raise typer.Exit(1)
    store = YamlPreferenceStore()
    manager = IssueManager(History(), preferences=store)
    manager.set_feature_applicability(value)  # type: ignore[arg-type]
    console.print(f"Issue features set to [bold]{value}[/bold]")
