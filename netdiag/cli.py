"""
netdiag - CLI Interface

Command-line interface for inspecting the runbook catalog.
"""

from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import config
from .rca.pattern_matcher import PatternMatcher, PatternCompileError
from .runbook import RunbookLoader, RunbookRegistry, Severity
from .runbook.results import severity_icon


console = Console()

SEVERITY_STYLES = {
    Severity.INFO: "dim",
    Severity.WARNING: "yellow",
    Severity.ERROR: "red",
    Severity.CRITICAL: "bold red",
}


def _load_registry(runbook_dir: Optional[str]) -> RunbookRegistry:
    loader = RunbookLoader(runbook_dir=runbook_dir or config.RUNBOOK_DIR)
    loader.load_all()
    return loader.registry


@click.group()
@click.version_option(version="0.1.0")
@click.option("--runbook-dir", "-d", help="Extra directory of runbook YAML files")
@click.option("--log-level", "-l", help="Logging level (default from NETDIAG_LOG_LEVEL)")
@click.pass_context
def cli(ctx, runbook_dir: Optional[str], log_level: Optional[str]):
    """netdiag - runbook-driven fault diagnosis for managed firewalls."""
    config.configure_logging(log_level)
    ctx.ensure_object(dict)
    ctx.obj["registry"] = _load_registry(runbook_dir)


@cli.command("list")
@click.option("--category", "-c", help="Only runbooks in this category")
@click.pass_context
def list_runbooks(ctx, category: Optional[str]):
    """List available runbooks."""
    registry: RunbookRegistry = ctx.obj["registry"]
    runbooks = registry.list_by_category(category) if category else registry.list()

    table = Table(title="Runbooks")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Category", style="green")
    table.add_column("Steps", justify="right")
    table.add_column("Remote exec")

    for rb in sorted(runbooks, key=lambda r: r.id):
        table.add_row(
            rb.id,
            rb.name,
            rb.category,
            str(len(rb.steps)),
            "yes" if rb.requires_remote_exec else "",
        )

    console.print(table)


@cli.command()
@click.pass_context
def categories(ctx):
    """List runbook categories."""
    registry: RunbookRegistry = ctx.obj["registry"]
    for category in sorted(registry.categories()):
        count = len(registry.list_by_category(category))
        console.print(f"[green]{category}[/green] ({count})")


@cli.command()
@click.argument("runbook_id")
@click.pass_context
def show(ctx, runbook_id: str):
    """Show the steps and patterns of a runbook."""
    registry: RunbookRegistry = ctx.obj["registry"]
    runbook, found = registry.get(runbook_id)
    if not found:
        console.print(f"[red]Runbook not found: {runbook_id}[/red]")
        raise SystemExit(1)

    console.print(Panel.fit(
        f"[bold]{runbook.name}[/bold]\n"
        f"{runbook.description}\n"
        f"Category: [green]{runbook.category or '-'}[/green]  "
        f"Tags: {', '.join(runbook.tags) or '-'}",
        title=runbook.id,
    ))

    for index, step in enumerate(runbook.steps, start=1):
        action = step.command or step.api_call
        required = " [bold](required)[/bold]" if step.required else ""
        console.print(f"{index}. [cyan]{step.name or step.id}[/cyan] - {action}{required}")
        for pattern in step.patterns:
            style = SEVERITY_STYLES.get(pattern.severity, "")
            console.print(
                f"     [{style}]{escape(f'{severity_icon(pattern.severity):<5}')} "
                f"{pattern.severity.value:<8}[/{style}] "
                f"{pattern.name or pattern.id}: {pattern.message}"
            )


@cli.command()
@click.pass_context
def validate(ctx):
    """Compile every pattern in the catalog."""
    registry: RunbookRegistry = ctx.obj["registry"]
    matcher = PatternMatcher()
    failures = 0

    for runbook in registry.list():
        for step in runbook.steps:
            for pattern in step.patterns:
                try:
                    matcher.match(pattern, "")
                except PatternCompileError as e:
                    failures += 1
                    console.print(f"[red]{runbook.id}/{step.id}: {escape(str(e))}[/red]")

    if failures:
        console.print(f"[red]{failures} invalid pattern(s)[/red]")
        raise SystemExit(1)

    console.print(
        f"[green]{registry.count()} runbooks, "
        f"{matcher.cache_size} distinct patterns OK[/green]"
    )


def main():
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
