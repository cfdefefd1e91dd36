"""CLI interface for graph-merge."""

import logging
from pathlib import Path

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from graph_merge.config import MergeConfig

app = typer.Typer(
    name="graph-merge",
    help="Merge duplicate vertices within a single graph",
    add_completion=True,
    rich_markup_mode="rich",
)

console = Console()
logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool = False) -> None:
    """Configure logging level."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def _load_config() -> MergeConfig:
    """Settings from env, .env and graph-merge.yaml; exit 1 if invalid."""
    try:
        return MergeConfig()
    except (ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Error:[/red] Invalid configuration: {escape(str(e))}")
        raise typer.Exit(1) from None


def _load_rules(rules_path: Path | None):
    """Rules from a YAML file when given, otherwise the registered rules."""
    if rules_path is None:
        from graph_merge.rules.registry import discover_rules

        return discover_rules()

    from graph_merge.rules.loader import load_rules

    try:
        return load_rules(rules_path)
    except (ValueError, ValidationError) as e:
        console.print(
            f"[red]Error:[/red] Invalid rule file {escape(str(rules_path))}: {escape(str(e))}"
        )
        raise typer.Exit(1) from None


@app.command()
def merge(
    graph: str | None = typer.Option(
        None, "--graph", "-g", help="Configuration file to connect to the graph"
    ),
    rules: str | None = typer.Option(None, "--rules", "-r", help="YAML file of merge rules"),
    workers: int | None = typer.Option(
        None, "--workers", "-w", min=1, help="Threads used to compute grouping keys"
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logging"),
) -> None:
    """Merge nodes within a single graph."""
    _setup_logging(verbose)
    config = _load_config()

    graph_config = Path(graph) if graph else config.graph_config
    if graph_config is None:
        console.print(
            "[red]Error:[/red] Missing graph configuration. "
            "Pass [cyan]--graph[/cyan] or set GRAPH_MERGE_GRAPH_CONFIG."
        )
        raise typer.Exit(2)

    rules_path = Path(rules) if rules else config.rules_path
    merge_rules = _load_rules(rules_path)
    effective_workers = workers or config.workers

    from graph_merge.graph.factory import close_graph, open_graph
    from graph_merge.graph.store import GraphStoreError
    from graph_merge.merge.merger import merge_graph

    logger.info("Connecting to graph")
    try:
        store = open_graph(graph_config)
    except GraphStoreError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None

    console.print(f"[cyan]Graph:[/cyan] {store.vertex_count} vertices, {store.edge_count} edges")
    console.print(f"[cyan]Rules:[/cyan] {len(merge_rules)}")
    console.print()

    try:
        stats = merge_graph(store, merge_rules, workers=effective_workers)
        vertex_count, edge_count = store.vertex_count, store.edge_count
    except GraphStoreError as e:
        console.print(f"[red]Error:[/red] Merge aborted: {escape(str(e))}")
        raise typer.Exit(1) from None
    finally:
        close_graph(store)

    console.print("[green]Finished merging graph![/green]")
    console.print(f"  Rules applied: {stats['rules_applied']} ({stats['rules_skipped']} skipped)")
    console.print(f"  Merge sets: {stats['merge_sets']}")
    console.print(
        f"  Vertices merged: {stats['vertices_merged']} → {stats['vertices_created']}"
    )
    console.print(f"  Graph: {vertex_count} vertices, {edge_count} edges")


@app.command(name="rules")
def list_rules(
    rules: str | None = typer.Option(None, "--rules", "-r", help="YAML file of merge rules"),
) -> None:
    """List the merge rules that would be applied, in order."""
    config = _load_config()
    rules_path = Path(rules) if rules else config.rules_path
    merge_rules = _load_rules(rules_path)

    if not merge_rules:
        console.print("[yellow]No merge rules found.[/yellow]")
        raise typer.Exit(0)

    from graph_merge.rules.base import PropertiesMergeRule

    table = Table(title="Merge Rules", show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Name", style="green")
    table.add_column("Label")
    table.add_column("Properties")

    for index, rule in enumerate(merge_rules, start=1):
        properties = (
            ", ".join(rule.properties) if isinstance(rule, PropertiesMergeRule) else "-"
        )
        table.add_row(str(index), escape(rule.rule_name), escape(rule.label), escape(properties))

    console.print(table)
    if rules_path is None:
        console.print()
        console.print("Custom: [cyan]graph-merge merge -g graph.yaml --rules rules.yaml[/cyan]")


if __name__ == "__main__":
    app()
