"""``clusterforge graph [ASSET]``: show the asset dependency graph."""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from clusterforge.assets import DEFAULT_REGISTRY
from clusterforge.core.asset import AssetError
from clusterforge.core.dependency_graph import DependencyGraph

console = Console()


def _add_branch(tree: Tree, graph: DependencyGraph, asset_id: str, seen: set[str]) -> None:
    for dependency in graph.get_dependencies(asset_id):
        if dependency in seen:
            tree.add(f"[dim]{dependency} (see above)[/dim]")
            continue
        seen.add(dependency)
        _add_branch(tree.add(f"[cyan]{dependency}[/cyan]"), graph, dependency, seen)


def graph_cmd(
    asset: Optional[str] = typer.Argument(
        None,
        help="Show the dependency tree of this asset only.",
    ),
) -> None:
    """Print one asset's dependency tree, or every asset in resolution order."""
    try:
        graph = DependencyGraph(DEFAULT_REGISTRY)
        if asset is not None:
            root = DEFAULT_REGISTRY.lookup(asset).asset_id
    except AssetError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    if asset is None:
        table = Table(title="Assets in resolution order")
        table.add_column("#", justify="right")
        table.add_column("Asset", style="cyan")
        table.add_column("Depends on")
        for i, asset_id in enumerate(graph.topological_order, start=1):
            table.add_row(str(i), asset_id, ", ".join(graph.get_dependencies(asset_id)) or "-")
        console.print(table)
        return

    tree = Tree(f"[bold cyan]{root}[/bold cyan]")
    _add_branch(tree, graph, root, {root})
    console.print(tree)
