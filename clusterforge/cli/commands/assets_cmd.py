"""``clusterforge assets``: list registered assets."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from clusterforge.assets import DEFAULT_REGISTRY, TARGET_IDS
from clusterforge.core.asset import asset_id_of

console = Console()


def assets_cmd() -> None:
    """List every registered asset with its direct dependencies."""
    table = Table(title="Registered Assets")
    table.add_column("Asset", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Depends on")
    table.add_column("Target", justify="center")

    for asset_type in DEFAULT_REGISTRY:
        dependencies = [asset_id_of(d) for d in asset_type().dependencies()]
        target = "[green]Yes[/green]" if asset_type.asset_id in TARGET_IDS else ""
        table.add_row(asset_type.asset_id, asset_type.name, ", ".join(dependencies) or "-", target)

    console.print(table)
