"""``clusterforge create TARGET``: resolve a target and write its files.

Every asset the target depends on is loaded from the asset directory when
its files are already there, or generated otherwise.  Nothing is written
unless the whole run succeeds.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from clusterforge.config import ForgeSettings
from clusterforge.core.asset import AssetError
from clusterforge.core.fetcher import DirectoryFetcher
from clusterforge.core.resolver import Resolver
from clusterforge.core.writer import AssetWriter
from clusterforge.models.output import ResolutionSource

console = Console()


def create_cmd(
    target: str = typer.Argument(
        ...,
        help="Asset to create, e.g. 'manifests' or 'ignition-configs'.",
    ),
    asset_dir: Optional[Path] = typer.Option(
        None,
        "--dir",
        "-d",
        help="Asset directory to load existing files from (default: CLUSTERFORGE_ASSET_DIR or '.').",
    ),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Directory to write files to (default: the asset directory).",
    ),
    manifest: bool = typer.Option(
        True,
        "--manifest/--no-manifest",
        help="Write a digest manifest next to the files.",
    ),
) -> None:
    """Resolve TARGET and everything it depends on, then write the files."""
    overrides = {}
    if asset_dir is not None:
        overrides["asset_dir"] = asset_dir
    if output_dir is not None:
        overrides["output_dir"] = output_dir
    settings = ForgeSettings(**overrides)
    source_dir = settings.asset_dir
    destination = settings.effective_output_dir
    write_manifest = manifest and settings.write_manifest

    resolver = Resolver(DirectoryFetcher(source_dir))
    try:
        resolver.resolve(target)
        files = resolver.files()
        written = AssetWriter(
            destination, manifest_filename=settings.manifest_filename
        ).write(files, manifest_target=target if write_manifest else None)
    except (AssetError, ValueError, OSError) as exc:
        console.print(f"[bold red]Failed to create {escape(target)}:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    table = Table(title=f"Resolved assets for {target}")
    table.add_column("Asset", style="cyan")
    table.add_column("Name")
    table.add_column("Source", justify="center")
    for record in resolver.records:
        source = (
            "[green]loaded[/green]"
            if record.source == ResolutionSource.LOADED
            else "[yellow]generated[/yellow]"
        )
        table.add_row(record.asset_id, record.name, source)

    console.print(table)
    console.print(f"[bold green]Wrote {len(written)} files to {destination}[/bold green]")
