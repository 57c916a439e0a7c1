"""Main Typer application: imports and registers all CLI commands.

Entry point: ``clusterforge`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from clusterforge.cli.commands.assets_cmd import assets_cmd
from clusterforge.cli.commands.create import create_cmd
from clusterforge.cli.commands.graph import graph_cmd
from clusterforge.config import ForgeSettings

app = typer.Typer(
    name="clusterforge",
    help="Clusterforge: resolve, generate and write cluster installation assets.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="create", help="Resolve a target and write its files.")(create_cmd)
app.command(name="graph", help="Show the asset dependency graph.")(graph_cmd)
app.command(name="assets", help="List registered assets.")(assets_cmd)


def configure_logging(level: str) -> None:
    """Route log records through Rich on stderr."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main_callback(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (defaults to CLUSTERFORGE_LOG_LEVEL or INFO).",
    ),
) -> None:
    """Clusterforge: resolve, generate and write cluster installation assets."""
    configure_logging(log_level or ForgeSettings().log_level)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
