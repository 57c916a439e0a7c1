"""Clusterforge CLI: Typer-based command-line interface.

Provides the ``clusterforge`` command with subcommands for creating
targets, inspecting the dependency graph and listing registered assets.

All output uses Rich for formatted terminal display.
"""
