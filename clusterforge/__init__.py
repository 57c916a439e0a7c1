"""Clusterforge: dependency-resolved, cached generation of cluster installation assets.

Assets (install config, ignition configs, machine configs, cloud provider
config, bootkube templates) declare the assets they depend on.  A
``Resolver`` walks that graph depth-first, loads each asset from a previous
run's files when they exist and generates it otherwise, and an
``AssetWriter`` writes the resulting file set.
"""

__version__ = "0.1.0"
__description__ = "Dependency-resolved, cached generation of cluster installation assets"

from clusterforge.core.fetcher import DirectoryFetcher
from clusterforge.core.resolver import Resolver
from clusterforge.core.writer import AssetWriter
from clusterforge.cli.app import app as cli

__all__ = ["AssetWriter", "DirectoryFetcher", "Resolver", "cli", "__version__"]
